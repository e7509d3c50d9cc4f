from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.enums import Session
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_bool, requested_ids, result_key
from .model import AttendancePunch
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def punches_for(
        self,
        person_ids: Sequence[str],
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Mapping[str, Sequence[AttendancePunch]]:
        if not person_ids:
            return {}

        clauses = [f"person_id IN ({in_clause(person_ids)})"]
        params: list[object] = list(person_ids)

        if start_date is not None:
            clauses.append("punch_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("punch_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, punch_date, session, present
                FROM attendance_punches
                WHERE {where}
                ORDER BY punch_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        requested = requested_ids(person_ids)
        out: dict[str, list[AttendancePunch]] = {}
        for r in rows:
            out.setdefault(result_key(requested, r["person_id"]), []).append(
                AttendancePunch(
                    person_id=r["person_id"],
                    date=r["punch_date"],
                    session=Session(r["session"]),
                    present=normalize_bool(r["present"]),
                )
            )
        return out
