from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, requested_ids, result_key
from .model import MarkEntry
from .repository import MarkRepository


def _score(value) -> Optional[float]:
    return float(value) if value is not None else None


class MySQLMarkRepository(MarkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def marks_for(
        self,
        person_ids: Sequence[str],
        *,
        term: Optional[int] = None,
    ) -> Mapping[str, Sequence[MarkEntry]]:
        if not person_ids:
            return {}

        clauses = [f"person_id IN ({in_clause(person_ids)})"]
        params: list[object] = list(person_ids)
        if term is not None:
            clauses.append("term=%s")
            params.append(int(term))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, term, subject_code, subject_name,
                       internal_score, external_score, total_score, max_score
                FROM mark_entries
                WHERE {where}
                ORDER BY term ASC, subject_code ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        requested = requested_ids(person_ids)
        out: dict[str, list[MarkEntry]] = {}
        for r in rows:
            out.setdefault(result_key(requested, r["person_id"]), []).append(
                MarkEntry(
                    person_id=r["person_id"],
                    term=int(r["term"]),
                    subject_code=r["subject_code"],
                    subject_name=r.get("subject_name"),
                    internal_score=_score(r.get("internal_score")),
                    external_score=_score(r.get("external_score")),
                    total_score=float(r["total_score"]),
                    max_score=float(r["max_score"]),
                )
            )
        return out
