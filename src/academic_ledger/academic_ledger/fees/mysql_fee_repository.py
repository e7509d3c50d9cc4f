from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..core.enums import FeeKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, normalize_decimal, requested_ids, result_key
from .model import FeeTransaction
from .repository import FeeRepository


class MySQLFeeRepository(FeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def transactions_for(
        self,
        person_ids: Sequence[str],
        *,
        kind: Optional[FeeKind] = None,
        period: Optional[str] = None,
    ) -> Mapping[str, Sequence[FeeTransaction]]:
        if not person_ids:
            return {}

        clauses = [f"person_id IN ({in_clause(person_ids)})"]
        params: list[object] = list(person_ids)

        if kind is not None:
            clauses.append("kind=%s")
            params.append(kind.value)
        if period is not None:
            clauses.append("TRIM(period)=%s")
            params.append(period.strip())

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT person_id, period, kind, semester, total_due, amount_paid, paid_at
                FROM fee_transactions
                WHERE {where}
                ORDER BY transaction_id ASC
                """,
                tuple(params),
            )
            rows = fetchall(cur)

        requested = requested_ids(person_ids)
        out: dict[str, list[FeeTransaction]] = {}
        for r in rows:
            out.setdefault(result_key(requested, r["person_id"]), []).append(
                FeeTransaction(
                    person_id=r["person_id"],
                    period=r["period"],
                    kind=FeeKind(r.get("kind") or FeeKind.TUITION.value),
                    total_due=normalize_decimal(r.get("total_due")),
                    amount_paid=normalize_decimal(r.get("amount_paid")),
                    timestamp=r.get("paid_at"),
                    semester=int(r["semester"]) if r.get("semester") is not None else None,
                )
            )
        return out
