from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import as_naive_local
from ..common.validators import is_blank
from ..core.enums import FeeKind, FeeStatus
from .factory import ReconciliationStrategyFactory
from .model import ZERO, FeeLedger, FeeLedgerRow, FeeTransaction, to_money

logger = logging.getLogger(__name__)


def row_status(due_balance: Decimal, running_paid: Decimal) -> FeeStatus:
    if due_balance <= ZERO:
        return FeeStatus.PAID
    if running_paid > ZERO:
        return FeeStatus.PARTIAL
    return FeeStatus.DUE


def _walk_key(indexed: tuple[int, FeeTransaction]) -> tuple[int, datetime, int]:
    # Rows without a timestamp are opening/auto-generated rows and go first.
    position, tx = indexed
    if tx.timestamp is None:
        return (0, datetime.min, position)
    return (1, as_naive_local(tx.timestamp), position)


class FeeReconciler:
    """Turns unordered payments into per-period running balances.

    The authoritative period total is the largest `total_due` seen in the period,
    which protects against stale totals carried by older transactions.
    """

    def __init__(self, *, strategy_factory: Optional[ReconciliationStrategyFactory] = None):
        self._factory = strategy_factory or ReconciliationStrategyFactory()

    def reconcile(
        self,
        transactions: Iterable[FeeTransaction],
        *,
        kind: FeeKind,
        person_id: str = "",
        expected_periods: Sequence[str] = (),
        schedule_amount: Optional[Decimal] = None,
    ) -> FeeLedger:
        strategy = self._factory.for_kind(kind)

        skipped = 0
        groups: dict[str, list[FeeTransaction]] = {}
        for tx in transactions:
            if is_blank(tx.person_id) or is_blank(tx.period):
                skipped += 1
                continue
            if tx.kind != kind:
                continue
            person_id = person_id or tx.person_id
            groups.setdefault(tx.period.strip(), []).append(tx)

        rows: list[FeeLedgerRow] = []
        for period, group in groups.items():
            rows.extend(self._walk_period(period, group, kind=kind))

        if schedule_amount is not None and person_id:
            for period in strategy.missing_periods(present=groups.keys(), expected=expected_periods):
                logger.debug("gap-filling %s %s for %s", kind.value, period, person_id)
                rows.append(strategy.opening_row(person_id=person_id, period=period, amount=to_money(schedule_amount)))

        if skipped:
            logger.debug("dropped %d malformed fee transactions", skipped)

        rows.sort(key=lambda r: (r.period, r.sequence), reverse=True)
        return FeeLedger(person_id=person_id, kind=kind, rows=tuple(rows), skipped=skipped)

    def _walk_period(self, period: str, group: list[FeeTransaction], *, kind: FeeKind) -> list[FeeLedgerRow]:
        authoritative_total = max(max(to_money(tx.total_due) for tx in group), ZERO)

        running_paid = ZERO
        out: list[FeeLedgerRow] = []
        for sequence, (_, tx) in enumerate(sorted(enumerate(group), key=_walk_key)):
            paid = to_money(tx.amount_paid)
            running_paid += paid
            due_balance = max(ZERO, authoritative_total - running_paid)
            out.append(
                FeeLedgerRow(
                    person_id=tx.person_id,
                    period=period,
                    kind=kind,
                    total_due=authoritative_total,
                    amount_paid=paid,
                    running_paid=running_paid,
                    due_balance=due_balance,
                    status=row_status(due_balance, running_paid),
                    timestamp=tx.timestamp,
                    semester=tx.semester,
                    sequence=sequence,
                )
            )
        return out
