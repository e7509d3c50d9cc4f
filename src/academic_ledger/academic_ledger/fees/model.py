from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ..core.enums import FeeKind, FeeStatus

ZERO = Decimal("0")


def to_money(value: Any) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class FeeTransaction:
    """Domain entity: one payment event.

    `total_due` is the period total as known when the payment was recorded; it can
    disagree between transactions of the same period.
    """

    person_id: str
    period: Optional[str]
    kind: FeeKind
    total_due: Decimal
    amount_paid: Decimal
    timestamp: Optional[datetime] = None
    semester: Optional[int] = None


@dataclass(frozen=True)
class FeeLedgerRow:
    """Read-model: one transaction with its running balance inside the period."""

    person_id: str
    period: str
    kind: FeeKind
    total_due: Decimal
    amount_paid: Decimal
    running_paid: Decimal
    due_balance: Decimal
    status: FeeStatus
    timestamp: Optional[datetime] = None
    semester: Optional[int] = None
    sequence: int = 0
    synthetic: bool = False


@dataclass(frozen=True)
class FeeTotals:
    total_fees: Decimal = ZERO
    paid_amount: Decimal = ZERO
    due_amount: Decimal = ZERO
    paid_count: int = 0
    partial_count: int = 0
    due_count: int = 0


def person_fee_status(latest_rows: list[FeeLedgerRow]) -> Optional[FeeStatus]:
    if not latest_rows:
        return None
    if sum((r.due_balance for r in latest_rows), ZERO) <= ZERO:
        return FeeStatus.PAID
    if sum((r.running_paid for r in latest_rows), ZERO) > ZERO:
        return FeeStatus.PARTIAL
    return FeeStatus.DUE


@dataclass(frozen=True)
class FeeLedger:
    """All ledger rows of one person for one fee kind, in display order
    (period descending, latest transaction first)."""

    person_id: str
    kind: FeeKind
    rows: tuple[FeeLedgerRow, ...] = field(default_factory=tuple)
    skipped: int = 0

    def latest_rows(self) -> list[FeeLedgerRow]:
        """The closing row of every period; summing all rows would double-count partial payments."""
        latest: dict[str, FeeLedgerRow] = {}
        for r in self.rows:
            current = latest.get(r.period)
            if current is None or r.sequence > current.sequence:
                latest[r.period] = r
        return [latest[p] for p in sorted(latest, reverse=True)]

    @property
    def status(self) -> Optional[FeeStatus]:
        return person_fee_status(self.latest_rows())

    def totals(self) -> FeeTotals:
        return fold_fee_totals([self])


def fold_fee_totals(ledgers: list[FeeLedger]) -> FeeTotals:
    total = paid = due = ZERO
    counts = {FeeStatus.PAID: 0, FeeStatus.PARTIAL: 0, FeeStatus.DUE: 0}

    for ledger in ledgers:
        latest = ledger.latest_rows()
        for r in latest:
            total += r.total_due
            paid += r.running_paid
            due += r.due_balance
        status = person_fee_status(latest)
        if status is not None:
            counts[status] += 1

    return FeeTotals(
        total_fees=total,
        paid_amount=paid,
        due_amount=due,
        paid_count=counts[FeeStatus.PAID],
        partial_count=counts[FeeStatus.PARTIAL],
        due_count=counts[FeeStatus.DUE],
    )
