from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Collection, Optional, Sequence

from ...core.enums import FeeKind, FeeStatus
from ..model import ZERO, FeeLedgerRow


class ReconciliationStrategy(ABC):
    """Strategy Pattern: per fee kind, decide which periods must show up even without payments."""

    kind: FeeKind

    @abstractmethod
    def missing_periods(self, *, present: Collection[str], expected: Sequence[str]) -> list[str]:
        raise NotImplementedError

    def opening_row(self, *, person_id: str, period: str, amount: Decimal, semester: Optional[int] = None) -> FeeLedgerRow:
        due = max(amount, ZERO)
        return FeeLedgerRow(
            person_id=person_id,
            period=period,
            kind=self.kind,
            total_due=due,
            amount_paid=ZERO,
            running_paid=ZERO,
            due_balance=due,
            status=FeeStatus.DUE if due > ZERO else FeeStatus.PAID,
            semester=semester,
            synthetic=True,
        )
