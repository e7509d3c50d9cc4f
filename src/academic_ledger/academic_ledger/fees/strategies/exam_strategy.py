from __future__ import annotations

from typing import Collection, Sequence

from ...core.enums import FeeKind
from .base import ReconciliationStrategy


class ExamStrategy(ReconciliationStrategy):
    """Exam fees are opportunistic per semester; nothing is scheduled in advance."""

    kind = FeeKind.EXAM

    def missing_periods(self, *, present: Collection[str], expected: Sequence[str]) -> list[str]:
        return []
