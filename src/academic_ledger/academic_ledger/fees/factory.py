from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import FeeKind
from .strategies.base import ReconciliationStrategy
from .strategies.exam_strategy import ExamStrategy
from .strategies.tuition_strategy import TuitionStrategy


@dataclass
class ReconciliationStrategyFactory:
    """Factory Pattern: choose the reconciliation strategy for a fee kind."""

    def for_kind(self, kind: FeeKind) -> ReconciliationStrategy:
        if kind == FeeKind.EXAM:
            return ExamStrategy()
        return TuitionStrategy()
