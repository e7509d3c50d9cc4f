from __future__ import annotations

from typing import Collection, Sequence

from ...core.enums import FeeKind
from .base import ReconciliationStrategy


class TuitionStrategy(ReconciliationStrategy):
    """Tuition is scheduled per academic year; a year without payments still owes the full fee."""

    kind = FeeKind.TUITION

    def missing_periods(self, *, present: Collection[str], expected: Sequence[str]) -> list[str]:
        return [p for p in expected if p not in present]
