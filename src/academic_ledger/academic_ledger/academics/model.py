from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import PassRateMode


@dataclass(frozen=True)
class MarkEntry:
    """Domain entity: one subject result of one term."""

    person_id: str
    term: Optional[int]
    subject_code: str
    internal_score: Optional[float]
    external_score: Optional[float]
    total_score: float
    max_score: float
    subject_name: Optional[str] = None


@dataclass(frozen=True)
class MarkResult:
    entry: MarkEntry
    passed: bool


def _rate(numerator: int, denominator: int) -> float:
    return numerator / denominator * 100 if denominator > 0 else 0.0


@dataclass(frozen=True)
class AcademicSummary:
    """Same shape for one person and for a cohort.

    pass_count/fail_count count persons (strict: any failed subject fails the person);
    passed_entries/failed_entries count individual mark entries.
    """

    aggregate_percentage: float = 0.0
    pass_count: int = 0
    fail_count: int = 0
    passed_entries: int = 0
    failed_entries: int = 0
    total_score: float = 0.0
    max_score: float = 0.0
    skipped: int = 0

    @property
    def assessed_count(self) -> int:
        return self.pass_count + self.fail_count

    @property
    def total_entries(self) -> int:
        return self.passed_entries + self.failed_entries

    @property
    def student_pass_rate(self) -> float:
        return _rate(self.pass_count, self.assessed_count)

    @property
    def exam_pass_rate(self) -> float:
        return _rate(self.passed_entries, self.total_entries)

    def pass_rate(self, mode: PassRateMode) -> float:
        if mode == PassRateMode.STUDENT:
            return self.student_pass_rate
        return self.exam_pass_rate


@dataclass(frozen=True)
class AcademicEvaluation:
    results: tuple[MarkResult, ...] = field(default_factory=tuple)
    summary: AcademicSummary = field(default_factory=AcademicSummary)

    @property
    def result_label(self) -> Optional[str]:
        """'Pass' / 'Fail' for a single person, None when nothing was assessed."""
        if not self.results:
            return None
        return "Pass" if all(r.passed for r in self.results) else "Fail"
