from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from ..common.validators import is_blank
from ..core.constants import DEFAULT_EXTERNAL_MIN, DEFAULT_INTERNAL_MIN, DEFAULT_TOTAL_MIN
from ..core.enums import PassRateMode
from .model import AcademicEvaluation, AcademicSummary, MarkEntry, MarkResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PassThresholds:
    internal_min: float = DEFAULT_INTERNAL_MIN
    external_min: float = DEFAULT_EXTERNAL_MIN
    total_min: float = DEFAULT_TOTAL_MIN


def aggregate_percentage(total_score: float, max_score: float) -> float:
    """Mark-weighted: subjects with a larger max weigh proportionally more."""
    if max_score <= 0:
        return 0.0
    return min(max(total_score / max_score * 100, 0.0), 100.0)


def recommended_pass_rate_mode(*, semester: Optional[int], subject_code: Optional[str]) -> PassRateMode:
    """Narrow scopes (one term or one subject) read best per student, broad overviews per exam."""
    if semester is not None or subject_code is not None:
        return PassRateMode.STUDENT
    return PassRateMode.EXAM_INSTANCE


class AcademicEvaluator:
    def __init__(self, thresholds: Optional[PassThresholds] = None):
        self._thresholds = thresholds or PassThresholds()

    @property
    def thresholds(self) -> PassThresholds:
        return self._thresholds

    def passes(self, entry: MarkEntry) -> bool:
        t = self._thresholds
        internal = entry.internal_score or 0
        external = entry.external_score or 0
        total = entry.total_score or 0
        return internal >= t.internal_min and external >= t.external_min and total >= t.total_min

    def evaluate(
        self,
        entries: Iterable[MarkEntry],
        *,
        term: Optional[int] = None,
        subject_code: Optional[str] = None,
    ) -> AcademicEvaluation:
        skipped = 0
        results: list[MarkResult] = []

        for e in entries:
            if is_blank(e.person_id) or is_blank(e.subject_code) or e.term is None:
                skipped += 1
                continue
            if term is not None and e.term != term:
                continue
            if subject_code is not None and e.subject_code != subject_code:
                continue
            results.append(MarkResult(entry=e, passed=self.passes(e)))

        if skipped:
            logger.debug("dropped %d malformed mark entries", skipped)

        passed_entries = sum(1 for r in results if r.passed)
        total_score = float(sum(r.entry.total_score or 0 for r in results))
        max_score = float(sum(r.entry.max_score or 0 for r in results))

        pass_count = fail_count = 0
        if results:
            if passed_entries == len(results):
                pass_count = 1
            else:
                fail_count = 1

        summary = AcademicSummary(
            aggregate_percentage=aggregate_percentage(total_score, max_score),
            pass_count=pass_count,
            fail_count=fail_count,
            passed_entries=passed_entries,
            failed_entries=len(results) - passed_entries,
            total_score=total_score,
            max_score=max_score,
            skipped=skipped,
        )
        return AcademicEvaluation(results=tuple(results), summary=summary)


def combine_academic_summaries(summaries: Iterable[AcademicSummary]) -> AcademicSummary:
    pass_count = fail_count = passed = failed = skipped = 0
    total_score = max_score = 0.0
    for s in summaries:
        pass_count += s.pass_count
        fail_count += s.fail_count
        passed += s.passed_entries
        failed += s.failed_entries
        total_score += s.total_score
        max_score += s.max_score
        skipped += s.skipped

    return AcademicSummary(
        aggregate_percentage=aggregate_percentage(total_score, max_score),
        pass_count=pass_count,
        fail_count=fail_count,
        passed_entries=passed,
        failed_entries=failed,
        total_score=total_score,
        max_score=max_score,
        skipped=skipped,
    )
