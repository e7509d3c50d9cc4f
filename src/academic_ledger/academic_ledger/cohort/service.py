from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..academics.evaluator import AcademicEvaluator, combine_academic_summaries, recommended_pass_rate_mode
from ..academics.model import AcademicEvaluation, AcademicSummary, MarkEntry
from ..academics.repository import MarkRepository
from ..attendance.aggregator import combine_summaries, day_records, summarize_days
from ..attendance.model import AttendancePunch, AttendanceSummary, DayRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import current_semester, intersect_ranges, program_periods, semester_period, semester_window
from ..common.validators import is_blank
from ..core.constants import DEFAULT_COMPARE_WORKERS
from ..core.enums import EligibilityBand, FeeKind, PassRateMode, PersonKind
from ..core.exceptions import ValidationError
from ..eligibility.classifier import EligibilityLabel, classify_summary
from ..fees.model import FeeLedger, FeeTotals, FeeTransaction, fold_fee_totals
from ..fees.reconciler import FeeReconciler
from ..fees.repository import FeeRepository
from ..registry.model import Person
from ..registry.repository import PersonRepository
from ..settings import LedgerSettings
from .filters import ScopeFilter

logger = logging.getLogger(__name__)

COMPARE_DIMENSIONS = ("institution", "department", "admission_year")


@dataclass(frozen=True)
class PersonReport:
    person: Person
    attendance: AttendanceSummary
    eligibility: EligibilityLabel
    days: tuple[DayRecord, ...]
    tuition: FeeLedger
    exam_fees: FeeLedger
    academics: AcademicEvaluation
    current_semester: Optional[int] = None


@dataclass(frozen=True)
class SkipCounts:
    """Malformed transactions dropped while aggregating (reported, never raised)."""

    attendance: int = 0
    fees: int = 0
    marks: int = 0

    @property
    def total(self) -> int:
        return self.attendance + self.fees + self.marks


@dataclass(frozen=True)
class ScopeReport:
    """Query output; identical shape for one person and for a cohort."""

    scope: ScopeFilter
    population: int
    attendance: AttendanceSummary
    eligibility_counts: Mapping[EligibilityBand, int]
    fees: FeeTotals
    exam_fees: FeeTotals
    academics: AcademicSummary
    skipped: SkipCounts = field(default_factory=SkipCounts)
    persons: Optional[tuple[PersonReport, ...]] = None

    def pass_rate(self, mode: PassRateMode) -> float:
        return self.academics.pass_rate(mode)

    @property
    def recommended_pass_rate_mode(self) -> PassRateMode:
        return recommended_pass_rate_mode(semester=self.scope.semester, subject_code=self.scope.subject_code)


@dataclass(frozen=True)
class PersonLookup:
    """Result variant of an individual lookup: callers branch on `found`."""

    person_id: str
    report: Optional[PersonReport] = None

    @property
    def found(self) -> bool:
        return self.report is not None


class CohortQueryService:
    """Use case: compute attendance, fee and academic metrics for a scope.

    Every consumer (dashboard summary, detail table, CSV export, single-person view)
    goes through `_evaluate()`, so the numbers cannot diverge between them.
    """

    def __init__(
        self,
        persons: PersonRepository,
        attendance: AttendanceRepository,
        fees: FeeRepository,
        marks: MarkRepository,
        *,
        settings: Optional[LedgerSettings] = None,
        reconciler: Optional[FeeReconciler] = None,
        evaluator: Optional[AcademicEvaluator] = None,
    ):
        self._persons = persons
        self._attendance = attendance
        self._fees = fees
        self._marks = marks
        self._settings = settings or LedgerSettings()
        self._reconciler = reconciler or FeeReconciler()
        self._evaluator = evaluator or AcademicEvaluator(self._settings.pass_thresholds)

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    # ---- population ----

    def resolve_population(self, scope: ScopeFilter) -> list[Person]:
        scope.validate()

        if scope.is_individual:
            person = self._persons.get_by_id(scope.person_id)
            return [person] if person is not None and scope.matches(person) else []

        candidates = self._persons.list_persons(kind=scope.kind)
        population = [p for p in candidates if scope.matches(p)]
        population.sort(key=lambda p: p.person_id)
        logger.info("scope %s resolved to %d persons", scope.describe(), len(population))
        return population

    # ---- public queries ----

    def summary(self, scope: ScopeFilter) -> ScopeReport:
        """Dashboard path: cohort aggregates only."""
        return self._fold(scope, self._evaluate(scope), include_persons=False)

    def detail(self, scope: ScopeFilter) -> ScopeReport:
        """Search/detail path: cohort aggregates plus one report per person."""
        return self._fold(scope, self._evaluate(scope), include_persons=True)

    def person_report(self, person_id: str, *, scope: Optional[ScopeFilter] = None) -> PersonLookup:
        # Raises AmbiguousScopeError when `scope` carries cohort dimensions.
        individual = (scope or ScopeFilter()).with_changes(person_id=person_id)
        reports = self._evaluate(individual)
        if not reports:
            logger.info("person %s not found", person_id)
        return PersonLookup(person_id=person_id, report=reports[0] if reports else None)

    def export_records(self, scope: ScopeFilter) -> list[dict[str, Any]]:
        """Export path: one flattened record per person, in EXPORT_COLUMNS order."""
        from .export import export_record

        return [export_record(r) for r in self._evaluate(scope)]

    def compare(
        self,
        scope: ScopeFilter,
        *,
        dimension: str,
        values: Sequence[Any],
        max_workers: int = DEFAULT_COMPARE_WORKERS,
    ) -> dict[Any, ScopeReport]:
        """Fan out one summary per value of `dimension` (e.g. one per institution).

        Sub-queries share nothing mutable, so they run concurrently.
        """

        if dimension not in COMPARE_DIMENSIONS:
            raise ValidationError(f"cannot compare by {dimension!r}; use one of {', '.join(COMPARE_DIMENSIONS)}")
        scopes = {value: scope.with_changes(**{dimension: value}) for value in values}
        if not scopes:
            return {}

        with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(scopes)))) as pool:
            futures = {value: pool.submit(self.summary, s) for value, s in scopes.items()}
            return {value: f.result() for value, f in futures.items()}

    # ---- shared computation path ----

    def _evaluate(self, scope: ScopeFilter) -> list[PersonReport]:
        population = self.resolve_population(scope)
        if not population:
            return []

        ids = [p.person_id for p in population]
        punches = self._attendance.punches_for(ids, start_date=scope.start_date, end_date=scope.end_date)
        transactions = self._fees.transactions_for(ids)
        marks = self._marks.marks_for(ids, term=scope.semester)

        return [
            self._evaluate_person(
                person,
                scope,
                punches=punches.get(person.person_id, ()),
                transactions=transactions.get(person.person_id, ()),
                marks=marks.get(person.person_id, ()),
            )
            for person in population
        ]

    def _evaluate_person(
        self,
        person: Person,
        scope: ScopeFilter,
        *,
        punches: Sequence[AttendancePunch],
        transactions: Sequence[FeeTransaction],
        marks: Sequence[MarkEntry],
    ) -> PersonReport:
        start, end = self._attendance_window(person, scope)
        records, skipped = day_records(punches, start=start, end=end)
        attendance = summarize_days(records, skipped=skipped)

        period = None
        if scope.semester is not None and person.admission_year is not None:
            period = semester_period(person.admission_year, scope.semester)
            transactions = [tx for tx in transactions if is_blank(tx.period) or tx.period.strip() == period]

        tuition = self._reconciler.reconcile(
            transactions,
            kind=FeeKind.TUITION,
            person_id=person.person_id,
            **self._tuition_schedule(person, period),
        )
        exam_fees = self._reconciler.reconcile(transactions, kind=FeeKind.EXAM, person_id=person.person_id)

        academics = self._evaluator.evaluate(marks, term=scope.semester, subject_code=scope.subject_code)

        semester = None
        if person.kind == PersonKind.STUDENT and person.admission_year is not None:
            semester = current_semester(person.admission_year, self._settings.as_of())

        return PersonReport(
            person=person,
            attendance=attendance,
            eligibility=classify_summary(attendance, bands=self._settings.attendance_bands),
            days=tuple(records),
            tuition=tuition,
            exam_fees=exam_fees,
            academics=academics,
            current_semester=semester,
        )

    def _attendance_window(self, person: Person, scope: ScopeFilter) -> tuple[Optional[date], Optional[date]]:
        if scope.semester is None or person.admission_year is None:
            return scope.start_date, scope.end_date
        sem_start, sem_end = semester_window(person.admission_year, scope.semester)
        return intersect_ranges(scope.start_date, scope.end_date, sem_start, sem_end)

    def _tuition_schedule(self, person: Person, period: Optional[str]) -> dict[str, Any]:
        """Expected tuition periods and the schedule amount used to gap-fill them."""

        if person.kind != PersonKind.STUDENT or person.admission_year is None:
            return {}
        amount = self._settings.schedule_amount(person.department)
        if amount is None:
            logger.warning("no tuition schedule for department %r; skipping gap-fill", person.department)
            return {}

        expected = program_periods(person.admission_year, years=self._settings.program_years)
        if period is not None:
            expected = [p for p in expected if p == period]
        return {"expected_periods": expected, "schedule_amount": amount}

    def _fold(self, scope: ScopeFilter, reports: list[PersonReport], *, include_persons: bool) -> ScopeReport:
        counts = {band: 0 for band in EligibilityBand}
        for r in reports:
            counts[r.eligibility.band] += 1

        tuition = [r.tuition for r in reports]
        exams = [r.exam_fees for r in reports]

        return ScopeReport(
            scope=scope,
            population=len(reports),
            attendance=combine_summaries(r.attendance for r in reports),
            eligibility_counts=counts,
            fees=fold_fee_totals(tuition),
            exam_fees=fold_fee_totals(exams),
            academics=combine_academic_summaries(r.academics.summary for r in reports),
            skipped=SkipCounts(
                attendance=sum(r.attendance.skipped for r in reports),
                fees=sum(l.skipped for l in tuition),
                marks=sum(r.academics.summary.skipped for r in reports),
            ),
            persons=tuple(reports) if include_persons else None,
        )
