import pytest

from src.academic_ledger.academic_ledger.academics.evaluator import (
    AcademicEvaluator,
    PassThresholds,
    aggregate_percentage,
    combine_academic_summaries,
    recommended_pass_rate_mode,
)
from src.academic_ledger.academic_ledger.academics.model import MarkEntry
from src.academic_ledger.academic_ledger.core.enums import PassRateMode


def _mark(subject_code, internal, external, total, max_score=100, term=1, person_id="KCSE202101"):
    return MarkEntry(
        person_id=person_id,
        term=term,
        subject_code=subject_code,
        internal_score=internal,
        external_score=external,
        total_score=total,
        max_score=max_score,
    )


def test_low_internal_fails_even_with_passing_external():
    evaluator = AcademicEvaluator()

    assert evaluator.passes(_mark("PH101", 10, 25, 35)) is False


def test_all_thresholds_met_passes():
    assert AcademicEvaluator().passes(_mark("MA101", 14, 21, 40)) is True


def test_missing_component_counts_as_zero():
    assert AcademicEvaluator().passes(_mark("MA101", None, 50, 50)) is False


def test_custom_thresholds_are_applied():
    evaluator = AcademicEvaluator(PassThresholds(internal_min=5, external_min=5, total_min=20))

    assert evaluator.passes(_mark("PH101", 10, 25, 35)) is True


def test_any_failed_subject_fails_the_person():
    evaluation = AcademicEvaluator().evaluate([_mark("MA101", 20, 45, 65), _mark("PH101", 10, 25, 35)])

    assert evaluation.result_label == "Fail"
    assert evaluation.summary.pass_count == 0
    assert evaluation.summary.fail_count == 1
    assert evaluation.summary.passed_entries == 1
    assert evaluation.summary.failed_entries == 1
    assert evaluation.summary.aggregate_percentage == pytest.approx(50.0)


def test_aggregate_is_mark_weighted():
    evaluation = AcademicEvaluator().evaluate([_mark("MA101", 20, 30, 50, 100), _mark("LAB1", 20, 30, 50, 50)])

    assert evaluation.summary.aggregate_percentage == pytest.approx(100 / 150 * 100)


def test_term_and_subject_narrow_entries():
    entries = [_mark("MA101", 20, 45, 65, term=1), _mark("CS201", 15, 22, 37, term=2)]
    evaluator = AcademicEvaluator()

    assert evaluator.evaluate(entries, term=1).result_label == "Pass"
    assert evaluator.evaluate(entries, subject_code="CS201").result_label == "Fail"
    assert evaluator.evaluate(entries, term=3).result_label is None


def test_malformed_entries_are_skipped():
    entries = [
        _mark("MA101", 20, 45, 65),
        _mark("", 20, 45, 65),
        _mark("MA102", 20, 45, 65, term=None),
    ]

    summary = AcademicEvaluator().evaluate(entries).summary

    assert summary.skipped == 2
    assert summary.total_entries == 1


def test_both_pass_rate_modes_are_available():
    evaluator = AcademicEvaluator()
    a = evaluator.evaluate([_mark("MA101", 20, 45, 65), _mark("PH101", 10, 25, 35)]).summary
    b = evaluator.evaluate([_mark("MA101", 20, 45, 65, person_id="KCSE202102")]).summary

    cohort = combine_academic_summaries([a, b])

    assert cohort.pass_rate(PassRateMode.STUDENT) == pytest.approx(50.0)
    assert cohort.pass_rate(PassRateMode.EXAM_INSTANCE) == pytest.approx(200 / 3)


def test_recommended_mode_depends_on_scope_breadth():
    assert recommended_pass_rate_mode(semester=1, subject_code=None) == PassRateMode.STUDENT
    assert recommended_pass_rate_mode(semester=None, subject_code="MA101") == PassRateMode.STUDENT
    assert recommended_pass_rate_mode(semester=None, subject_code=None) == PassRateMode.EXAM_INSTANCE


def test_aggregate_percentage_without_max_is_zero():
    assert aggregate_percentage(0, 0) == 0.0
