from decimal import Decimal

from src.academic_ledger.academic_ledger.cohort.export import EXPORT_COLUMNS, write_csv
from src.academic_ledger.academic_ledger.cohort.filters import ScopeFilter
from src.academic_ledger.academic_ledger.core.enums import PersonKind


def test_records_follow_export_column_order(service):
    records = service.export_records(ScopeFilter(institution="KMIT", kind=PersonKind.STUDENT))

    assert [r["person_id"] for r in records] == ["KCSE202101", "KCSE202102", "KECE202201"]
    assert all(list(r) == EXPORT_COLUMNS for r in records)


def test_person_record_values(service):
    (record,) = service.export_records(ScopeFilter(person_id="KCSE202101"))

    assert record["total_days"] == 3
    assert record["attendance_percentage"] == "50.00"
    assert record["eligibility_band"] == "Detained"
    assert record["exam_eligibility"] == "Not Eligible"
    assert record["tuition_total"] == "300000.00"
    assert record["tuition_paid"] == "60000.00"
    assert record["tuition_due"] == "240000.00"
    assert record["tuition_status"] == "Partial"
    assert record["exam_fee_due"] == "N/A"
    assert record["aggregate_percentage"] == "50.00"
    assert (record["passed_subjects"], record["failed_subjects"]) == (1, 1)
    assert record["academic_result"] == "Fail"


def test_missing_data_renders_not_available(service):
    (record,) = service.export_records(ScopeFilter(person_id="KECE202201"))

    assert record["attendance_percentage"] == "N/A"
    assert record["eligibility_band"] == "N/A"
    assert record["academic_result"] == "N/A"
    assert record["tuition_status"] == "Due"


def test_export_agrees_with_summary(service):
    scope = ScopeFilter(institution="KMIT", kind=PersonKind.STUDENT)

    records = service.export_records(scope)
    summary = service.summary(scope)

    assert sum(Decimal(r["tuition_due"]) for r in records) == summary.fees.due_amount


def test_csv_has_bom_and_header(service):
    data = write_csv(service.export_records(ScopeFilter(department="CSE", kind=PersonKind.STUDENT)))

    assert data.startswith(b"\xef\xbb\xbf")
    lines = data.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(EXPORT_COLUMNS)
    assert len(lines) == 4


def test_empty_export_has_only_header():
    data = write_csv([])

    assert data.decode("utf-8-sig").strip() == ",".join(EXPORT_COLUMNS)
