from datetime import date
from decimal import Decimal

from src.academic_ledger.academic_ledger.attendance.model import AttendancePunch
from src.academic_ledger.academic_ledger.core.enums import FeeKind, PersonKind, Session
from src.academic_ledger.academic_ledger.fees.model import FeeTransaction


def test_get_by_id_ignores_case(store):
    assert store.get_by_id("kcse202101").name == "Asha Rao"
    assert store.get_by_id("  ") is None
    assert store.get_by_id("NOPE") is None


def test_list_persons_by_kind(store):
    faculty = store.list_persons(kind=PersonKind.FACULTY)

    assert [p.person_id for p in faculty] == ["FAC001"]


def test_punches_are_read_in_date_order_within_range(store):
    punches = store.punches_for(["KCSE202101"], start_date=date(2021, 8, 3))["KCSE202101"]

    assert [p.date for p in punches] == [date(2021, 8, 3)] * 2 + [date(2021, 8, 4)] * 2


def test_malformed_punch_is_rejected_on_append(store):
    report = store.append_punches(
        [
            AttendancePunch("KCSE202101", None, Session.MORNING, True),
            AttendancePunch("KCSE202101", date(2021, 8, 5), Session.MORNING, True),
        ]
    )

    assert (report.accepted, report.skipped) == (1, 1)


def test_transactions_filter_by_kind_and_period(store):
    exam = store.transactions_for(["KCSE202102"], kind=FeeKind.EXAM)["KCSE202102"]
    other_year = store.transactions_for(["KCSE202101"], period="2022-2023")["KCSE202101"]

    assert len(exam) == 1
    assert other_year == []


def test_marks_filter_by_term(store):
    assert len(store.marks_for(["KCSE202102"], term=2)["KCSE202102"]) == 1
    assert "KECE202201" not in store.marks_for(["KECE202201"])


def test_delete_attendance_for_scope(store, service):
    removed = store.delete_attendance(["KCSE202101"], start_date=date(2021, 8, 4), end_date=date(2021, 8, 4))

    assert removed == 2
    assert service.person_report("KCSE202101").report.attendance.total_days == 2


def test_logs_join_persons_case_insensitively(store, service):
    store.append_punches([AttendancePunch("kcse202101", date(2021, 8, 5), Session.MORNING, True)])
    store.append_fees(
        [FeeTransaction("kcse202101", "2022-2023", FeeKind.TUITION, Decimal("70000"), Decimal("70000"))]
    )

    assert len(store.punches_for(["KCSE202101"], start_date=date(2021, 8, 5))["KCSE202101"]) == 1
    assert "KCSE202101" in store.transactions_for(["KCSE202101"], period="2022-2023")
    report = service.person_report("KCSE202101").report
    assert report.attendance.total_days == 4
    assert "2022-2023" in {r.period for r in report.tuition.rows if not r.synthetic}
