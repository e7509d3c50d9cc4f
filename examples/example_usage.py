"""Example: use the service layer directly (no Flask, in-memory store)."""

import importlib

from config import get_settings_module

from src.academic_ledger.academic_ledger.cohort.filters import ScopeFilter
from src.academic_ledger.academic_ledger.container import build_container
from src.academic_ledger.academic_ledger.core.enums import PersonKind
from src.academic_ledger.academic_ledger.registry.model import Person, ScopeAttributes
from src.academic_ledger.academic_ledger.settings import LedgerSettings
from src.academic_ledger.academic_ledger.store.ingest import (
    fee_transactions_from_rows,
    mark_entries_from_rows,
    punches_from_day_rows,
)


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=LedgerSettings.from_settings(settings))
    store = container.store

    store.add_persons(
        [
            Person("KCSE202101", "Asha Rao", PersonKind.STUDENT, ScopeAttributes("KMIT", "CSE", 2021, "01")),
            Person("KCSE202102", "Vikram N", PersonKind.STUDENT, ScopeAttributes("KMIT", "CSE", 2021, "02")),
        ]
    )

    punches, report = punches_from_day_rows(
        [
            {"person_id": "KCSE202101", "date": "2021-08-02", "morning": "Present", "afternoon": "Present"},
            {"person_id": "KCSE202101", "date": "2021-08-03", "morning": "Present", "afternoon": "Absent"},
            {"person_id": "KCSE202102", "date": "2021-08-02", "morning": "Absent", "afternoon": "Absent"},
        ]
    )
    store.append_punches(punches)
    print("attendance rows:", report)

    fees, _ = fee_transactions_from_rows(
        [
            {"person_id": "KCSE202101", "academic_year": "2021-2022", "total_fees": "75000", "paid_amount": "40000",
             "payment_date": "2021-08-10"},
            {"person_id": "KCSE202101", "academic_year": "2021-2022", "total_fees": "75000", "paid_amount": "35000",
             "payment_date": "2021-11-02"},
        ]
    )
    store.append_fees(fees)

    marks, _ = mark_entries_from_rows(
        [
            {"person_id": "KCSE202101", "semester": 1, "subject_code": "MA101", "internal_mark": 20,
             "external_mark": 45, "marks_obtained": 65, "max_marks": 100},
            {"person_id": "KCSE202102", "semester": 1, "subject_code": "MA101", "internal_mark": 10,
             "external_mark": 30, "marks_obtained": 40, "max_marks": 100},
        ]
    )
    store.append_marks(marks)

    summary = container.cohort_service.summary(ScopeFilter(institution="KMIT", department="CSE"))
    print("population:", summary.population, "attendance %:", round(summary.attendance.percentage, 2))
    print("tuition due:", summary.fees.due_amount, "pass rate:", summary.pass_rate(summary.recommended_pass_rate_mode))


if __name__ == "__main__":
    main()
