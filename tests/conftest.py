from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.academic_ledger.academic_ledger.academics.model import MarkEntry
from src.academic_ledger.academic_ledger.attendance.model import AttendancePunch
from src.academic_ledger.academic_ledger.cohort.service import CohortQueryService
from src.academic_ledger.academic_ledger.core.enums import FeeKind, PersonKind, Session
from src.academic_ledger.academic_ledger.fees.model import FeeTransaction
from src.academic_ledger.academic_ledger.registry.model import Person, ScopeAttributes
from src.academic_ledger.academic_ledger.settings import LedgerSettings
from src.academic_ledger.academic_ledger.store.memory_store import InMemoryStore


def day(person_id: str, d: date, morning: bool, afternoon: bool) -> list[AttendancePunch]:
    return [
        AttendancePunch(person_id=person_id, date=d, session=Session.MORNING, present=morning),
        AttendancePunch(person_id=person_id, date=d, session=Session.AFTERNOON, present=afternoon),
    ]


def tuition(person_id, period, total_due, paid, paid_at=None, kind=FeeKind.TUITION) -> FeeTransaction:
    return FeeTransaction(
        person_id=person_id,
        period=period,
        kind=kind,
        total_due=Decimal(str(total_due)),
        amount_paid=Decimal(str(paid)),
        timestamp=paid_at,
    )


def mark(person_id, term, subject_code, internal, external, total, max_score=100) -> MarkEntry:
    return MarkEntry(
        person_id=person_id,
        term=term,
        subject_code=subject_code,
        internal_score=internal,
        external_score=external,
        total_score=total,
        max_score=max_score,
    )


@pytest.fixture
def settings() -> LedgerSettings:
    return LedgerSettings(reference_date=date(2024, 3, 15))


@pytest.fixture
def store() -> InMemoryStore:
    """Two KMIT/CSE students, one KMIT/ECE student, one NGIT/CSE student and a faculty member."""

    s = InMemoryStore()
    s.add_persons(
        [
            Person("KCSE202101", "Asha Rao", PersonKind.STUDENT, ScopeAttributes("KMIT", "CSE", 2021, "01")),
            Person("KCSE202102", "Bala Krishna", PersonKind.STUDENT, ScopeAttributes("KMIT", "CSE", 2021, "02")),
            Person("KECE202201", "Chitra S", PersonKind.STUDENT, ScopeAttributes("KMIT", "ECE", 2022, "01")),
            Person("NCSE202101", "Dev Patel", PersonKind.STUDENT, ScopeAttributes("NGIT", "CSE", 2021, "01")),
            Person("FAC001", "Prof. Meena", PersonKind.FACULTY, ScopeAttributes("KMIT", "CSE")),
        ]
    )

    s.append_punches(
        day("KCSE202101", date(2021, 8, 2), True, True)
        + day("KCSE202101", date(2021, 8, 3), True, False)
        + day("KCSE202101", date(2021, 8, 4), False, False)
        + day("KCSE202102", date(2021, 8, 2), True, True)
        + day("KCSE202102", date(2021, 8, 3), True, True)
        + day("NCSE202101", date(2021, 8, 2), True, True)
        + day("FAC001", date(2021, 8, 2), True, False)
    )

    s.append_fees(
        [
            tuition("KCSE202101", "2021-2022", 75000, 40000, datetime(2021, 8, 10)),
            tuition("KCSE202101", "2021-2022", 70000, 20000, datetime(2021, 11, 2)),
            tuition("KCSE202102", "2021-2022", 75000, 75000, datetime(2021, 8, 5)),
            tuition("KCSE202102", "2021-2022", 1500, 1500, datetime(2021, 12, 1), kind=FeeKind.EXAM),
        ]
    )

    s.append_marks(
        [
            mark("KCSE202101", 1, "MA101", 20, 45, 65),
            mark("KCSE202101", 1, "PH101", 10, 25, 35),
            mark("KCSE202102", 1, "MA101", 18, 30, 48),
            mark("KCSE202102", 2, "CS201", 15, 22, 37),
        ]
    )
    return s


@pytest.fixture
def service(store, settings) -> CohortQueryService:
    return CohortQueryService(store, store, store, store, settings=settings)
