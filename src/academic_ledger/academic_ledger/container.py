from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .academics.evaluator import AcademicEvaluator
from .academics.mysql_mark_repository import MySQLMarkRepository
from .academics.repository import MarkRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .cohort.service import CohortQueryService
from .database.connection import DBConfig, DatabaseConnection
from .fees.factory import ReconciliationStrategyFactory
from .fees.mysql_fee_repository import MySQLFeeRepository
from .fees.reconciler import FeeReconciler
from .fees.repository import FeeRepository
from .registry.mysql_person_repository import MySQLPersonRepository
from .registry.repository import PersonRepository
from .settings import LedgerSettings
from .store.memory_store import InMemoryStore

STORE_BACKENDS = ("memory", "mysql")


@dataclass(frozen=True)
class Container:
    settings: LedgerSettings

    persons_repo: PersonRepository
    attendance_repo: AttendanceRepository
    fees_repo: FeeRepository
    marks_repo: MarkRepository

    cohort_service: CohortQueryService

    # Set only for the in-memory backend (bulk loading, tests).
    store: Optional[InMemoryStore] = None
    conn: Optional[DatabaseConnection] = None


def build_container(
    *,
    settings: LedgerSettings,
    backend: str = "memory",
    db_config: Optional[dict] = None,
    store: Optional[InMemoryStore] = None,
) -> Container:
    backend = (backend or "memory").lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(f"Unsupported store backend: {backend}")

    conn = None
    if backend == "mysql":
        conn = DatabaseConnection(DBConfig.from_dict(db_config or {}))
        persons_repo = MySQLPersonRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
        fees_repo = MySQLFeeRepository(conn)
        marks_repo = MySQLMarkRepository(conn)
        store = None
    else:
        store = store or InMemoryStore()
        persons_repo = attendance_repo = fees_repo = marks_repo = store

    cohort_service = CohortQueryService(
        persons_repo,
        attendance_repo,
        fees_repo,
        marks_repo,
        settings=settings,
        reconciler=FeeReconciler(strategy_factory=ReconciliationStrategyFactory()),
        evaluator=AcademicEvaluator(settings.pass_thresholds),
    )

    return Container(
        settings=settings,
        persons_repo=persons_repo,
        attendance_repo=attendance_repo,
        fees_repo=fees_repo,
        marks_repo=marks_repo,
        cohort_service=cohort_service,
        store=store,
        conn=conn,
    )
