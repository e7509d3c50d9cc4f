from __future__ import annotations

import threading
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..academics.model import MarkEntry
from ..academics.repository import MarkRepository
from ..attendance.model import AttendancePunch
from ..attendance.repository import AttendanceRepository
from ..common.validators import is_blank
from ..core.enums import FeeKind, PersonKind
from ..fees.model import FeeTransaction
from ..fees.repository import FeeRepository
from ..registry.model import Person
from ..registry.repository import PersonRepository
from .ingest import IngestReport


class InMemoryStore(PersonRepository, AttendanceRepository, FeeRepository, MarkRepository):
    """Transaction store kept in process memory.

    Logs are indexed by person and then by date (attendance) or period (fees), so a
    query touches only the selected population. Person IDs match case-insensitively
    and results are keyed by the requested ID. Appends and reads share a lock, so a
    single read observes a consistent snapshot of each log.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._persons: dict[str, Person] = {}
        self._punches: dict[str, dict[date, list[AttendancePunch]]] = {}
        self._fees: dict[str, dict[str, list[FeeTransaction]]] = {}
        self._marks: dict[str, list[MarkEntry]] = {}

    # ---- registry ----

    def add_persons(self, persons: Iterable[Person]) -> None:
        with self._lock:
            for p in persons:
                self._persons[_key(p.person_id)] = p

    def get_by_id(self, person_id: str) -> Optional[Person]:
        if is_blank(person_id):
            return None
        with self._lock:
            return self._persons.get(_key(person_id))

    def list_persons(
        self,
        *,
        kind: Optional[PersonKind] = None,
        institution: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[Person]:
        with self._lock:
            persons = list(self._persons.values())
        return [
            p
            for p in persons
            if (kind is None or p.kind == kind)
            and (institution is None or p.institution == institution)
            and (department is None or p.department == department)
        ]

    # ---- appends ----

    def append_punches(self, punches: Iterable[AttendancePunch]) -> IngestReport:
        accepted = skipped = 0
        with self._lock:
            for p in punches:
                if is_blank(p.person_id) or p.date is None or p.session is None:
                    skipped += 1
                    continue
                self._punches.setdefault(_key(p.person_id), {}).setdefault(p.date, []).append(p)
                accepted += 1
        return IngestReport(accepted=accepted, skipped=skipped)

    def append_fees(self, transactions: Iterable[FeeTransaction]) -> IngestReport:
        accepted = skipped = 0
        with self._lock:
            for tx in transactions:
                if is_blank(tx.person_id) or is_blank(tx.period):
                    skipped += 1
                    continue
                self._fees.setdefault(_key(tx.person_id), {}).setdefault(tx.period.strip(), []).append(tx)
                accepted += 1
        return IngestReport(accepted=accepted, skipped=skipped)

    def append_marks(self, entries: Iterable[MarkEntry]) -> IngestReport:
        accepted = skipped = 0
        with self._lock:
            for e in entries:
                if is_blank(e.person_id) or is_blank(e.subject_code) or e.term is None:
                    skipped += 1
                    continue
                self._marks.setdefault(_key(e.person_id), []).append(e)
                accepted += 1
        return IngestReport(accepted=accepted, skipped=skipped)

    def delete_attendance(self, person_ids: Sequence[str], *, start_date: Optional[date] = None, end_date: Optional[date] = None) -> int:
        """Administrative wholesale removal for a scope; returns the number of punches removed."""
        removed = 0
        with self._lock:
            for pid in person_ids:
                by_date = self._punches.get(_key(pid), {})
                for d in [d for d in by_date if _in_range(d, start_date, end_date)]:
                    removed += len(by_date.pop(d))
        return removed

    # ---- reads ----

    def punches_for(
        self,
        person_ids: Sequence[str],
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Mapping[str, Sequence[AttendancePunch]]:
        out: dict[str, list[AttendancePunch]] = {}
        with self._lock:
            for pid in person_ids:
                by_date = self._punches.get(_key(pid))
                if not by_date:
                    continue
                out[pid] = [
                    p
                    for d in sorted(by_date)
                    if _in_range(d, start_date, end_date)
                    for p in by_date[d]
                ]
        return out

    def transactions_for(
        self,
        person_ids: Sequence[str],
        *,
        kind: Optional[FeeKind] = None,
        period: Optional[str] = None,
    ) -> Mapping[str, Sequence[FeeTransaction]]:
        out: dict[str, list[FeeTransaction]] = {}
        with self._lock:
            for pid in person_ids:
                by_period = self._fees.get(_key(pid))
                if not by_period:
                    continue
                periods = [period.strip()] if period is not None else list(by_period)
                out[pid] = [
                    tx
                    for key in periods
                    for tx in by_period.get(key, [])
                    if kind is None or tx.kind == kind
                ]
        return out

    def marks_for(
        self,
        person_ids: Sequence[str],
        *,
        term: Optional[int] = None,
    ) -> Mapping[str, Sequence[MarkEntry]]:
        out: dict[str, list[MarkEntry]] = {}
        with self._lock:
            for pid in person_ids:
                entries = self._marks.get(_key(pid))
                if entries:
                    out[pid] = [e for e in entries if term is None or e.term == term]
        return out


def _key(person_id: str) -> str:
    return person_id.strip().lower()


def _in_range(d: date, start: Optional[date], end: Optional[date]) -> bool:
    return (start is None or d >= start) and (end is None or d <= end)
