"""Attendance aggregation.

Every consumer (dashboard, detail view, export, cohort fold) derives day
statuses and percentages through this module so the numbers cannot drift.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional

from ..common.validators import is_blank
from ..core.enums import DayStatus, Session
from .model import AttendancePunch, AttendanceSummary, DayRecord

logger = logging.getLogger(__name__)


def attendance_percentage(full_days: int, half_days: int, total_days: int) -> float:
    """Half days weigh 0.5; 0 when there is nothing to measure."""
    if total_days <= 0:
        return 0.0
    pct = (full_days + 0.5 * half_days) / total_days * 100
    return min(max(pct, 0.0), 100.0)


def day_status(morning: Optional[bool], afternoon: Optional[bool]) -> DayStatus:
    """Full iff both present, Absent iff both absent, Half otherwise (incl. one session missing)."""
    if morning is True and afternoon is True:
        return DayStatus.FULL
    if morning is False and afternoon is False:
        return DayStatus.ABSENT
    return DayStatus.HALF


def _is_well_formed(punch: AttendancePunch) -> bool:
    return not is_blank(punch.person_id) and punch.date is not None and punch.session is not None


def day_records(
    punches: Iterable[AttendancePunch],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> tuple[list[DayRecord], int]:
    """Deduplicate (first seen wins) and pair sessions per date.

    Returns the records in date order and the number of malformed punches dropped.
    """

    skipped = 0
    seen: dict[tuple[str, date, Session], bool] = {}

    for p in punches:
        if not _is_well_formed(p):
            skipped += 1
            continue
        if start is not None and p.date < start:
            continue
        if end is not None and p.date > end:
            continue
        key = (p.person_id.strip().lower(), p.date, p.session)
        if key not in seen:
            seen[key] = bool(p.present)

    by_date: dict[date, dict[Session, bool]] = {}
    for (_, d, session), present in seen.items():
        by_date.setdefault(d, {})[session] = present

    records = [
        DayRecord(
            date=d,
            morning=sessions.get(Session.MORNING),
            afternoon=sessions.get(Session.AFTERNOON),
            status=day_status(sessions.get(Session.MORNING), sessions.get(Session.AFTERNOON)),
        )
        for d, sessions in sorted(by_date.items())
    ]

    if skipped:
        logger.debug("dropped %d malformed attendance punches", skipped)
    return records, skipped


def summarize_days(records: Iterable[DayRecord], *, skipped: int = 0) -> AttendanceSummary:
    full = half = absent = 0
    for r in records:
        if r.status == DayStatus.FULL:
            full += 1
        elif r.status == DayStatus.HALF:
            half += 1
        else:
            absent += 1

    total = full + half + absent
    return AttendanceSummary(
        total_days=total,
        full_days=full,
        half_days=half,
        absent_days=absent,
        percentage=attendance_percentage(full, half, total),
        skipped=skipped,
    )


def summarize_attendance(
    punches: Iterable[AttendancePunch],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> AttendanceSummary:
    records, skipped = day_records(punches, start=start, end=end)
    return summarize_days(records, skipped=skipped)


def combine_summaries(summaries: Iterable[AttendanceSummary]) -> AttendanceSummary:
    """Cohort fold: person-days are summed, then the same percentage formula is applied."""
    full = half = absent = skipped = 0
    for s in summaries:
        full += s.full_days
        half += s.half_days
        absent += s.absent_days
        skipped += s.skipped

    total = full + half + absent
    return AttendanceSummary(
        total_days=total,
        full_days=full,
        half_days=half,
        absent_days=absent,
        percentage=attendance_percentage(full, half, total),
        skipped=skipped,
    )
