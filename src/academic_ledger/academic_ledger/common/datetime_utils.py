from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

from ..core.constants import ACADEMIC_YEAR_START_MONTH, SEMESTERS_PER_YEAR, STANDARD_PROGRAM_YEARS

_ADMISSION_YEAR_RE = re.compile(r"[A-Za-z]+(\d{4})")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """Accept date/datetime/ISO string (as stores and spreadsheets hand them over)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value).strip()[:10])


def as_naive_local(value: datetime) -> datetime:
    """Offset-aware stamps are moved to local wall-clock time so they order against naive ones."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def coerce_datetime(value: Union[date, datetime, str, None]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_naive_local(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    return as_naive_local(datetime.fromisoformat(str(value).strip()))


def today() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def academic_year_label(start_year: int) -> str:
    return f"{start_year}-{start_year + 1}"


def academic_year_start(label: str) -> int:
    """'2023-2024' -> 2023 (also accepts a bare '2023')."""
    return int(str(label).strip().split("-")[0])


def admission_year_from_id(person_id: str) -> Optional[int]:
    """Students encode admission year after the institution/department letters (KCSE202101 -> 2021)."""
    match = _ADMISSION_YEAR_RE.search(person_id or "")
    return int(match.group(1)) if match else None


def program_periods(admission_year: int, *, years: int = STANDARD_PROGRAM_YEARS) -> list[str]:
    return [academic_year_label(admission_year + i) for i in range(years)]


def semester_period(admission_year: int, semester: int) -> str:
    """Academic-year label a semester falls into (semesters 1-2 -> first year, ...)."""
    return academic_year_label(admission_year + (semester - 1) // SEMESTERS_PER_YEAR)


def semester_window(admission_year: int, semester: int) -> tuple[date, date]:
    """Odd semesters run Jul 1 - Dec 31, even ones Jan 1 - Jun 30 of the following calendar year."""
    start_year = admission_year + (semester - 1) // SEMESTERS_PER_YEAR
    if semester % 2:
        return date(start_year, ACADEMIC_YEAR_START_MONTH, 1), date(start_year, 12, 31)
    return date(start_year + 1, 1, 1), date(start_year + 1, ACADEMIC_YEAR_START_MONTH - 1, 30)


def current_semester(admission_year: int, as_of: date) -> Optional[int]:
    """Semester a student is in on `as_of`; None before admission.

    Values above the program length mean the student has graduated.
    """
    years_passed = as_of.year - admission_year
    if as_of.month >= ACADEMIC_YEAR_START_MONTH:
        semester = years_passed * SEMESTERS_PER_YEAR + 1
    else:
        semester = years_passed * SEMESTERS_PER_YEAR
    return semester if semester > 0 else None


def intersect_ranges(
    start: Optional[date], end: Optional[date], other_start: Optional[date], other_end: Optional[date]
) -> tuple[Optional[date], Optional[date]]:
    lo = max((d for d in (start, other_start) if d is not None), default=None)
    hi = min((d for d in (end, other_end) if d is not None), default=None)
    return lo, hi
