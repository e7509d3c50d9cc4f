from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import DayStatus, Session


@dataclass(frozen=True)
class AttendancePunch:
    """Domain entity: one half-day observation.

    Key fields are Optional because bulk-upload rows can arrive incomplete; the
    aggregator drops such rows and counts them instead of failing.
    """

    person_id: str
    date: Optional[date]
    session: Optional[Session]
    present: bool


@dataclass(frozen=True)
class DayRecord:
    """Read-model for transcript/detail views: the deduplicated pair for one date."""

    date: date
    morning: Optional[bool]
    afternoon: Optional[bool]
    status: DayStatus


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int = 0
    full_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    percentage: float = 0.0
    skipped: int = 0

    @property
    def has_data(self) -> bool:
        """False means "no observations"; render N/A rather than 0%."""
        return self.total_days > 0
