from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from .model import AttendancePunch


class AttendanceRepository(Protocol):
    def punches_for(
        self,
        person_ids: Sequence[str],
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Mapping[str, Sequence[AttendancePunch]]:
        """Punches per person (inclusive date range), in the order they were recorded.

        Persons without punches may be missing from the mapping.
        """

        raise NotImplementedError
