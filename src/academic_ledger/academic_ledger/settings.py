from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from .academics.evaluator import PassThresholds
from .common.datetime_utils import coerce_date, today
from .core.constants import DEFAULT_FEE_SCHEDULE, STANDARD_PROGRAM_YEARS
from .eligibility.classifier import AttendanceBands
from .fees.model import to_money


@dataclass(frozen=True)
class LedgerSettings:
    """Business configuration of the engine (immutable, shared by all queries)."""

    pass_thresholds: PassThresholds = field(default_factory=PassThresholds)
    attendance_bands: AttendanceBands = field(default_factory=AttendanceBands)
    fee_schedule: Mapping[str, Decimal] = field(default_factory=lambda: dict(DEFAULT_FEE_SCHEDULE))
    program_years: int = STANDARD_PROGRAM_YEARS
    reference_date: Optional[date] = None

    def schedule_amount(self, department: Optional[str]) -> Optional[Decimal]:
        if not department or not department.strip():
            return None
        wanted = department.strip().upper()
        for code, amount in self.fee_schedule.items():
            if code.strip().upper() == wanted:
                return amount
        return None

    def as_of(self) -> date:
        return self.reference_date or today()

    @classmethod
    def from_settings(cls, settings: Any) -> "LedgerSettings":
        """Build from a config.* settings module (missing attributes fall back to defaults)."""

        thresholds = getattr(settings, "PASS_THRESHOLDS", None) or {}
        bands = getattr(settings, "ATTENDANCE_BANDS", None) or {}
        schedule = getattr(settings, "FEE_SCHEDULE", None) or DEFAULT_FEE_SCHEDULE

        return cls(
            pass_thresholds=PassThresholds(**thresholds),
            attendance_bands=AttendanceBands(**bands),
            fee_schedule={str(k): to_money(v) for k, v in schedule.items()},
            program_years=int(getattr(settings, "PROGRAM_YEARS", STANDARD_PROGRAM_YEARS)),
            reference_date=coerce_date(getattr(settings, "REFERENCE_DATE", None)),
        )
