from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceSummary
from ..core.constants import DEFAULT_CONDONATION_MIN, DEFAULT_ELIGIBLE_MIN, DEFAULT_MEDICAL_CONDONATION_MIN
from ..core.enums import EligibilityBand, ExamEligibility
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceBands:
    """Lower cutoffs (inclusive, in percent) of each band; below medical_min is Detained."""

    eligible_min: float = DEFAULT_ELIGIBLE_MIN
    condonation_min: float = DEFAULT_CONDONATION_MIN
    medical_min: float = DEFAULT_MEDICAL_CONDONATION_MIN

    def __post_init__(self):
        if not (self.eligible_min >= self.condonation_min >= self.medical_min >= 0):
            raise ValidationError("attendance band cutoffs must be descending and non-negative")


@dataclass(frozen=True)
class EligibilityLabel:
    band: EligibilityBand
    exam_eligibility: ExamEligibility

    @property
    def condonation_required(self) -> bool:
        return self.band in {EligibilityBand.CONDONATION, EligibilityBand.MEDICAL_CONDONATION}


_EXAM_ELIGIBILITY = {
    EligibilityBand.ELIGIBLE: ExamEligibility.ELIGIBLE,
    EligibilityBand.CONDONATION: ExamEligibility.ELIGIBLE,
    EligibilityBand.MEDICAL_CONDONATION: ExamEligibility.CONDITIONAL,
    EligibilityBand.DETAINED: ExamEligibility.NOT_ELIGIBLE,
    EligibilityBand.NOT_AVAILABLE: ExamEligibility.UNKNOWN,
}


def classify_attendance(
    percentage: float,
    *,
    has_data: bool = True,
    bands: Optional[AttendanceBands] = None,
) -> EligibilityLabel:
    bands = bands or AttendanceBands()

    if not has_data:
        band = EligibilityBand.NOT_AVAILABLE
    elif percentage >= bands.eligible_min:
        band = EligibilityBand.ELIGIBLE
    elif percentage >= bands.condonation_min:
        band = EligibilityBand.CONDONATION
    elif percentage >= bands.medical_min:
        band = EligibilityBand.MEDICAL_CONDONATION
    else:
        band = EligibilityBand.DETAINED

    return EligibilityLabel(band=band, exam_eligibility=_EXAM_ELIGIBILITY[band])


def classify_summary(summary: AttendanceSummary, *, bands: Optional[AttendanceBands] = None) -> EligibilityLabel:
    return classify_attendance(summary.percentage, has_data=summary.has_data, bands=bands)
