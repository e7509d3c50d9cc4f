from __future__ import annotations

from enum import Enum


class PersonKind(str, Enum):
    """Which registry a person belongs to."""

    STUDENT = "Student"
    FACULTY = "Faculty"
    STAFF = "Staff"


class Session(str, Enum):
    """Half-day attendance session."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"


class DayStatus(str, Enum):
    FULL = "Full"
    HALF = "Half"
    ABSENT = "Absent"


class FeeKind(str, Enum):
    TUITION = "Tuition"
    EXAM = "Exam"


class FeeStatus(str, Enum):
    """Ledger row / person fee status."""

    PAID = "Paid"
    PARTIAL = "Partial"
    DUE = "Due"


class EligibilityBand(str, Enum):
    """Attendance bands controlling exam entry and condonation."""

    ELIGIBLE = "Eligible"
    CONDONATION = "Condonation"
    MEDICAL_CONDONATION = "Medical Condonation"
    DETAINED = "Detained"
    NOT_AVAILABLE = "N/A"


class ExamEligibility(str, Enum):
    ELIGIBLE = "Eligible"
    CONDITIONAL = "Conditional"
    NOT_ELIGIBLE = "Not Eligible"
    UNKNOWN = "Unknown"


class PassRateMode(str, Enum):
    """Denominator used for a cohort pass rate.

    STUDENT: passed persons / persons with marks (one failed subject fails the person).
    EXAM_INSTANCE: passed mark entries / all mark entries.
    """

    STUDENT = "student"
    EXAM_INSTANCE = "exam_instance"
