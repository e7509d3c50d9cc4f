"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_INTERNAL_MIN = 14
DEFAULT_EXTERNAL_MIN = 21
DEFAULT_TOTAL_MIN = 40

DEFAULT_ELIGIBLE_MIN = 75.0
DEFAULT_CONDONATION_MIN = 65.0
DEFAULT_MEDICAL_CONDONATION_MIN = 60.0

# Academic year (and the odd semester) starts in July.
ACADEMIC_YEAR_START_MONTH = 7
STANDARD_PROGRAM_YEARS = 4
SEMESTERS_PER_YEAR = 2

ALL_MARKER = "all"
NOT_AVAILABLE = "N/A"

DEFAULT_FEE_SCHEDULE = {
    "CSE": Decimal("75000"),
    "CSM": Decimal("75000"),
    "CSD": Decimal("75000"),
    "CSC": Decimal("75000"),
    "ECE": Decimal("70000"),
    "EEE": Decimal("70000"),
    "MECH": Decimal("65000"),
    "CIVIL": Decimal("65000"),
}

DEFAULT_COMPARE_WORKERS = 4
