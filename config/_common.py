"""Settings shared by every environment.

Note: Keep business rules here so development, testing and production grade
students the same way; environment modules only override infrastructure.
"""

import json
import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academic_ledger"),
}

# memory | mysql
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PASS_THRESHOLDS = {
    "internal_min": float(os.getenv("PASS_INTERNAL_MIN", "14")),
    "external_min": float(os.getenv("PASS_EXTERNAL_MIN", "21")),
    "total_min": float(os.getenv("PASS_TOTAL_MIN", "40")),
}

# "75,65,60" -> eligible, condonation, medical condonation cutoffs (percent)
_bands = [float(v) for v in os.getenv("ATTENDANCE_BANDS", "75,65,60").split(",")]
ATTENDANCE_BANDS = {
    "eligible_min": _bands[0],
    "condonation_min": _bands[1],
    "medical_min": _bands[2],
}

# JSON object: department code -> annual tuition
FEE_SCHEDULE = json.loads(os.getenv("FEE_SCHEDULE", "null")) or None

PROGRAM_YEARS = int(os.getenv("PROGRAM_YEARS", "4"))

# YYYY-MM-DD; pins "today" for current-semester calculation
REFERENCE_DATE = os.getenv("REFERENCE_DATE") or None
