from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Any, Iterable, Mapping

from ..core.constants import NOT_AVAILABLE
from .service import PersonReport

EXPORT_COLUMNS = [
    "person_id",
    "name",
    "kind",
    "institution",
    "department",
    "admission_year",
    "roll_no",
    "total_days",
    "full_days",
    "half_days",
    "absent_days",
    "attendance_percentage",
    "eligibility_band",
    "exam_eligibility",
    "tuition_total",
    "tuition_paid",
    "tuition_due",
    "tuition_status",
    "exam_fee_due",
    "aggregate_percentage",
    "passed_subjects",
    "failed_subjects",
    "academic_result",
]

_CENT = Decimal("0.01")


def _money(value: Decimal) -> str:
    return str(value.quantize(_CENT))


def _or_na(value: Any) -> Any:
    return NOT_AVAILABLE if value is None or value == "" else value


def export_record(report: PersonReport) -> dict[str, Any]:
    """Flatten one person report into a row keyed by EXPORT_COLUMNS.

    Metrics without underlying data render as "N/A" instead of 0.
    """

    person = report.person
    attendance = report.attendance
    academics = report.academics

    row: dict[str, Any] = {
        "person_id": person.person_id,
        "name": person.name,
        "kind": person.kind.value,
        "institution": person.institution,
        "department": _or_na(person.department),
        "admission_year": _or_na(person.admission_year),
        "roll_no": _or_na(person.roll_no),
        "eligibility_band": report.eligibility.band.value,
        "exam_eligibility": report.eligibility.exam_eligibility.value,
    }

    if attendance.has_data:
        row.update(
            total_days=attendance.total_days,
            full_days=attendance.full_days,
            half_days=attendance.half_days,
            absent_days=attendance.absent_days,
            attendance_percentage=f"{attendance.percentage:.2f}",
        )
    else:
        row.update({k: NOT_AVAILABLE for k in ("total_days", "full_days", "half_days", "absent_days", "attendance_percentage")})

    if report.tuition.rows:
        totals = report.tuition.totals()
        row.update(
            tuition_total=_money(totals.total_fees),
            tuition_paid=_money(totals.paid_amount),
            tuition_due=_money(totals.due_amount),
            tuition_status=report.tuition.status.value,
        )
    else:
        row.update({k: NOT_AVAILABLE for k in ("tuition_total", "tuition_paid", "tuition_due", "tuition_status")})

    row["exam_fee_due"] = _money(report.exam_fees.totals().due_amount) if report.exam_fees.rows else NOT_AVAILABLE

    if academics.results:
        row.update(
            aggregate_percentage=f"{academics.summary.aggregate_percentage:.2f}",
            passed_subjects=academics.summary.passed_entries,
            failed_subjects=academics.summary.failed_entries,
            academic_result=academics.result_label,
        )
    else:
        row.update({k: NOT_AVAILABLE for k in ("aggregate_percentage", "passed_subjects", "failed_subjects", "academic_result")})

    return {k: row[k] for k in EXPORT_COLUMNS}


def write_csv(records: Iterable[Mapping[str, Any]]) -> bytes:
    """Render export rows as CSV bytes (utf-8-sig so spreadsheet tools detect the encoding)."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for record in records:
        writer.writerow(record)
    return out.getvalue().encode("utf-8-sig")
