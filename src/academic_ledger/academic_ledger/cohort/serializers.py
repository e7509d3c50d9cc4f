from __future__ import annotations

from decimal import Decimal
from typing import Any

from ..academics.model import AcademicSummary
from ..attendance.model import AttendanceSummary
from ..core.enums import PassRateMode
from ..core.exceptions import ValidationError
from ..fees.model import FeeLedger, FeeTotals
from .service import PersonLookup, PersonReport, ScopeReport


def _money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01")))


def attendance_to_dict(summary: AttendanceSummary) -> dict[str, Any]:
    return {
        "total_days": summary.total_days,
        "full_days": summary.full_days,
        "half_days": summary.half_days,
        "absent_days": summary.absent_days,
        "percentage": round(summary.percentage, 2),
        "has_data": summary.has_data,
    }


def fee_totals_to_dict(totals: FeeTotals) -> dict[str, Any]:
    return {
        "total_fees": _money(totals.total_fees),
        "paid_amount": _money(totals.paid_amount),
        "due_amount": _money(totals.due_amount),
        "paid_count": totals.paid_count,
        "partial_count": totals.partial_count,
        "due_count": totals.due_count,
    }


def ledger_to_dict(ledger: FeeLedger) -> dict[str, Any]:
    status = ledger.status
    return {
        "kind": ledger.kind.value,
        "status": status.value if status else None,
        "totals": fee_totals_to_dict(ledger.totals()),
        "rows": [
            {
                "period": r.period,
                "semester": r.semester,
                "total_due": _money(r.total_due),
                "amount_paid": _money(r.amount_paid),
                "running_paid": _money(r.running_paid),
                "due_balance": _money(r.due_balance),
                "status": r.status.value,
                "paid_at": r.timestamp.isoformat() if r.timestamp else None,
                "auto_generated": r.synthetic,
            }
            for r in ledger.rows
        ],
    }


def academics_to_dict(summary: AcademicSummary) -> dict[str, Any]:
    return {
        "aggregate_percentage": round(summary.aggregate_percentage, 2),
        "pass_count": summary.pass_count,
        "fail_count": summary.fail_count,
        "passed_entries": summary.passed_entries,
        "failed_entries": summary.failed_entries,
        "student_pass_rate": round(summary.student_pass_rate, 2),
        "exam_pass_rate": round(summary.exam_pass_rate, 2),
    }


def person_report_to_dict(report: PersonReport) -> dict[str, Any]:
    person = report.person
    return {
        "person_id": person.person_id,
        "name": person.name,
        "kind": person.kind.value,
        "institution": person.institution,
        "department": person.department,
        "admission_year": person.admission_year,
        "roll_no": person.roll_no,
        "current_semester": report.current_semester,
        "attendance": attendance_to_dict(report.attendance),
        "eligibility": {
            "band": report.eligibility.band.value,
            "exam_eligibility": report.eligibility.exam_eligibility.value,
            "condonation_required": report.eligibility.condonation_required,
        },
        "days": [
            {
                "date": d.date.isoformat(),
                "morning": d.morning,
                "afternoon": d.afternoon,
                "status": d.status.value,
            }
            for d in report.days
        ],
        "tuition": ledger_to_dict(report.tuition),
        "exam_fees": ledger_to_dict(report.exam_fees),
        "academics": {
            **academics_to_dict(report.academics.summary),
            "result": report.academics.result_label,
            "subjects": [
                {
                    "term": r.entry.term,
                    "subject_code": r.entry.subject_code,
                    "subject_name": r.entry.subject_name,
                    "internal_score": r.entry.internal_score,
                    "external_score": r.entry.external_score,
                    "total_score": r.entry.total_score,
                    "max_score": r.entry.max_score,
                    "passed": r.passed,
                }
                for r in report.academics.results
            ],
        },
    }


def scope_report_to_dict(report: ScopeReport, *, mode: PassRateMode | None = None) -> dict[str, Any]:
    mode = mode or report.recommended_pass_rate_mode
    out: dict[str, Any] = {
        "scope": report.scope.describe(),
        "population": report.population,
        "attendance": attendance_to_dict(report.attendance),
        "eligibility_counts": {band.value: n for band, n in report.eligibility_counts.items()},
        "fees": fee_totals_to_dict(report.fees),
        "exam_fees": fee_totals_to_dict(report.exam_fees),
        "academics": academics_to_dict(report.academics),
        "pass_rate": round(report.pass_rate(mode), 2),
        "pass_rate_mode": mode.value,
        "skipped": {
            "attendance": report.skipped.attendance,
            "fees": report.skipped.fees,
            "marks": report.skipped.marks,
        },
    }
    if report.persons is not None:
        out["persons"] = [person_report_to_dict(p) for p in report.persons]
    return out


def lookup_to_dict(lookup: PersonLookup) -> dict[str, Any]:
    if not lookup.found:
        return {"found": False, "person_id": lookup.person_id}
    return {"found": True, **person_report_to_dict(lookup.report)}


def parse_pass_rate_mode(value: Any) -> PassRateMode | None:
    if not value:
        return None
    mode = next((m for m in PassRateMode if m.value == str(value).strip().lower()), None)
    if mode is None:
        raise ValidationError(f"unknown pass rate mode {value!r}")
    return mode
