"""Normalisation of uploaded rows (already parsed from spreadsheets) into domain objects.

Bad rows are dropped and counted; an upload never fails because some rows are broken.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from ..academics.model import MarkEntry
from ..attendance.model import AttendancePunch
from ..common.datetime_utils import coerce_date, coerce_datetime
from ..common.validators import is_blank
from ..core.enums import FeeKind, Session
from ..fees.model import FeeTransaction, to_money

logger = logging.getLogger(__name__)

_PRESENT = {"present", "p", "1", "true", "yes"}
_ABSENT = {"absent", "a", "0", "false", "no"}


@dataclass(frozen=True)
class IngestReport:
    accepted: int = 0
    skipped: int = 0

    def __add__(self, other: "IngestReport") -> "IngestReport":
        return IngestReport(accepted=self.accepted + other.accepted, skipped=self.skipped + other.skipped)


def _text(row: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = row.get(key)
        if not is_blank(value):
            return str(value).strip()
    return None


def _presence(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if is_blank(value):
        return None
    token = str(value).strip().lower()
    if token in _PRESENT:
        return True
    if token in _ABSENT:
        return False
    raise ValueError(f"unknown attendance value {value!r}")


def _optional_float(value: Any) -> Optional[float]:
    return None if is_blank(value) else float(value)


def punches_from_day_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[list[AttendancePunch], IngestReport]:
    """Day rows ({person_id, date, morning, afternoon}) become up to two session punches."""

    punches: list[AttendancePunch] = []
    skipped = 0
    for row in rows:
        try:
            person_id = _text(row, "person_id", "admission_number")
            day = coerce_date(_text(row, "date"))
            if person_id is None or day is None:
                raise ValueError("missing person_id/date")

            observed = [
                (session, _presence(row.get(session.value.lower())))
                for session in (Session.MORNING, Session.AFTERNOON)
            ]
            observed = [(s, p) for s, p in observed if p is not None]
            if not observed:
                raise ValueError("no session observed")
        except ValueError as e:
            logger.debug("skipping attendance row %r: %s", row, e)
            skipped += 1
            continue

        punches.extend(AttendancePunch(person_id=person_id, date=day, session=s, present=p) for s, p in observed)

    return punches, IngestReport(accepted=len(punches), skipped=skipped)


def fee_transactions_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[list[FeeTransaction], IngestReport]:
    out: list[FeeTransaction] = []
    skipped = 0
    for row in rows:
        try:
            person_id = _text(row, "person_id", "admission_number")
            period = _text(row, "period", "academic_year")
            if person_id is None or period is None:
                raise ValueError("missing person_id/period")
            semester = _text(row, "semester")
            out.append(
                FeeTransaction(
                    person_id=person_id,
                    period=period,
                    kind=FeeKind(_text(row, "kind", "fee_type") or FeeKind.TUITION.value),
                    total_due=to_money(row.get("total_due", row.get("total_fees"))),
                    amount_paid=to_money(row.get("amount_paid", row.get("paid_amount"))),
                    timestamp=coerce_datetime(_text(row, "timestamp", "payment_date")),
                    semester=int(semester) if semester is not None else None,
                )
            )
        except (ValueError, InvalidOperation) as e:
            logger.debug("skipping fee row %r: %s", row, e)
            skipped += 1

    return out, IngestReport(accepted=len(out), skipped=skipped)


def mark_entries_from_rows(rows: Iterable[Mapping[str, Any]]) -> tuple[list[MarkEntry], IngestReport]:
    out: list[MarkEntry] = []
    skipped = 0
    for row in rows:
        try:
            person_id = _text(row, "person_id", "admission_number")
            subject_code = _text(row, "subject_code")
            term = _text(row, "term", "semester")
            if person_id is None or subject_code is None or term is None:
                raise ValueError("missing person_id/subject_code/term")
            out.append(
                MarkEntry(
                    person_id=person_id,
                    term=int(term),
                    subject_code=subject_code,
                    subject_name=_text(row, "subject_name"),
                    internal_score=_optional_float(row.get("internal_score", row.get("internal_mark"))),
                    external_score=_optional_float(row.get("external_score", row.get("external_mark"))),
                    total_score=float(row.get("total_score", row.get("marks_obtained")) or 0),
                    max_score=float(row.get("max_score", row.get("max_marks")) or 0),
                )
            )
        except (TypeError, ValueError) as e:
            logger.debug("skipping mark row %r: %s", row, e)
            skipped += 1

    return out, IngestReport(accepted=len(out), skipped=skipped)
