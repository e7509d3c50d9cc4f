from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_filter, optional_int, optional_year
from ..core.enums import PersonKind
from ..core.exceptions import AmbiguousScopeError, ValidationError
from ..registry.model import Person

# Population dimensions that an individual-ID lookup supersedes.
COHORT_DIMENSIONS = ("institution", "department", "admission_year", "roll_no", "semester")


def _same_code(a: Optional[str], b: Optional[str]) -> bool:
    return (a or "").strip().upper() == (b or "").strip().upper()


@dataclass(frozen=True)
class ScopeFilter:
    """Scope of a query. Dimensions compose with AND; None means "no restriction".

    `person_id` selects one person and cannot be combined with any cohort dimension;
    `kind`, `subject_code` and the date range narrow the data and may accompany either.
    """

    institution: Optional[str] = None
    department: Optional[str] = None
    admission_year: Optional[int] = None
    roll_no: Optional[str] = None
    semester: Optional[int] = None
    person_id: Optional[str] = None
    kind: Optional[PersonKind] = None
    subject_code: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.person_id is not None and self.active_dimensions:
            raise AmbiguousScopeError(
                f"person_id cannot be combined with cohort filters ({', '.join(self.active_dimensions)})"
            )
        if self.semester is not None and self.semester < 1:
            raise ValidationError(f"semester must be positive, got {self.semester}")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("start_date must not be after end_date")

    @property
    def active_dimensions(self) -> tuple[str, ...]:
        return tuple(name for name in COHORT_DIMENSIONS if getattr(self, name) is not None)

    @property
    def is_individual(self) -> bool:
        return self.person_id is not None

    def with_changes(self, **changes: Any) -> "ScopeFilter":
        return replace(self, **changes)

    def matches(self, person: Person) -> bool:
        """The single population predicate shared by summary, detail and export paths."""

        if self.kind is not None and person.kind != self.kind:
            return False
        if self.person_id is not None:
            return person.person_id.lower() == self.person_id.strip().lower()
        if self.institution is not None and not _same_code(person.institution, self.institution):
            return False
        if self.department is not None and not _same_code(person.department, self.department):
            return False
        if self.admission_year is not None and person.admission_year != self.admission_year:
            return False
        if self.roll_no is not None and (person.roll_no or "") != self.roll_no:
            return False
        if self.semester is not None and person.admission_year is None:
            # Semester windows are derived from the admission year.
            return False
        return True

    def describe(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, PersonKind):
                value = value.value
            elif isinstance(value, date):
                value = value.isoformat()
            out[f.name] = value
        return out

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ScopeFilter":
        """Build from loosely typed input (query string, JSON); '' and 'all' mean unrestricted."""

        kind_s = optional_filter(raw.get("kind"))
        kind = None
        if kind_s is not None:
            kind = next((k for k in PersonKind if k.value.lower() == kind_s.lower()), None)
            if kind is None:
                raise ValidationError(f"unknown person kind {kind_s!r}")

        try:
            start = optional_filter(raw.get("start_date"))
            end = optional_filter(raw.get("end_date"))
            start_date = parse_iso_date(start) if start else None
            end_date = parse_iso_date(end) if end else None
        except ValueError:
            raise ValidationError("dates must be YYYY-MM-DD") from None

        return cls(
            institution=optional_filter(raw.get("institution")),
            department=optional_filter(raw.get("department")),
            admission_year=optional_year(raw.get("admission_year"), "admission_year"),
            roll_no=optional_filter(raw.get("roll_no")),
            semester=optional_int(raw.get("semester"), "semester"),
            person_id=optional_filter(raw.get("person_id")),
            kind=kind,
            subject_code=optional_filter(raw.get("subject_code")),
            start_date=start_date,
            end_date=end_date,
        )
