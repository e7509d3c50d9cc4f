from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PersonKind


@dataclass(frozen=True)
class ScopeAttributes:
    """Organizational placement of a person (the dimensions cohort filters act on)."""

    institution: str
    department: Optional[str] = None
    admission_year: Optional[int] = None
    roll_no: Optional[str] = None


@dataclass(frozen=True)
class Person:
    """Domain entity: a student, faculty or staff member.

    Note: Owned by the organizational registry; `person_id` is the join key for every
    transaction log.
    """

    person_id: str
    name: str
    kind: PersonKind
    scope: ScopeAttributes

    @property
    def institution(self) -> str:
        return self.scope.institution

    @property
    def department(self) -> Optional[str]:
        return self.scope.department

    @property
    def admission_year(self) -> Optional[int]:
        return self.scope.admission_year

    @property
    def roll_no(self) -> Optional[str]:
        return self.scope.roll_no
