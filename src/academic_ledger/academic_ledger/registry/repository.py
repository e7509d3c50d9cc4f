from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PersonKind
from .model import Person


class PersonRepository(Protocol):
    """Repository interface for the organizational registry.

    Note (DIP): the query service depends on this interface, not on a concrete store.
    """

    def get_by_id(self, person_id: str) -> Optional[Person]:
        """Case-insensitive lookup; None when nobody matches."""

        raise NotImplementedError

    def list_persons(
        self,
        *,
        kind: Optional[PersonKind] = None,
        institution: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Sequence[Person]:
        """Coarse pre-filter; the query layer applies the full scope predicate afterwards."""

        raise NotImplementedError
