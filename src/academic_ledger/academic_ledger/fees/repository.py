from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import FeeKind
from .model import FeeTransaction


class FeeRepository(Protocol):
    def transactions_for(
        self,
        person_ids: Sequence[str],
        *,
        kind: Optional[FeeKind] = None,
        period: Optional[str] = None,
    ) -> Mapping[str, Sequence[FeeTransaction]]:
        """Fee transactions per person in recording order."""

        raise NotImplementedError
