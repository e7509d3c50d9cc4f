from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import MarkEntry


class MarkRepository(Protocol):
    def marks_for(
        self,
        person_ids: Sequence[str],
        *,
        term: Optional[int] = None,
    ) -> Mapping[str, Sequence[MarkEntry]]:
        raise NotImplementedError
