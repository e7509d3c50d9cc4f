from __future__ import annotations

from typing import Any, Optional

from ..core.constants import ALL_MARKER
from ..core.exceptions import ValidationError


def optional_filter(value: Any) -> Optional[str]:
    """Normalize a filter value: None, '' and 'all' mean "no restriction"."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() == ALL_MARKER:
        return None
    return text


def optional_int(value: Any, field_name: str) -> Optional[int]:
    text = optional_filter(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number, got {value!r}") from None


def optional_year(value: Any, field_name: str) -> Optional[int]:
    """Accept '2021' as well as an academic-year label '2021-2022'."""
    text = optional_filter(value)
    if text is None:
        return None
    return optional_int(text.split("-")[0], field_name)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
