"""
Coercion helpers shared by the entity schemas and row mappers.

Rows come back from the backend with nullable columns and loosely typed JSON
arrays; requests come from UI code that may send numbers as strings. These
helpers normalize both directions without raising.
"""

import math
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def as_list(value: Any) -> List[Any]:
    """Return value as a list, or [] when it is absent or not array-like."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_str_list(value: Any) -> List[str]:
    """Array of strings, dropping null entries."""
    return [str(v) for v in as_list(value) if v is not None]


def unique(values: Iterable[T]) -> List[T]:
    """Drop duplicates, keeping first-seen order."""
    return list(dict.fromkeys(values))


def as_str(value: Any) -> str:
    """Required string field: None becomes "", scalars are stringified."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def as_optional_str(value: Any) -> Any:
    """
    Optional string field: None stays None, scalars are stringified.

    Objects and arrays are returned unchanged so model validation rejects them.
    """
    if value is None or isinstance(value, (dict, list, tuple)):
        return value
    return as_str(value)


def clean_optional_str(value: Any) -> Optional[str]:
    """Trim an optional string; blank values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_non_negative_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """
    Best-effort parse of a non-negative integer.

    Accepts ints, floats and numeric strings ("50", " 12.0 "). Anything
    unparseable, negative or non-finite yields ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number) or number < 0:
        return default
    return int(number)


def choice(value: Any, allowed: Iterable[str], default: str) -> str:
    """Return value when it is one of ``allowed``, else ``default``."""
    return value if isinstance(value, str) and value in tuple(allowed) else default
