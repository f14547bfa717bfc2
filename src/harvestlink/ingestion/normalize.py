"""Normalization helpers.

Centralizes defensive parsing and the table-driven alias resolution used
for backend payloads whose field names drift between releases.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

Accessor = Callable[[Mapping[str, Any]], Any]
"""Reads one candidate value for a logical field out of a raw record."""

_PLACEHOLDERS = frozenset({"", "--"})


def safe_float(value: Any) -> float | None:
    """Parse *value* as a finite float, or ``None``.

    Booleans and containers are not measurements and yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if text in _PLACEHOLDERS:
            return None
        value = text
    elif not isinstance(value, (int, float)):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for integral values."""
    return str(int(value)) if value.is_integer() else str(value)


def format_trip_no(value: Any) -> str | None:
    """Render a trip number the way the backend displays it.

    ``3`` and ``3.0`` both become ``"3"``. Blank strings, ``"NaN"``,
    non-finite numbers and containers yield ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return format_number(value)
    if isinstance(value, str):
        text = value.strip()
        if not text or text.lower() == "nan":
            return None
        return text
    return None


def field(name: str) -> Accessor:
    """Accessor for a flat top-level key."""

    def _get(source: Mapping[str, Any]) -> Any:
        return source.get(name)

    return _get


def nested(sections: Sequence[str], name: str) -> Accessor:
    """Accessor for ``<section>.<name>``.

    The first section alias that is present (not ``None``) is used; if it
    is not an object the accessor yields ``None``.
    """

    def _get(source: Mapping[str, Any]) -> Any:
        for section_name in sections:
            section = source.get(section_name)
            if section is None:
                continue
            if isinstance(section, Mapping):
                return section.get(name)
            return None
        return None

    return _get


def first_finite(source: Mapping[str, Any], accessors: Sequence[Accessor]) -> float | None:
    """Return the first accessor value that parses as a finite number."""
    for accessor in accessors:
        parsed = safe_float(accessor(source))
        if parsed is not None:
            return parsed
    return None


def first_present(
    source: Mapping[str, Any],
    accessors: Sequence[Accessor],
    formatter: Callable[[Any], str | None] = safe_str,
) -> str | None:
    """Return the first accessor value the *formatter* accepts."""
    for accessor in accessors:
        formatted = formatter(accessor(source))
        if formatted is not None:
            return formatted
    return None


def finite_or_zero(value: Any) -> float:
    parsed = safe_float(value)
    return 0.0 if parsed is None else parsed
