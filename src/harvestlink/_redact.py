"""Helpers for safe debug logging.

Harvest payloads carry tipper card numbers and personal contact details
(supervisor, field manager, drivers). This module scrubs those before
request/response bodies reach DEBUG logs:

* card numbers keep their last four characters so a trace can still be
  matched to a physical tipper card.
* contacts and credentials are replaced outright.
* long arrays (trip sheets, vehicle lists) are cut to a handful of items.

Keys are compared case-insensitively with underscores ignored, so
``tipper_card_number`` and ``tipperCardNumber`` are treated alike.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_CARD_KEYS: frozenset[str] = frozenset({"cardnumber", "tippercardnumber"})

_HIDDEN_KEYS: frozenset[str] = frozenset(
    {
        "contact",
        "drivercontact",
        "supervisorcontact",
        "suervisorcontact",
        "password",
        "token",
        "accesstoken",
        "refreshtoken",
        "authorization",
        "cookie",
    }
)

_HIDDEN = "<redacted>"
_MAX_DEPTH = 20


def _key(name: object) -> str:
    return str(name).replace("_", "").lower()


def mask_card_number(value: Any) -> str:
    """Mask all but the last four characters of a tipper card number."""
    text = str(value).strip()
    visible = text[-4:] if len(text) > 4 else ""
    return "*" * (len(text) - len(visible)) + visible


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a scrubbed copy of *value* suitable for debug logs."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if isinstance(value, Mapping):
        scrubbed: dict[str, Any] = {}
        for name, item in value.items():
            key = _key(name)
            if key in _CARD_KEYS and item is not None:
                scrubbed[str(name)] = mask_card_number(item)
            elif key in _HIDDEN_KEYS:
                scrubbed[str(name)] = _HIDDEN
            else:
                scrubbed[str(name)] = redact_for_log(
                    item, max_string=max_string, max_items=max_items, _depth=_depth + 1
                )
        return scrubbed

    if isinstance(value, (list, tuple)):
        head = [
            redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)
            for item in value[:max_items]
        ]
        if len(value) > max_items:
            head.append(f"<+{len(value) - max_items} more>")
        return head

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    return repr(value)
