"""Base model for harvest backend payloads.

Every backend response model inherits from :class:`HarvestBaseModel`
which provides:

* frozen, extra-ignoring Pydantic configuration so new backend fields
  never break parsing.
* A ``model_validator(mode="before")`` that drops ``None`` and
  placeholder values (``""``, ``"--"``) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_SENTINELS = frozenset({"", "--"})


def object_or_none(value: Any) -> dict[str, Any] | None:
    """Keep *value* only when it is a JSON object."""
    return value if isinstance(value, dict) else None


class HarvestBaseModel(BaseModel):
    """Base for harvest backend models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original backend payload."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop placeholder values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            cleaned[key] = value
        # Only auto-stash raw when not explicitly provided.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
