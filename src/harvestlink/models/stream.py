"""Live stream envelope models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from harvestlink.ingestion.normalize import safe_str


class StreamEnvelope(BaseModel):
    """Minimal envelope for inbound WebSocket frames: ``{event, data}``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    event: str = ""
    data: Any = None

    @field_validator("event", mode="before")
    @classmethod
    def _coerce_event(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class TipperUnloadedData(BaseModel):
    """Identity fields of a ``TIPPER_UNLOADED`` payload.

    Measurements are read straight from the raw payload by
    :func:`harvestlink.ingestion.trip_sheet.live_trip_row`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    order_id: str | None = None
    supervisor_id: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("order_id", "supervisor_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> str | None:
        if isinstance(value, (dict, list)):
            return None
        return safe_str(value)
