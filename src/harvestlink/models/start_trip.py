"""Start-trip request/response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from harvestlink.models._base import HarvestBaseModel


class StartTripRequest(BaseModel):
    """Body of ``POST /Harvest_management/start_trip``."""

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    order_id: str
    card_number: str

    @field_validator("order_id", "card_number")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must be non-empty")
        return value


class StartTripResponse(HarvestBaseModel):
    """Backend acknowledgement; anything beyond these keys stays in ``raw``."""

    success: bool | None = None
    message: str | None = None

    @field_validator("success", mode="before")
    @classmethod
    def _coerce_success(cls, value: Any) -> bool | None:
        return value if isinstance(value, bool) else None

    @field_validator("message", mode="before")
    @classmethod
    def _coerce_message(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None
