"""Trip sheet models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TripRow(BaseModel):
    """One truck load delivered against a harvest order.

    Rows come from two places: the order's embedded historical trip
    sheet, and live ``TIPPER_UNLOADED`` stream events. Both are
    normalized into this shape.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    trip_no: str
    net_weight_ton: float = 0.0
    moisture_percent: float = 0.0
    foreign_material_percent: float = 0.0


class TripSheet(BaseModel):
    """Reconciled trip sheet for one order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    order_id: str
    rows: tuple[TripRow, ...] = Field(default_factory=tuple)
    total_net_weight_ton: float = 0.0

    @property
    def trip_count(self) -> int:
        return len(self.rows)
