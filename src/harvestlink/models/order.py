"""Harvest order models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from harvestlink.ingestion.normalize import format_number, safe_float, safe_str
from harvestlink.models._base import HarvestBaseModel, object_or_none

_UNKNOWN_BLOCK = "Unknown Block"
_DEFAULT_CROP = "Harvest"
_EMPTY_DISPLAY = "—"


class OrderStatus(StrEnum):
    """Lifecycle status of a harvest order.

    Unknown wire values map to ``PENDING``.
    """

    PENDING = "pending"
    STARTED = "started"
    COMPLETED = "completed"

    @classmethod
    def from_wire(cls, value: Any) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        text = value.strip().lower() if isinstance(value, str) else ""
        try:
            return cls(text)
        except ValueError:
            return cls.PENDING

    @property
    def display_label(self) -> str:
        """Label shown on order cards."""
        return _STATUS_LABELS[self]


_STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.STARTED: "In Progress",
    OrderStatus.COMPLETED: "Completed",
}


class SupervisorDetails(HarvestBaseModel):
    """Supervisor the order is assigned to."""

    supervisor_id: str | None = None
    """Only string ids are kept; anything else is treated as absent."""
    supervisor_name: str | None = None
    supervisor_contact: str | None = Field(
        default=None,
        validation_alias=AliasChoices("supervisor_contact", "suervisor_contact"),
    )

    @field_validator("supervisor_id", mode="before")
    @classmethod
    def _string_id_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("supervisor_name", "supervisor_contact", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)


class FarmDetails(HarvestBaseModel):
    """Farm/block the harvest takes place on."""

    farm_id: str | None = None
    area: float | None = None
    """Area in acres; only numeric wire values are accepted."""
    block_name: str | None = None
    farming_option: str | None = None
    farmer_name: str | None = None

    @field_validator("area", mode="before")
    @classmethod
    def _numeric_area(cls, value: Any) -> float | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return safe_float(value)

    @field_validator("farm_id", "block_name", "farming_option", "farmer_name", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)


class FieldManagerDetails(HarvestBaseModel):
    field_manager_id: str | None = None
    name: str | None = None
    contact: str | None = None

    @field_validator("field_manager_id", "name", "contact", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)


class OrderVehicle(HarvestBaseModel):
    """A harvester or tractor allocated to an order."""

    vehicle_id: str | None = None
    vehicle_number: str | None = None
    driver_contact: str | None = None

    @field_validator("vehicle_id", "vehicle_number", "driver_contact", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)


class VehicleDetails(HarvestBaseModel):
    harvestors: list[OrderVehicle] = Field(default_factory=list)
    tractors: list[OrderVehicle] = Field(default_factory=list)

    @field_validator("harvestors", "tractors", mode="before")
    @classmethod
    def _objects_only(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]


class HarvestOrder(HarvestBaseModel):
    """A harvest order as returned by ``get_harvest_orders``.

    Orders are read-only snapshots; a fetch replaces them wholesale.
    The embedded ``trip_sheet`` is kept exactly as received because its
    element shape depends on the backend version; see
    :mod:`harvestlink.ingestion.trip_sheet`.
    """

    order_id: str = ""
    created_at: str = ""
    status: OrderStatus = OrderStatus.PENDING
    tipper_card_number: str | None = None
    supervisor_details: SupervisorDetails | None = None
    farm_details: FarmDetails | None = None
    field_manager_details: FieldManagerDetails | None = None
    vehicle_details: VehicleDetails | None = None
    trip_sheet: Any = None

    @field_validator("order_id", "created_at", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return safe_str(value) or ""

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> OrderStatus:
        return OrderStatus.from_wire(value)

    @field_validator("tipper_card_number", mode="before")
    @classmethod
    def _string_card_only(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator(
        "supervisor_details",
        "farm_details",
        "field_manager_details",
        "vehicle_details",
        mode="before",
    )
    @classmethod
    def _objects_only(cls, value: Any) -> Any:
        return object_or_none(value)

    @property
    def active(self) -> bool:
        """Whether a tipper card is allocated, making the order scan-eligible."""
        return self.tipper_card_number is not None and bool(self.tipper_card_number.strip())

    @property
    def supervisor_id(self) -> str | None:
        details = self.supervisor_details
        return details.supervisor_id if details is not None else None

    # ------------------------------------------------------------------
    # Display projections
    # ------------------------------------------------------------------

    @property
    def order_no(self) -> str:
        return self.order_id

    @property
    def field_name(self) -> str:
        farm = self.farm_details
        return (farm.block_name if farm is not None else None) or _UNKNOWN_BLOCK

    @property
    def crop(self) -> str:
        farm = self.farm_details
        return (farm.farming_option if farm is not None else None) or _DEFAULT_CROP

    @property
    def quantity(self) -> str:
        farm = self.farm_details
        area = farm.area if farm is not None else None
        if area is None:
            return _EMPTY_DISPLAY
        return f"{format_number(area)} acres"

    @property
    def scheduled_date(self) -> str:
        return self.created_at.split("T", 1)[0] or _EMPTY_DISPLAY
