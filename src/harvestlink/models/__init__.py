"""Data models for harvest backend payloads."""

from harvestlink.models._base import HarvestBaseModel
from harvestlink.models.order import (
    FarmDetails,
    FieldManagerDetails,
    HarvestOrder,
    OrderStatus,
    OrderVehicle,
    SupervisorDetails,
    VehicleDetails,
)
from harvestlink.models.start_trip import StartTripRequest, StartTripResponse
from harvestlink.models.stream import StreamEnvelope, TipperUnloadedData
from harvestlink.models.trip import TripRow, TripSheet

__all__ = [
    "FarmDetails",
    "FieldManagerDetails",
    "HarvestBaseModel",
    "HarvestOrder",
    "OrderStatus",
    "OrderVehicle",
    "StartTripRequest",
    "StartTripResponse",
    "StreamEnvelope",
    "SupervisorDetails",
    "TipperUnloadedData",
    "TripRow",
    "TripSheet",
    "VehicleDetails",
]
