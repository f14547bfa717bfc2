"""Trip sheet normalization.

The embedded ``trip_sheet`` array on a harvest order has changed shape
across backend releases: newer payloads nest measurements under
``weighment`` / ``quality_check``; older ones use flat keys with a range
of spellings. Each logical field is resolved through an ordered accessor
table; the first value that parses wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from harvestlink._constants import LIVE_TRIP_NO_PLACEHOLDER
from harvestlink.ingestion.normalize import (
    Accessor,
    field,
    finite_or_zero,
    first_finite,
    first_present,
    format_trip_no,
    nested,
)
from harvestlink.models.trip import TripRow

_WEIGHMENT_SECTIONS = ("weighment", "weighment_details", "weighmentDetails")
_QUALITY_SECTIONS = ("quality_check", "qualityCheck", "quality")

TRIP_NO_ACCESSORS: tuple[Accessor, ...] = (
    field("trip_no"),
    field("tripNo"),
    field("trip"),
    field("trip_number"),
    field("tripNumber"),
)

NET_WEIGHT_ACCESSORS: tuple[Accessor, ...] = (
    nested(_WEIGHMENT_SECTIONS, "net_weight"),
    field("nw"),
    field("net_weight"),
    field("netWeight"),
    field("net_wight"),
    field("netWight"),
    field("net_weight_ton"),
)

MOISTURE_ACCESSORS: tuple[Accessor, ...] = (
    nested(_QUALITY_SECTIONS, "moisture_percentage"),
    nested(_QUALITY_SECTIONS, "moisturePercent"),
    field("moist"),
    field("moisture"),
    field("moist_percent"),
    field("moisture_percent"),
    field("moisturePercentage"),
)

FOREIGN_MATERIAL_ACCESSORS: tuple[Accessor, ...] = (
    nested(_QUALITY_SECTIONS, "foreign_material_percentage"),
    nested(_QUALITY_SECTIONS, "foreignMaterialPercent"),
    field("fm"),
    field("foreign_material"),
    field("foreignMaterial"),
    field("fm_percent"),
    field("foreignMaterialPercentage"),
)

# Stream payloads use a single fixed spelling per field ("foregine" sic).
LIVE_TRIP_NO_ACCESSORS: tuple[Accessor, ...] = (field("trip_sheet_length"),)
LIVE_NET_WEIGHT_ACCESSORS: tuple[Accessor, ...] = (field("net_weight"),)
LIVE_MOISTURE_ACCESSORS: tuple[Accessor, ...] = (field("moisture_level"),)
LIVE_FOREIGN_MATERIAL_ACCESSORS: tuple[Accessor, ...] = (field("foregine_material"),)

_EMPTY: Mapping[str, Any] = {}


def _measurements(
    source: Mapping[str, Any],
    *,
    trip_no: str,
    net_weight: tuple[Accessor, ...],
    moisture: tuple[Accessor, ...],
    foreign_material: tuple[Accessor, ...],
) -> TripRow:
    return TripRow(
        trip_no=trip_no,
        net_weight_ton=finite_or_zero(first_finite(source, net_weight)),
        moisture_percent=finite_or_zero(first_finite(source, moisture)),
        foreign_material_percent=finite_or_zero(first_finite(source, foreign_material)),
    )


def normalize_trip_row(raw: Any, position: int) -> TripRow:
    """Normalize one historical trip element.

    *position* is the 1-based index used when no trip number is found.
    Non-object elements still produce a row of zeros.
    """
    source = raw if isinstance(raw, Mapping) else _EMPTY
    trip_no = first_present(source, TRIP_NO_ACCESSORS, format_trip_no) or str(position)
    return _measurements(
        source,
        trip_no=trip_no,
        net_weight=NET_WEIGHT_ACCESSORS,
        moisture=MOISTURE_ACCESSORS,
        foreign_material=FOREIGN_MATERIAL_ACCESSORS,
    )


def normalize_trip_sheet(raw: Any) -> list[TripRow]:
    """Normalize an order's embedded trip array.

    Never raises: non-list input yields ``[]`` and every element yields
    exactly one row, in order.
    """
    if not isinstance(raw, list):
        return []
    return [normalize_trip_row(item, index) for index, item in enumerate(raw, start=1)]


def live_trip_row(data: Mapping[str, Any]) -> TripRow:
    """Build a trip row from a ``TIPPER_UNLOADED`` event payload."""
    trip_no = first_present(data, LIVE_TRIP_NO_ACCESSORS, format_trip_no) or LIVE_TRIP_NO_PLACEHOLDER
    return _measurements(
        data,
        trip_no=trip_no,
        net_weight=LIVE_NET_WEIGHT_ACCESSORS,
        moisture=LIVE_MOISTURE_ACCESSORS,
        foreign_material=LIVE_FOREIGN_MATERIAL_ACCESSORS,
    )
