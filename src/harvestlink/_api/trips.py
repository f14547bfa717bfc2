"""Trip start endpoint."""

from __future__ import annotations

from typing import Any

from harvestlink._constants import START_TRIP_ENDPOINT
from harvestlink._transport import Transport
from harvestlink.models.start_trip import StartTripRequest, StartTripResponse


def parse_start_trip_response(body: Any) -> StartTripResponse:
    if not isinstance(body, dict):
        return StartTripResponse(raw={"value": body})
    return StartTripResponse.model_validate(body)


async def start_trip(transport: Transport, order_id: str, card_number: str) -> StartTripResponse:
    """Start a trip for *order_id* with the scanned tipper *card_number*.

    Raises :class:`pydantic.ValidationError` (a ``ValueError``) when
    either value is blank.
    """
    request = StartTripRequest(order_id=order_id, card_number=card_number)
    body = await transport.post_json(START_TRIP_ENDPOINT, request.model_dump())
    return parse_start_trip_response(body)
