"""WebSocket frame ingestion.

Translates raw text frames from the harvest stream into live trip
updates. Malformed frames are expected noise on this channel, so every
helper here returns ``None`` rather than raising.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from harvestlink._constants import TIPPER_UNLOADED_EVENT
from harvestlink.exceptions import HarvestParseError
from harvestlink.ingestion.trip_sheet import live_trip_row
from harvestlink.models.stream import StreamEnvelope, TipperUnloadedData
from harvestlink.models.trip import TripRow

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveTripUpdate:
    """An accepted ``TIPPER_UNLOADED`` event, ready for the ledger."""

    order_id: str
    row: TripRow


def decode_frame(text: str | bytes) -> StreamEnvelope:
    """Decode a frame into an envelope.

    Raises :class:`HarvestParseError` for anything that is not a JSON object.
    """
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HarvestParseError(f"Frame is not JSON: {str(text)[:64]}") from exc
    if not isinstance(parsed, dict):
        raise HarvestParseError("Frame is not a JSON object")
    try:
        return StreamEnvelope.model_validate(parsed)
    except ValidationError as exc:
        raise HarvestParseError("Frame envelope is invalid") from exc


def parse_stream_frame(text: str | bytes) -> StreamEnvelope | None:
    """Decode a frame, returning ``None`` for malformed input."""
    try:
        return decode_frame(text)
    except HarvestParseError:
        _logger.debug("Discarding malformed stream frame", exc_info=True)
        return None


def passes_supervisor_filter(cached_id: str | None, remote_id: str | None) -> bool:
    """Cross-tenant filter for stream events.

    An event is rejected only when both identities are present and
    differ. A missing identity on either side lets the event through.
    """
    if not cached_id or not remote_id:
        return True
    return cached_id == remote_id


def build_live_update(envelope: StreamEnvelope, *, supervisor_id: str | None) -> LiveTripUpdate | None:
    """Turn an envelope into a live trip update, or ``None`` if it is not one."""
    if envelope.event != TIPPER_UNLOADED_EVENT:
        return None
    payload = envelope.data
    if not isinstance(payload, dict):
        return None

    identity = TipperUnloadedData.model_validate({**payload, "raw": payload})
    if not passes_supervisor_filter(supervisor_id, identity.supervisor_id):
        _logger.debug(
            "Ignoring %s for supervisor=%s (cached=%s)",
            envelope.event,
            identity.supervisor_id,
            supervisor_id,
        )
        return None
    if not identity.order_id:
        _logger.debug("Ignoring %s without order_id", envelope.event)
        return None

    return LiveTripUpdate(order_id=identity.order_id, row=live_trip_row(payload))
