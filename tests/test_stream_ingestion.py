from __future__ import annotations

import json

import pytest

from harvestlink.exceptions import HarvestParseError
from harvestlink.ingestion.stream import (
    build_live_update,
    decode_frame,
    parse_stream_frame,
    passes_supervisor_filter,
)
from harvestlink.models.stream import StreamEnvelope
from harvestlink.models.trip import TripRow


def _envelope(event: str = "TIPPER_UNLOADED", **data: object) -> StreamEnvelope:
    return StreamEnvelope(event=event, data=data)


@pytest.mark.parametrize("frame", ["", "not json", "{", "[1, 2]", '"text"', "42", b"\xff\xfe"])
def test_malformed_frames_are_discarded(frame: str | bytes) -> None:
    assert parse_stream_frame(frame) is None


def test_decode_frame_raises_parse_error() -> None:
    with pytest.raises(HarvestParseError):
        decode_frame("nope")


def test_parse_frame_accepts_bytes() -> None:
    envelope = parse_stream_frame(json.dumps({"event": "PING"}).encode())
    assert envelope is not None
    assert envelope.event == "PING"


def test_non_string_event_is_blank() -> None:
    envelope = parse_stream_frame(json.dumps({"event": 5, "data": {}}))
    assert envelope is not None
    assert envelope.event == ""


@pytest.mark.parametrize(
    ("cached", "remote", "expected"),
    [
        ("S1", "S1", True),
        ("S1", "S2", False),
        ("S1", None, True),
        (None, "S2", True),
        ("", "S2", True),
        ("S1", "", True),
        (None, None, True),
    ],
)
def test_supervisor_filter(cached: str | None, remote: str | None, expected: bool) -> None:
    assert passes_supervisor_filter(cached, remote) is expected


@pytest.mark.parametrize("event", ["TRIP_STARTED", "tipper_unloaded", "", "HEARTBEAT"])
def test_other_events_are_ignored(event: str) -> None:
    assert build_live_update(_envelope(event, order_id="H1", net_weight=1), supervisor_id=None) is None


def test_missing_data_is_ignored() -> None:
    assert build_live_update(StreamEnvelope(event="TIPPER_UNLOADED"), supervisor_id=None) is None
    assert build_live_update(StreamEnvelope(event="TIPPER_UNLOADED", data=[1]), supervisor_id=None) is None


def test_missing_order_id_is_ignored() -> None:
    assert build_live_update(_envelope(net_weight=3), supervisor_id=None) is None
    assert build_live_update(_envelope(order_id="", net_weight=3), supervisor_id=None) is None


def test_mismatched_supervisor_is_ignored() -> None:
    envelope = _envelope(order_id="H1", supervisor_id="S2", net_weight=3)
    assert build_live_update(envelope, supervisor_id="S1") is None


def test_matching_or_absent_supervisor_passes() -> None:
    matching = build_live_update(_envelope(order_id="H1", supervisor_id="S1"), supervisor_id="S1")
    remote_absent = build_live_update(_envelope(order_id="H1"), supervisor_id="S1")
    cached_absent = build_live_update(_envelope(order_id="H1", supervisor_id="S9"), supervisor_id=None)

    assert matching is not None
    assert remote_absent is not None
    assert cached_absent is not None


def test_accepted_update_carries_normalized_row() -> None:
    update = build_live_update(
        _envelope(order_id="H1", net_weight=3, moisture_level=10, foregine_material=1, trip_sheet_length="2"),
        supervisor_id=None,
    )

    assert update is not None
    assert update.order_id == "H1"
    assert update.row == TripRow(trip_no="2", net_weight_ton=3, moisture_percent=10, foreign_material_percent=1)
