from __future__ import annotations

import pytest

from harvestlink._redact import mask_card_number, redact_for_log


def test_redact_for_log_scrubs_harvest_order() -> None:
    payload = {
        "order_id": "H1",
        "tipper_card_number": "CARD-0007",
        "supervisor_details": {"supervisor_id": "S1", "suervisor_contact": "9999"},
        "field_manager_details": {"name": "Ravi", "contact": 9876543210},
        "vehicle_details": {"harvestors": [{"vehicle_number": "KA-01", "driver_contact": "8888"}]},
        "Authorization": "Bearer x",
    }

    redacted = redact_for_log(payload)
    assert redacted["order_id"] == "H1"
    assert redacted["tipper_card_number"] == "*****0007"
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["supervisor_details"] == {"supervisor_id": "S1", "suervisor_contact": "<redacted>"}
    assert redacted["field_manager_details"]["contact"] == "<redacted>"
    assert redacted["vehicle_details"]["harvestors"][0] == {"vehicle_number": "KA-01", "driver_contact": "<redacted>"}


def test_card_keys_match_any_spelling() -> None:
    redacted = redact_for_log({"tipperCardNumber": "ABCDEFGH", "cardNumber": 12345678, "card_number": None})
    assert redacted == {"tipperCardNumber": "****EFGH", "cardNumber": "****5678", "card_number": None}


@pytest.mark.parametrize(("card", "masked"), [("AB12", "****"), ("", ""), (" CARD-7781 ", "*****7781")])
def test_mask_card_number(card: str, masked: str) -> None:
    assert mask_card_number(card) == masked


def test_long_trip_sheets_are_capped() -> None:
    redacted = redact_for_log({"trip_sheet": [{"nw": i} for i in range(25)]}, max_items=3)
    assert redacted["trip_sheet"] == [{"nw": 0}, {"nw": 1}, {"nw": 2}, "<+22 more>"]


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log({"value": "x" * 600}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_summarizes_bytes() -> None:
    assert redact_for_log(b"\x00\x01\x02") == "<bytes:3b>"
