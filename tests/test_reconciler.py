from __future__ import annotations

import itertools
import math

import pytest

from harvestlink.models.order import HarvestOrder
from harvestlink.models.trip import TripRow
from harvestlink.state.ledger import LiveUpdateLedger
from harvestlink.state.reconciler import TripSheetReconciler, sum_net_weight


def _order(order_id: str = "H1", trip_sheet: object = None) -> HarvestOrder:
    return HarvestOrder.model_validate({"order_id": order_id, "trip_sheet": trip_sheet})


def test_historical_rows_precede_live_rows() -> None:
    ledger = LiveUpdateLedger()
    reconciler = TripSheetReconciler(ledger)
    order = _order(trip_sheet=[{"weighment": {"net_weight": 2.5}}])

    ledger.append("H1", TripRow(trip_no="2", net_weight_ton=3, moisture_percent=10, foreign_material_percent=1))
    ledger.append("H1", TripRow(trip_no="3", net_weight_ton=1))
    ledger.append("H2", TripRow(trip_no="1", net_weight_ton=50))

    rows = reconciler.rows(order)

    assert [row.trip_no for row in rows] == ["1", "2", "3"]
    assert reconciler.total(order) == pytest.approx(6.5)


def test_live_rows_are_never_deduplicated() -> None:
    ledger = LiveUpdateLedger()
    reconciler = TripSheetReconciler(ledger)
    order = _order(trip_sheet=[{"trip_no": "1", "nw": 2}])

    ledger.append("H1", TripRow(trip_no="1", net_weight_ton=2))

    assert len(reconciler.rows(order)) == 2
    assert reconciler.total(order) == 4


def test_rows_are_idempotent_without_new_events() -> None:
    ledger = LiveUpdateLedger()
    reconciler = TripSheetReconciler(ledger)
    order = _order(trip_sheet=[{"nw": 1}, {"nw": 2}])
    ledger.append("H1", TripRow(trip_no="-", net_weight_ton=3))

    assert reconciler.rows(order) == reconciler.rows(order)
    assert reconciler.trip_sheet(order) == reconciler.trip_sheet(order)


def test_unknown_trip_sheet_shape_yields_live_rows_only() -> None:
    ledger = LiveUpdateLedger()
    reconciler = TripSheetReconciler(ledger)
    ledger.append("H1", TripRow(trip_no="-", net_weight_ton=1.5))

    sheet = reconciler.trip_sheet(_order(trip_sheet={"unexpected": "shape"}))

    assert sheet.trip_count == 1
    assert sheet.total_net_weight_ton == 1.5


def test_total_is_order_independent() -> None:
    rows = [TripRow(trip_no=str(i), net_weight_ton=w) for i, w in enumerate([0.1, 0.2, 0.3, 1e-9, 7.25])]
    totals = {sum_net_weight(permutation) for permutation in itertools.permutations(rows)}
    assert len(totals) == 1


def test_total_ignores_non_finite_weights() -> None:
    rows = [
        TripRow(trip_no="1", net_weight_ton=2),
        TripRow(trip_no="2", net_weight_ton=math.inf),
        TripRow(trip_no="3", net_weight_ton=math.nan),
    ]
    assert sum_net_weight(rows) == 2


def test_empty_order_totals_zero() -> None:
    reconciler = TripSheetReconciler(LiveUpdateLedger())
    sheet = reconciler.trip_sheet(_order())
    assert sheet.rows == ()
    assert sheet.total_net_weight_ton == 0


class TestLedger:
    def test_append_preserves_arrival_order(self) -> None:
        ledger = LiveUpdateLedger()
        for weight in (3, 1, 2):
            ledger.append("H1", TripRow(trip_no="-", net_weight_ton=weight))

        assert [row.net_weight_ton for row in ledger.rows_for("H1")] == [3, 1, 2]
        assert ledger.version == 3
        assert len(ledger) == 3
        assert "H1" in ledger
        assert list(ledger) == ["H1"]

    def test_unknown_order_has_no_rows(self) -> None:
        assert LiveUpdateLedger().rows_for("missing") == ()

    def test_cap_keeps_newest_rows(self) -> None:
        ledger = LiveUpdateLedger(max_rows_per_order=2)
        for weight in (1, 2, 3):
            ledger.append("H1", TripRow(trip_no="-", net_weight_ton=weight))

        assert [row.net_weight_ton for row in ledger.rows_for("H1")] == [2, 3]

    @pytest.mark.parametrize("cap", [0, -1])
    def test_invalid_cap_rejected(self, cap: int) -> None:
        with pytest.raises(ValueError):
            LiveUpdateLedger(max_rows_per_order=cap)

    def test_clear_drops_everything(self) -> None:
        ledger = LiveUpdateLedger()
        ledger.append("H1", TripRow(trip_no="-"))
        ledger.append("H2", TripRow(trip_no="-"))
        version = ledger.version

        ledger.clear()

        assert len(ledger) == 0
        assert ledger.order_ids() == []
        assert ledger.version > version
