"""Trip sheet reconciliation.

Merges an order's historical trip rows (from the REST snapshot) with the
live rows the stream has appended to the ledger. The result is a pure
derivation: nothing here mutates the ledger or caches rows.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from harvestlink.ingestion.trip_sheet import normalize_trip_sheet
from harvestlink.models.order import HarvestOrder
from harvestlink.models.trip import TripRow, TripSheet
from harvestlink.state.ledger import LiveUpdateLedger


def sum_net_weight(rows: Iterable[TripRow]) -> float:
    """Sum net weights, counting non-finite values as zero."""
    return math.fsum(row.net_weight_ton for row in rows if math.isfinite(row.net_weight_ton))


class TripSheetReconciler:
    """Read-only view over the ledger for building per-order trip sheets."""

    def __init__(self, ledger: LiveUpdateLedger) -> None:
        self._ledger = ledger

    @staticmethod
    def normalize_historical(raw: Any) -> list[TripRow]:
        return normalize_trip_sheet(raw)

    def rows(self, order: HarvestOrder) -> list[TripRow]:
        """Historical rows followed by live rows, in arrival order.

        Live rows are never assumed to duplicate historical ones.
        """
        historical = normalize_trip_sheet(order.trip_sheet)
        return [*historical, *self._ledger.rows_for(order.order_id)]

    def live_rows(self, order_id: str) -> list[TripRow]:
        return list(self._ledger.rows_for(order_id))

    def total(self, order: HarvestOrder) -> float:
        return sum_net_weight(self.rows(order))

    def trip_sheet(self, order: HarvestOrder) -> TripSheet:
        rows = self.rows(order)
        return TripSheet(
            order_id=order.order_id,
            rows=tuple(rows),
            total_net_weight_ton=sum_net_weight(rows),
        )
