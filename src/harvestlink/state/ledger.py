"""Live update ledger.

Holds trip rows received from the stream, keyed by order id. The ledger
survives order re-fetches; rows are re-attached to whichever order
object currently carries the id.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from harvestlink.models.trip import TripRow


class LiveUpdateLedger:
    """Append-only per-order sequence of live trip rows.

    Parameters
    ----------
    max_rows_per_order : int or None
        When set, each order keeps only its newest N rows. ``None``
        keeps everything for the lifetime of the owner.
    """

    def __init__(self, *, max_rows_per_order: int | None = None) -> None:
        if max_rows_per_order is not None and max_rows_per_order <= 0:
            raise ValueError("max_rows_per_order must be positive")
        self._max_rows = max_rows_per_order
        self._rows: dict[str, deque[TripRow]] = {}
        self._version = 0

    @property
    def version(self) -> int:
        """Monotonic counter bumped on every mutation."""
        return self._version

    def append(self, order_id: str, row: TripRow) -> None:
        rows = self._rows.get(order_id)
        if rows is None:
            rows = deque(maxlen=self._max_rows)
            self._rows[order_id] = rows
        rows.append(row)
        self._version += 1

    def rows_for(self, order_id: str) -> tuple[TripRow, ...]:
        rows = self._rows.get(order_id)
        return tuple(rows) if rows is not None else ()

    def order_ids(self) -> list[str]:
        return list(self._rows)

    def clear(self) -> None:
        """Drop every row. Only the owner's teardown calls this."""
        self._rows.clear()
        self._version += 1

    def __len__(self) -> int:
        return sum(len(rows) for rows in self._rows.values())

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rows))

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._rows
