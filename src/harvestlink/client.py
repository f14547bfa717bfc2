"""High-level async client for harvest order tracking."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any

import aiohttp

from harvestlink._api.orders import fetch_harvest_orders
from harvestlink._api.trips import start_trip as _start_trip
from harvestlink._stream import HarvestStreamRuntime, Sleep, StreamState, WebSocketConnect
from harvestlink._transport import JsonTransport, Transport
from harvestlink.config import HarvestConfig
from harvestlink.exceptions import HarvestError, HarvestFetchError
from harvestlink.models.order import HarvestOrder
from harvestlink.models.start_trip import StartTripResponse
from harvestlink.models.trip import TripRow, TripSheet
from harvestlink.notify import NotificationDispatcher
from harvestlink.state.ledger import LiveUpdateLedger
from harvestlink.state.reconciler import TripSheetReconciler, sum_net_weight

_logger = logging.getLogger(__name__)


class HarvestClient:
    """Owner of the harvest order snapshot and the live trip stream.

    Usage::

        async with HarvestClient(HarvestConfig(supervisor_id="S1")) as client:
            await client.mount()
            for order in client.orders:
                print(order.order_id, client.total_net_weight(order.order_id))

    The REST snapshot and the stream run independently: a refresh
    replaces the order list but keeps every live row, which is
    re-attached by order id.
    """

    def __init__(
        self,
        config: HarvestConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        dispatcher: NotificationDispatcher | None = None,
        ws_connect: WebSocketConnect | None = None,
        sleep: Sleep | None = None,
        auto_mount: bool = False,
    ) -> None:
        self._config = config or HarvestConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._dispatcher = dispatcher or NotificationDispatcher()
        self._ws_connect = ws_connect
        self._sleep = sleep
        self._auto_mount = auto_mount

        self._ledger = LiveUpdateLedger(max_rows_per_order=self._config.max_live_rows_per_order)
        self._reconciler = TripSheetReconciler(self._ledger)
        self._orders: list[HarvestOrder] = []
        self._stream: HarvestStreamRuntime | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HarvestClient:
        if self._transport is None or self._ws_connect is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            if self._transport is None:
                self._transport = JsonTransport(self._config, self._http_session)
        if self._auto_mount:
            await self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.unmount()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    async def mount(self) -> None:
        """Start the live stream (if enabled) and load the order list."""
        if self._config.stream_enabled:
            self.start_stream()
        await self.refresh()

    async def unmount(self) -> None:
        """Tear down the stream and drop every live row."""
        await self.stop_stream()
        self._ledger.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise HarvestError("Client not initialized. Use 'async with HarvestClient(...) as client:'")
        return self._transport

    def _resolve_ws_connect(self) -> WebSocketConnect:
        if self._ws_connect is not None:
            return self._ws_connect
        if self._http_session is None:
            raise HarvestError("Client not initialized. Use 'async with HarvestClient(...) as client:'")
        return functools.partial(self._http_session.ws_connect, heartbeat=self._config.ws_heartbeat)

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    @property
    def config(self) -> HarvestConfig:
        return self._config

    @property
    def orders(self) -> list[HarvestOrder]:
        """Current order snapshot (filtered for the cached supervisor)."""
        return list(self._orders)

    @property
    def active_orders(self) -> list[HarvestOrder]:
        """Orders with an allocated tipper card; the only scan-eligible ones."""
        return [order for order in self._orders if order.active]

    def get_order(self, order_id: str) -> HarvestOrder | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    async def get_harvest_orders(self) -> list[HarvestOrder]:
        """Fetch the order list. Raises :class:`HarvestFetchError` on failure."""
        transport = self._require_transport()
        return await fetch_harvest_orders(transport, supervisor_id=self._config.supervisor_id)

    async def refresh(self) -> bool:
        """Reload the order snapshot.

        On failure the previous snapshot is kept, a single
        "Failed to load harvest orders" toast is shown and ``False`` is
        returned. There is no automatic retry.
        """
        try:
            orders = await self.get_harvest_orders()
        except HarvestFetchError as exc:
            _logger.debug("Harvest order refresh failed", exc_info=True)
            self._dispatcher.notify_fetch_failed(exc)
            return False
        self._orders = orders
        return True

    async def start_trip(self, order_id: str, card_number: str) -> StartTripResponse:
        transport = self._require_transport()
        return await _start_trip(transport, order_id, card_number)

    # ------------------------------------------------------------------
    # Trip sheets
    # ------------------------------------------------------------------

    @property
    def ledger(self) -> LiveUpdateLedger:
        return self._ledger

    @property
    def reconciler(self) -> TripSheetReconciler:
        return self._reconciler

    def trip_rows(self, order_id: str) -> list[TripRow]:
        """Historical plus live rows for whichever order carries *order_id*.

        An id missing from the snapshot yields only its live rows.
        """
        order = self.get_order(order_id)
        if order is None:
            return self._reconciler.live_rows(order_id)
        return self._reconciler.rows(order)

    def total_net_weight(self, order_id: str) -> float:
        return sum_net_weight(self.trip_rows(order_id))

    def trip_sheet(self, order_id: str) -> TripSheet:
        order = self.get_order(order_id)
        if order is not None:
            return self._reconciler.trip_sheet(order)
        rows = self._reconciler.live_rows(order_id)
        return TripSheet(order_id=order_id, rows=tuple(rows), total_net_weight_ton=sum_net_weight(rows))

    # ------------------------------------------------------------------
    # Live stream
    # ------------------------------------------------------------------

    @property
    def stream_state(self) -> StreamState | None:
        stream = self._stream
        return stream.state if stream is not None else None

    @property
    def stream(self) -> HarvestStreamRuntime | None:
        return self._stream

    def start_stream(self) -> None:
        if self._stream is not None and not self._stream.is_closed:
            return
        runtime = HarvestStreamRuntime(
            url=self._config.stream_url,
            ledger=self._ledger,
            connect=self._resolve_ws_connect(),
            on_unloaded=self._dispatcher.notify_tipper_unloaded,
            supervisor_id=self._config.supervisor_id,
            reconnect_delay=self._config.reconnect_delay,
            logger=_logger,
            sleep=self._sleep or asyncio.sleep,
        )
        runtime.start()
        self._stream = runtime

    async def stop_stream(self) -> None:
        stream = self._stream
        self._stream = None
        if stream is not None:
            await stream.stop()
