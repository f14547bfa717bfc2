"""Internal WebSocket runtime for live harvest events."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

import aiohttp

from harvestlink._constants import RECONNECT_DELAY_S, WS_CLOSE_TIMEOUT_S
from harvestlink.ingestion.stream import build_live_update, parse_stream_frame
from harvestlink.state.ledger import LiveUpdateLedger

WebSocketConnect = Callable[[str], Awaitable[Any]]
"""Opens a WebSocket and returns an object that is async-iterable and has ``close()``."""

Sleep = Callable[[float], Awaitable[Any]]


class StreamState(StrEnum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED_RETRYING = "closed-retrying"


def _frame_payload(message: Any) -> str | bytes | None:
    """Extract the data of a text/binary frame; ``None`` for control frames."""
    if isinstance(message, (str, bytes)):
        return message
    msg_type = getattr(message, "type", None)
    if msg_type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
        data = message.data
        return data if isinstance(data, (str, bytes)) else None
    return None


def _is_terminal(message: Any) -> bool:
    msg_type = getattr(message, "type", None)
    return msg_type in (
        aiohttp.WSMsgType.ERROR,
        aiohttp.WSMsgType.CLOSE,
        aiohttp.WSMsgType.CLOSING,
        aiohttp.WSMsgType.CLOSED,
    )


class HarvestStreamRuntime:
    """Keeps one best-effort connection to the harvest event stream.

    The runtime cycles ``connecting -> open -> closed-retrying`` forever,
    waiting a fixed delay before every reconnect, until :meth:`stop` is
    called. Accepted ``TIPPER_UNLOADED`` events are appended to the
    ledger and then announced through *on_unloaded*.

    Every resume point (after connect, per frame, after the retry delay)
    checks the closed flag, so nothing happens once :meth:`stop` ran.
    """

    def __init__(
        self,
        *,
        url: str,
        ledger: LiveUpdateLedger,
        connect: WebSocketConnect,
        on_unloaded: Callable[[], Awaitable[None]] | None = None,
        supervisor_id: str | None = None,
        reconnect_delay: float = RECONNECT_DELAY_S,
        sleep: Sleep = asyncio.sleep,
        close_timeout: float = WS_CLOSE_TIMEOUT_S,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = url
        self._ledger = ledger
        self._connect = connect
        self._on_unloaded = on_unloaded
        self._supervisor_id = supervisor_id
        self._reconnect_delay = reconnect_delay
        self._sleep = sleep
        self._close_timeout = close_timeout
        self._logger = logger or logging.getLogger(__name__)

        self._state = StreamState.CONNECTING
        self._closed = False
        self._task: asyncio.Task[None] | None = None
        self._ws: Any = None

        self.connect_attempts = 0
        self.frames_received = 0
        self.updates_applied = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Whether :meth:`stop` has been called. Final."""
        return self._closed

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Spawn the background connection task."""
        if self._closed:
            self._logger.debug("Harvest stream start ignored after teardown")
            return
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="harvestlink-stream")

    async def stop(self) -> None:
        """Tear down: no further connects, frames or retries are acted on."""
        self._closed = True
        task = self._task
        self._task = None
        ws = self._ws
        self._ws = None

        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if ws is not None:
            await self._close_quietly(ws)
        self._logger.debug("Harvest stream stopped")

    async def _close_quietly(self, ws: Any) -> None:
        """Close *ws*, waiting at most ``close_timeout`` for the peer."""
        try:
            await asyncio.wait_for(ws.close(), timeout=self._close_timeout)
        except TimeoutError:
            self._logger.debug("Harvest stream close timed out after %.1fs", self._close_timeout)
        except Exception:
            self._logger.debug("Harvest stream close failed", exc_info=True)

    def _set_state(self, state: StreamState) -> None:
        if self._state != state:
            self._logger.debug("Harvest stream %s -> %s", self._state, state)
        self._state = state

    async def _run(self) -> None:
        while not self._closed:
            self._set_state(StreamState.CONNECTING)
            self.connect_attempts += 1
            try:
                ws = await self._connect(self._url)
            except asyncio.CancelledError:
                raise
            except Exception:
                self._logger.debug("Harvest stream connect failed url=%s", self._url, exc_info=True)
            else:
                if self._closed:
                    await self._close_quietly(ws)
                    return
                await self._serve(ws)
                if self._closed:
                    return
                self._set_state(StreamState.CLOSED_RETRYING)

            await self._sleep(self._reconnect_delay)

    async def _serve(self, ws: Any) -> None:
        self._ws = ws
        self._set_state(StreamState.OPEN)
        try:
            async for message in ws:
                if self._closed:
                    return
                if _is_terminal(message):
                    break
                payload = _frame_payload(message)
                if payload is None:
                    continue
                await self._handle_frame(payload)
        except asyncio.CancelledError:
            raise
        except Exception:
            self._logger.debug("Harvest stream receive failed", exc_info=True)
        finally:
            if self._ws is ws:
                self._ws = None
                await self._close_quietly(ws)
        self._logger.debug("Harvest stream disconnected")

    async def _handle_frame(self, payload: str | bytes) -> None:
        self.frames_received += 1
        envelope = parse_stream_frame(payload)
        if envelope is None:
            return
        update = build_live_update(envelope, supervisor_id=self._supervisor_id)
        if update is None or self._closed:
            return

        self._ledger.append(update.order_id, update.row)
        self.updates_applied += 1
        self._logger.debug("Live trip row for order=%s trip_no=%s", update.order_id, update.row.trip_no)

        if self._on_unloaded is None:
            return
        try:
            await self._on_unloaded()
        except asyncio.CancelledError:
            raise
        except Exception:
            self._logger.debug("on_unloaded callback failed", exc_info=True)
