"""User-visible notification side effects.

Every accepted live event produces an in-app toast. A native push-style
notification is attempted on top of that when the host provides one;
its absence or failure is never an error.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from harvestlink._constants import (
    FETCH_FAILED_FALLBACK_DETAIL,
    FETCH_FAILED_TITLE,
    NOTIFICATION_CHANNEL_ID,
    NOTIFICATION_CHANNEL_NAME,
    NOTIFICATION_TITLE,
    TIPPER_UNLOADED_MESSAGE,
)
from harvestlink.exceptions import CapabilityUnavailableError

_logger = logging.getLogger(__name__)


class ToastKind(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class ToastMessage(BaseModel):
    """A transient in-app message."""

    model_config = ConfigDict(frozen=True)

    kind: ToastKind
    title: str
    detail: str | None = None


@runtime_checkable
class NativeNotifier(Protocol):
    """Optional platform notification capability.

    Methods may be plain functions or coroutines. ``create_channel`` is
    optional; platforms that need no channel simply omit it.
    """

    def display_notification(self, *, title: str, body: str, channel_id: str) -> Any:
        ...


def _log_toast(message: ToastMessage) -> None:
    if message.kind == ToastKind.ERROR:
        _logger.warning("%s: %s", message.title, message.detail)
    else:
        _logger.info("%s", message.title)


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class NotificationDispatcher:
    """Fans a harvest event out to the in-app sink and the native notifier.

    Never raises: sink and notifier failures are logged at DEBUG.
    """

    def __init__(
        self,
        *,
        on_toast: Callable[[ToastMessage], None] | None = None,
        native: NativeNotifier | None = None,
    ) -> None:
        self._on_toast = on_toast or _log_toast
        self._native = native
        self._channel_ready = False

    def toast(self, message: ToastMessage) -> None:
        try:
            self._on_toast(message)
        except Exception:
            _logger.debug("Toast sink failed", exc_info=True)

    def _require_native(self) -> NativeNotifier:
        native = self._native
        if native is None or not callable(getattr(native, "display_notification", None)):
            raise CapabilityUnavailableError("Native notifications are not available")
        return native

    async def _ensure_channel(self, native: NativeNotifier) -> None:
        if self._channel_ready:
            return
        create_channel = getattr(native, "create_channel", None)
        if callable(create_channel):
            try:
                await _maybe_await(
                    create_channel(
                        channel_id=NOTIFICATION_CHANNEL_ID,
                        name=NOTIFICATION_CHANNEL_NAME,
                        importance="high",
                    )
                )
            except Exception:
                _logger.debug("Notification channel creation failed", exc_info=True)
                return
        self._channel_ready = True

    async def notify_tipper_unloaded(self) -> None:
        """Announce an unloaded tipper truck."""
        self.toast(ToastMessage(kind=ToastKind.INFO, title=TIPPER_UNLOADED_MESSAGE))

        try:
            native = self._require_native()
        except CapabilityUnavailableError:
            _logger.debug("Skipping native notification: capability unavailable")
            return

        try:
            await self._ensure_channel(native)
            await _maybe_await(
                native.display_notification(
                    title=NOTIFICATION_TITLE,
                    body=TIPPER_UNLOADED_MESSAGE,
                    channel_id=NOTIFICATION_CHANNEL_ID,
                )
            )
        except Exception:
            _logger.debug("Native notification failed", exc_info=True)

    def notify_fetch_failed(self, exc: BaseException | None = None) -> None:
        """Report a failed order load with the underlying message when known."""
        detail = str(exc) if exc is not None and str(exc) else FETCH_FAILED_FALLBACK_DETAIL
        self.toast(ToastMessage(kind=ToastKind.ERROR, title=FETCH_FAILED_TITLE, detail=detail))
