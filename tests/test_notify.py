from __future__ import annotations

from typing import Any

import pytest

from harvestlink.exceptions import CapabilityUnavailableError, HarvestServerError
from harvestlink.notify import NativeNotifier, NotificationDispatcher, ToastKind, ToastMessage


class RecordingNotifier:
    def __init__(self, *, fail_display: bool = False, fail_channel: bool = False) -> None:
        self.fail_display = fail_display
        self.fail_channel = fail_channel
        self.channels: list[dict[str, Any]] = []
        self.displayed: list[dict[str, Any]] = []

    async def create_channel(self, **kwargs: Any) -> None:
        if self.fail_channel:
            raise RuntimeError("channel denied")
        self.channels.append(kwargs)

    def display_notification(self, *, title: str, body: str, channel_id: str) -> None:
        if self.fail_display:
            raise RuntimeError("permission denied")
        self.displayed.append({"title": title, "body": body, "channel_id": channel_id})


def _dispatcher(native: Any = None) -> tuple[NotificationDispatcher, list[ToastMessage]]:
    toasts: list[ToastMessage] = []
    return NotificationDispatcher(on_toast=toasts.append, native=native), toasts


@pytest.mark.asyncio
async def test_tipper_unloaded_toasts_and_notifies() -> None:
    native = RecordingNotifier()
    dispatcher, toasts = _dispatcher(native)

    await dispatcher.notify_tipper_unloaded()

    assert toasts == [ToastMessage(kind=ToastKind.INFO, title="tripper has been unloaded")]
    assert native.displayed == [
        {"title": "Harvest Update", "body": "tripper has been unloaded", "channel_id": "harvest"}
    ]
    assert native.channels == [{"channel_id": "harvest", "name": "Harvest", "importance": "high"}]


@pytest.mark.asyncio
async def test_channel_is_created_once() -> None:
    native = RecordingNotifier()
    dispatcher, _ = _dispatcher(native)

    await dispatcher.notify_tipper_unloaded()
    await dispatcher.notify_tipper_unloaded()

    assert len(native.channels) == 1
    assert len(native.displayed) == 2


@pytest.mark.asyncio
async def test_missing_capability_is_not_an_error() -> None:
    dispatcher, toasts = _dispatcher(None)

    await dispatcher.notify_tipper_unloaded()

    assert len(toasts) == 1
    with pytest.raises(CapabilityUnavailableError):
        dispatcher._require_native()


@pytest.mark.asyncio
async def test_object_without_display_method_is_skipped() -> None:
    dispatcher, toasts = _dispatcher(object())
    await dispatcher.notify_tipper_unloaded()
    assert len(toasts) == 1


@pytest.mark.asyncio
async def test_native_failures_are_swallowed() -> None:
    native = RecordingNotifier(fail_display=True)
    dispatcher, toasts = _dispatcher(native)

    await dispatcher.notify_tipper_unloaded()

    assert len(toasts) == 1
    assert native.displayed == []


@pytest.mark.asyncio
async def test_channel_failure_still_displays() -> None:
    native = RecordingNotifier(fail_channel=True)
    dispatcher, _ = _dispatcher(native)

    await dispatcher.notify_tipper_unloaded()

    assert len(native.displayed) == 1


@pytest.mark.asyncio
async def test_toast_sink_failure_is_swallowed() -> None:
    def _broken_sink(_message: ToastMessage) -> None:
        raise RuntimeError("ui gone")

    native = RecordingNotifier()
    dispatcher = NotificationDispatcher(on_toast=_broken_sink, native=native)

    await dispatcher.notify_tipper_unloaded()

    assert len(native.displayed) == 1


def test_recording_notifier_satisfies_protocol() -> None:
    assert isinstance(RecordingNotifier(), NativeNotifier)


def test_fetch_failed_uses_error_message() -> None:
    dispatcher, toasts = _dispatcher()

    dispatcher.notify_fetch_failed(HarvestServerError("Database unavailable", status_code=500))

    assert toasts == [
        ToastMessage(kind=ToastKind.ERROR, title="Failed to load harvest orders", detail="Database unavailable")
    ]


@pytest.mark.parametrize("exc", [None, HarvestServerError("")])
def test_fetch_failed_fallback_detail(exc: Exception | None) -> None:
    dispatcher, toasts = _dispatcher()
    dispatcher.notify_fetch_failed(exc)
    assert toasts[0].detail == "Please try again"
