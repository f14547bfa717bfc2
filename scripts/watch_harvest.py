#!/usr/bin/env python3
"""Watch harvest orders and their live trip sheets.

Loads the order list once, then keeps the harvest WebSocket open and
prints the reconciled trip sheet of an order every time a tipper unload
event arrives for it.

Configuration comes from ``HARVEST_*`` environment variables; command
line flags override them.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from harvestlink import HarvestClient, HarvestConfig, NotificationDispatcher, ToastMessage  # noqa: E402
from harvestlink.models.trip import TripSheet  # noqa: E402

_LOG = logging.getLogger("watch_harvest")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch harvest orders and live trip sheets.")
    parser.add_argument("--base-url", default=None, help="REST base URL (overrides HARVEST_BASE_URL).")
    parser.add_argument(
        "--supervisor-id",
        default=None,
        help="Cached supervisor identity used for filtering (overrides HARVEST_SUPERVISOR_ID).",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument("--no-stream", action="store_true", help="Only load and print the order list.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    return parser.parse_args()


def _print_orders(client: HarvestClient) -> None:
    orders = client.orders
    if not orders:
        print("No harvest orders.")
        return
    for order in orders:
        flag = "Active" if order.active else "Inactive"
        print(
            f"{order.order_no:<16} {order.field_name} • {order.crop:<12} "
            f"Area: {order.quantity:<12} Date: {order.scheduled_date:<10} "
            f"{order.status.display_label:<12} {flag}"
        )


def _print_trip_sheet(sheet: TripSheet) -> None:
    print(f"\nTrip Sheet  Order: {sheet.order_id}")
    print(f"{'Trip no.':<10}{'NW (ton)':>10}{'Moist %':>10}{'FM %':>10}")
    if not sheet.rows:
        print("No trip sheet data.")
    for row in sheet.rows:
        print(
            f"{row.trip_no:<10}{row.net_weight_ton:>10.2f}"
            f"{row.moisture_percent:>10.1f}{row.foreign_material_percent:>10.1f}"
        )
    print(f"{'Total':<10}{sheet.total_net_weight_ton:>10.2f}")


async def _watch(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.supervisor_id:
        overrides["supervisor_id"] = args.supervisor_id
    if args.no_stream:
        overrides["stream_enabled"] = False
    config = HarvestConfig.from_env(**overrides)

    def _on_toast(message: ToastMessage) -> None:
        suffix = f" ({message.detail})" if message.detail else ""
        print(f"[{message.kind}] {message.title}{suffix}")

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    async with HarvestClient(config, dispatcher=NotificationDispatcher(on_toast=_on_toast)) as client:
        await client.mount()
        _print_orders(client)
        if args.no_stream:
            return 0

        _LOG.info("Listening on %s", config.stream_url)
        printed_version = client.ledger.version
        elapsed = 0.0
        while not stop_event.is_set():
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=1.0)
            elapsed += 1.0
            if client.ledger.version != printed_version:
                printed_version = client.ledger.version
                for order_id in client.ledger.order_ids():
                    _print_trip_sheet(client.trip_sheet(order_id))
            if args.duration and elapsed >= args.duration:
                break
    return 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_watch(args))


if __name__ == "__main__":
    raise SystemExit(main())
