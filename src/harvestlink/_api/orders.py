"""Harvest order list endpoint."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from harvestlink._constants import HARVEST_ORDERS_ENDPOINT
from harvestlink._transport import Transport
from harvestlink.exceptions import HarvestServerError
from harvestlink.models.order import HarvestOrder

_logger = logging.getLogger(__name__)


def parse_harvest_orders(body: Any) -> list[HarvestOrder]:
    """Parse a ``get_harvest_orders`` response body.

    A missing or null ``harvest_orders`` key means no orders. Items that
    are not objects, or that fail validation, are skipped.
    """
    endpoint = HARVEST_ORDERS_ENDPOINT
    if not isinstance(body, dict):
        raise HarvestServerError(f"{endpoint} returned a non-object body", endpoint=endpoint)

    items = body.get("harvest_orders")
    if items is None:
        return []
    if not isinstance(items, list):
        raise HarvestServerError(f"{endpoint} harvest_orders is not a list", endpoint=endpoint)

    orders: list[HarvestOrder] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            _logger.debug("Skipping non-object harvest order at index %d", index)
            continue
        try:
            orders.append(HarvestOrder.model_validate(item))
        except ValidationError:
            _logger.debug("Skipping invalid harvest order at index %d", index, exc_info=True)
    return orders


def filter_orders_for_supervisor(
    orders: Iterable[HarvestOrder],
    supervisor_id: str | None,
) -> list[HarvestOrder]:
    """Keep the orders belonging to *supervisor_id*.

    Without a cached identity nothing is filtered. Orders that carry no
    supervisor identity of their own are kept as well.
    """
    if not supervisor_id:
        return list(orders)
    return [order for order in orders if order.supervisor_id is None or order.supervisor_id == supervisor_id]


async def fetch_harvest_orders(
    transport: Transport,
    *,
    supervisor_id: str | None = None,
) -> list[HarvestOrder]:
    """Fetch the full order list visible to the supervisor."""
    body = await transport.get_json(HARVEST_ORDERS_ENDPOINT)
    orders = parse_harvest_orders(body)
    visible = filter_orders_for_supervisor(orders, supervisor_id)
    _logger.debug("Fetched %d harvest orders (%d visible)", len(orders), len(visible))
    return visible
