"""HTTP transport for the harvest REST backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from harvestlink._constants import USER_AGENT
from harvestlink._redact import redact_for_log
from harvestlink.config import HarvestConfig
from harvestlink.exceptions import HarvestNetworkError, HarvestServerError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules only depend on this protocol so tests can pass a
    fake backend instead of the aiohttp-based :class:`JsonTransport`.
    """

    async def get_json(self, endpoint: str) -> Any:
        ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        ...


def _error_message(body: Any, status: int) -> str:
    """Pick the most useful message from a non-2xx response body."""
    if isinstance(body, dict):
        for key in ("message", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"HTTP error! status: {status}"


class JsonTransport:
    """JSON-over-HTTP transport with harvest error mapping."""

    def __init__(self, config: HarvestConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def get_json(self, endpoint: str) -> Any:
        return await self.request_json("GET", endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> Any:
        return await self.request_json("POST", endpoint, payload)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Transport failures raise :class:`HarvestNetworkError`; non-2xx
        statuses and undecodable bodies raise :class:`HarvestServerError`.
        An empty body decodes to ``{}``.
        """
        url = f"{self._config.rest_base}{endpoint}"
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        data = json.dumps(payload, separators=(",", ":")) if payload is not None else None

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled and payload is not None:
            _logger.debug("Request body: %s", redact_for_log(payload))

        try:
            async with self._http.request(method, url, data=data, headers=headers) as resp:
                status = resp.status
                raw = await resp.read()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise HarvestNetworkError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            text = raw.decode("utf-8")
            body: Any = json.loads(text) if text.strip() else {}
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            if not 200 <= status < 300:
                raise HarvestServerError(
                    f"HTTP error! status: {status}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc
            raise HarvestServerError(
                f"Invalid JSON from {endpoint}: {raw[:200].decode('utf-8', errors='replace')}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("Response %s from %s: %s", status, endpoint, redact_for_log(body))

        if not 200 <= status < 300:
            raise HarvestServerError(
                _error_message(body, status),
                status_code=status,
                endpoint=endpoint,
            )
        return body
