"""Client configuration for harvestlink."""

from __future__ import annotations

import dataclasses
import os
import re
from typing import Any

from harvestlink._constants import BASE_URL, RECONNECT_DELAY_S, STREAM_PATH
from harvestlink.exceptions import HarvestConfigError

_HTTPS_SCHEME = re.compile(r"^https:", re.IGNORECASE)
_HTTP_SCHEME = re.compile(r"^http:", re.IGNORECASE)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise HarvestConfigError(f"{env_key} must be a number, got {value!r}") from exc


def build_stream_url(base_url: str, path: str = STREAM_PATH) -> str:
    """Derive the WebSocket endpoint from the REST base address.

    ``https://host/api/`` becomes ``wss://host/api/ws/harvest``.
    """
    base = base_url.strip()
    if base.endswith("/"):
        base = base[:-1]
    base = _HTTPS_SCHEME.sub("wss:", base)
    base = _HTTP_SCHEME.sub("ws:", base)
    return f"{base}{path}"


@dataclasses.dataclass(frozen=True)
class HarvestConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        REST base address (including the ``/api`` prefix).
    supervisor_id : str or None
        Cached supervisor identity. Used to filter fetched orders and
        inbound stream events. ``None`` disables filtering (fail-open).
    stream_path : str
        Path appended to the WebSocket base address.
    stream_enabled : bool
        Start the live event stream when the client is mounted.
    reconnect_delay : float
        Fixed delay in seconds before each stream reconnect attempt.
    ws_heartbeat : float or None
        Optional WebSocket ping interval handed to aiohttp.
    max_live_rows_per_order : int or None
        Cap on live rows kept per order. ``None`` keeps every row.
    api_trace_enabled : bool
        Log (redacted) request and response bodies at DEBUG level.
    """

    base_url: str = BASE_URL
    supervisor_id: str | None = None
    stream_path: str = STREAM_PATH
    stream_enabled: bool = True
    reconnect_delay: float = RECONNECT_DELAY_S
    ws_heartbeat: float | None = None
    max_live_rows_per_order: int | None = None
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise HarvestConfigError("base_url must be non-empty")
        if self.reconnect_delay < 0:
            raise HarvestConfigError(f"reconnect_delay must be >= 0, got {self.reconnect_delay}")
        if self.max_live_rows_per_order is not None and self.max_live_rows_per_order <= 0:
            raise HarvestConfigError(
                f"max_live_rows_per_order must be positive, got {self.max_live_rows_per_order}"
            )

    @property
    def rest_base(self) -> str:
        """Base URL without a trailing slash."""
        return self.base_url.strip().rstrip("/")

    @property
    def stream_url(self) -> str:
        """WebSocket URL for the live harvest stream."""
        return build_stream_url(self.base_url, self.stream_path)

    @classmethod
    def from_env(cls, **overrides: Any) -> HarvestConfig:
        """Create configuration from environment variables.

        Reads ``HARVEST_BASE_URL``, ``HARVEST_SUPERVISOR_ID`` and the
        other optional ``HARVEST_*`` variables. Explicit keyword
        arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HARVEST_BASE_URL": "base_url",
            "HARVEST_SUPERVISOR_ID": "supervisor_id",
            "HARVEST_STREAM_PATH": "stream_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip():
                config_kwargs[field_name] = val.strip()

        if "stream_enabled" not in overrides:
            config_kwargs["stream_enabled"] = _env_bool(env.get("HARVEST_STREAM_ENABLED"), True)

        delay_env = env.get("HARVEST_RECONNECT_DELAY")
        if delay_env is not None and "reconnect_delay" not in overrides:
            config_kwargs["reconnect_delay"] = _env_number("HARVEST_RECONNECT_DELAY", delay_env, float)

        heartbeat_env = env.get("HARVEST_WS_HEARTBEAT")
        if heartbeat_env is not None and "ws_heartbeat" not in overrides:
            config_kwargs["ws_heartbeat"] = _env_number("HARVEST_WS_HEARTBEAT", heartbeat_env, float)

        cap_env = env.get("HARVEST_MAX_LIVE_ROWS")
        if cap_env is not None and "max_live_rows_per_order" not in overrides:
            config_kwargs["max_live_rows_per_order"] = _env_number("HARVEST_MAX_LIVE_ROWS", cap_env, int)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("HARVEST_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
