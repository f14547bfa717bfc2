from __future__ import annotations

import pytest

from harvestlink.config import HarvestConfig, build_stream_url
from harvestlink.exceptions import HarvestConfigError


@pytest.mark.parametrize(
    ("base", "expected"),
    [
        ("https://farm.example/api", "wss://farm.example/api/ws/harvest"),
        ("https://farm.example/api/", "wss://farm.example/api/ws/harvest"),
        ("http://10.0.0.2:8000/api", "ws://10.0.0.2:8000/api/ws/harvest"),
        ("HTTPS://Farm.Example", "wss://Farm.Example/ws/harvest"),
        ("  https://farm.example/api/  ", "wss://farm.example/api/ws/harvest"),
    ],
)
def test_build_stream_url(base: str, expected: str) -> None:
    assert build_stream_url(base) == expected


def test_stream_url_uses_configured_path() -> None:
    config = HarvestConfig(base_url="https://farm.example/api", stream_path="/ws/other")
    assert config.stream_url == "wss://farm.example/api/ws/other"
    assert config.rest_base == "https://farm.example/api"


def test_defaults() -> None:
    config = HarvestConfig()
    assert config.reconnect_delay == 2.0
    assert config.stream_enabled is True
    assert config.supervisor_id is None
    assert config.max_live_rows_per_order is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": ""},
        {"base_url": "   "},
        {"reconnect_delay": -1},
        {"max_live_rows_per_order": 0},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(HarvestConfigError):
        HarvestConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env_reads_harvest_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HARVEST_BASE_URL", " http://local/api ")
    monkeypatch.setenv("HARVEST_SUPERVISOR_ID", "S1")
    monkeypatch.setenv("HARVEST_STREAM_ENABLED", "off")
    monkeypatch.setenv("HARVEST_RECONNECT_DELAY", "0.5")
    monkeypatch.setenv("HARVEST_MAX_LIVE_ROWS", "100")
    monkeypatch.setenv("HARVEST_API_TRACE_ENABLED", "yes")

    config = HarvestConfig.from_env()

    assert config.base_url == "http://local/api"
    assert config.supervisor_id == "S1"
    assert config.stream_enabled is False
    assert config.reconnect_delay == 0.5
    assert config.max_live_rows_per_order == 100
    assert config.api_trace_enabled is True
    assert config.stream_url == "ws://local/api/ws/harvest"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HARVEST_SUPERVISOR_ID", "S1")
    monkeypatch.setenv("HARVEST_RECONNECT_DELAY", "9")

    config = HarvestConfig.from_env(supervisor_id="S2", reconnect_delay=1.0)

    assert config.supervisor_id == "S2"
    assert config.reconnect_delay == 1.0


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HARVEST_RECONNECT_DELAY", "soon")
    with pytest.raises(HarvestConfigError, match="HARVEST_RECONNECT_DELAY"):
        HarvestConfig.from_env()
