"""Ingestion layer.

This package contains adapters that turn raw backend data (REST trip
sheets, WebSocket frames) into normalized domain objects.
"""

__all__: list[str] = []
