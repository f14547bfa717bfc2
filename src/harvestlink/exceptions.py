"""Custom exception hierarchy for harvestlink."""

from __future__ import annotations


class HarvestError(Exception):
    """Base exception for all harvestlink errors."""


class HarvestConfigError(HarvestError):
    """Invalid or missing configuration."""


class HarvestFetchError(HarvestError):
    """Loading harvest data from the backend failed.

    Callers that present errors to a user treat every subclass as the
    single "Failed to load harvest orders" category.
    """

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class HarvestNetworkError(HarvestFetchError):
    """Transport-level failure (DNS, refused connection, dropped socket)."""


class HarvestServerError(HarvestFetchError):
    """Backend answered with a non-2xx status or a malformed body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        super().__init__(message, endpoint=endpoint)


class HarvestParseError(HarvestError):
    """A stream frame or trip row could not be interpreted.

    Never escapes the public API: the ingestion layer degrades to
    best-effort defaults instead.
    """


class CapabilityUnavailableError(HarvestError):
    """The optional native notification capability is not available."""
