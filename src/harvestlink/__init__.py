"""harvestlink - Async Python client for harvest order and trip sheet tracking."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("harvestlink")
except PackageNotFoundError:
    __version__ = "0+local"
from harvestlink._stream import HarvestStreamRuntime, StreamState
from harvestlink.client import HarvestClient
from harvestlink.config import HarvestConfig, build_stream_url
from harvestlink.exceptions import (
    CapabilityUnavailableError,
    HarvestConfigError,
    HarvestError,
    HarvestFetchError,
    HarvestNetworkError,
    HarvestParseError,
    HarvestServerError,
)
from harvestlink.models import (
    HarvestOrder,
    OrderStatus,
    StartTripResponse,
    StreamEnvelope,
    TripRow,
    TripSheet,
)
from harvestlink.notify import NativeNotifier, NotificationDispatcher, ToastKind, ToastMessage
from harvestlink.state.ledger import LiveUpdateLedger
from harvestlink.state.reconciler import TripSheetReconciler

__all__ = [
    "__version__",
    "CapabilityUnavailableError",
    "HarvestClient",
    "HarvestConfig",
    "HarvestConfigError",
    "HarvestError",
    "HarvestFetchError",
    "HarvestNetworkError",
    "HarvestOrder",
    "HarvestParseError",
    "HarvestServerError",
    "HarvestStreamRuntime",
    "LiveUpdateLedger",
    "NativeNotifier",
    "NotificationDispatcher",
    "OrderStatus",
    "StartTripResponse",
    "StreamEnvelope",
    "StreamState",
    "ToastKind",
    "ToastMessage",
    "TripRow",
    "TripSheet",
    "TripSheetReconciler",
    "build_stream_url",
]
