"""Internal constants shared across the library."""

BASE_URL = "https://farm-connect.amritagrotech.com/api"
USER_AGENT = "harvestlink"

HARVEST_ORDERS_ENDPOINT = "/Harvest_management/get_harvest_orders"
START_TRIP_ENDPOINT = "/Harvest_management/start_trip"
STREAM_PATH = "/ws/harvest"

#: Fixed delay between stream reconnect attempts (seconds).
RECONNECT_DELAY_S: float = 2.0

#: Upper bound on waiting for the peer to acknowledge a close frame (seconds).
WS_CLOSE_TIMEOUT_S: float = 1.0

TIPPER_UNLOADED_EVENT = "TIPPER_UNLOADED"

# ------------------------------------------------------------------
# User-facing notification text
# ------------------------------------------------------------------

TIPPER_UNLOADED_MESSAGE = "tripper has been unloaded"
NOTIFICATION_TITLE = "Harvest Update"
NOTIFICATION_CHANNEL_ID = "harvest"
NOTIFICATION_CHANNEL_NAME = "Harvest"
FETCH_FAILED_TITLE = "Failed to load harvest orders"
FETCH_FAILED_FALLBACK_DETAIL = "Please try again"

#: Trip number used for live rows that carry no trip count.
LIVE_TRIP_NO_PLACEHOLDER = "-"
