"""Internal constants shared across the library."""

USER_AGENT = "pyairspace/1 (+aiohttp)"

SNAPSHOT_KEY = "Aircraft"

# ------------------------------------------------------------------
# Poll cadence
# ------------------------------------------------------------------

DEFAULT_POLL_INTERVAL_MILLIS = 5000
# 30 minutes of polling at the default cadence.
DEFAULT_POLL_BUDGET = 360
DEFAULT_POLL_NAME = "aircraft"

# ------------------------------------------------------------------
# Complaint heatmap
# ------------------------------------------------------------------

HEATMAP_URL = "https://stop.jetnoise.net/heatmap"
DEFAULT_HEATMAP_DURATION = "15m"
DEFAULT_HEATMAP_INTERVAL_MILLIS = 60_000
DEFAULT_HEATMAP_NAME = "heatmap"

DEFAULT_REQUEST_TIMEOUT = 10.0
