"""Runtime settings read from the environment."""
import os

LIVE_MODE = "live"
SAMPLE_MODE = "sample"

DISABLE_RATE_LIMIT = os.getenv("DISABLE_RATE_LIMIT", "false").lower() == "true"
DASHBOARD_CACHE_TTL = int(os.getenv("DASHBOARD_CACHE_TTL", "300"))


def get_data_mode() -> str:
    """
    Return the configured data mode.

    "sample" serves the bundled demo catalogue for community and admin
    listings instead of querying Firestore. Anything else is live.
    """
    mode = os.getenv("HEALTHDESK_DATA_MODE", LIVE_MODE).strip().lower()
    if mode not in (LIVE_MODE, SAMPLE_MODE):
        return LIVE_MODE
    return mode


def is_sample_mode() -> bool:
    return get_data_mode() == SAMPLE_MODE
