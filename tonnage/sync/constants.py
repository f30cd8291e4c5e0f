import os

# Safety limits on remote pagination.
FULL_SYNC_MAX_PAGES = 20
INCREMENTAL_SYNC_MAX_PAGES = 5

DEFAULT_SYNC_TIMEOUT_SECONDS = 120.0


def get_sync_timeout_seconds() -> float:
    """Wall-clock budget for one sync attempt, from SYNC_TIMEOUT_SECONDS."""
    value = os.getenv("SYNC_TIMEOUT_SECONDS")
    if not value:
        return DEFAULT_SYNC_TIMEOUT_SECONDS
    return float(value)
