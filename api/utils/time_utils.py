"""Time utilities."""
from datetime import datetime, timezone


def ms_to_iso(value: object) -> str | None:
    """Convert epoch milliseconds (session timestamps) to an ISO string."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return None
