"""
Time Utilities

All timestamps reported by the proxy are UTC.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """
    Current UTC time as an ISO-8601 string with millisecond precision.

    Example: ``2024-05-01T12:34:56.789Z``
    """
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def unix_now() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())
