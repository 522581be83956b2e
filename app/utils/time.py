"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timestamp in UTC.

    All lifecycle and audit timestamps are stored timezone-aware in UTC.
    """
    return datetime.now(timezone.utc)
