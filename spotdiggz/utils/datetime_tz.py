from __future__ import annotations

from datetime import datetime, timedelta, timezone

# Expiry times shown to clients use a fixed Japan offset
DISPLAY_TZ = timezone(timedelta(hours=9), "JST")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert an aware datetime to UTC.

    Naive values are rejected; signing material must never depend on the
    server's local timezone.
    """
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValueError("naive datetime not allowed")
    return dt.astimezone(timezone.utc)


def to_display_tz(dt: datetime) -> datetime:
    """Convert an aware datetime to the fixed +09:00 display offset."""
    return to_utc(dt).astimezone(DISPLAY_TZ)
