"""UTC-everywhere time handling, with calendar-day helpers for due dates."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_local(dt: datetime, tz_name: str) -> datetime:
    """
    Convert UTC datetime to local timezone for display.

    ONLY use this at display boundaries - when rendering for humans or
    deciding which calendar day it is for the business.

    Args:
        dt: UTC datetime
        tz_name: IANA timezone name (e.g., "Europe/Dublin")

    Raises:
        ValueError: If datetime is naive or timezone name is invalid
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime. Datetime must be timezone-aware."
        )

    try:
        local_tz = ZoneInfo(tz_name)
    except KeyError:
        raise ValueError(f"Unknown timezone: {tz_name}")

    return dt.astimezone(local_tz)


def today_in(tz_name: str) -> date:
    """
    Calendar date it currently is in the given timezone.

    Invoice due dates and reminder stamps are plain dates, so "today" has to
    be the business's local day, not the UTC one.
    """
    return to_local(now_utc(), tz_name).date()


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is before start)."""
    return (end - start).days
