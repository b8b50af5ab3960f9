"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, to_local, today_in, days_between
