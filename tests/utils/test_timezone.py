"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from utils.timezone import days_between, now_utc, to_local, today_in


class TestNowUtc:
    """Tests for now_utc()."""

    def test_returns_timezone_aware(self):
        """Result must have tzinfo set (not naive)."""
        result = now_utc()
        assert result.tzinfo is not None

    def test_is_utc(self):
        """Result timezone must be specifically UTC."""
        result = now_utc()
        assert result.tzinfo == timezone.utc


class TestToLocal:
    """Tests for to_local()."""

    def test_converts_correctly(self):
        """UTC 12:00 in July is 13:00 in Dublin (IST)."""
        utc_time = datetime(2026, 7, 1, 12, 0, 0, tzinfo=timezone.utc)
        result = to_local(utc_time, "Europe/Dublin")
        assert result.hour == 13

    def test_raises_on_naive(self):
        """Naive datetime must raise ValueError."""
        naive = datetime(2026, 1, 1, 12, 0, 0)
        with pytest.raises(ValueError, match="naive"):
            to_local(naive, "Europe/Dublin")

    def test_raises_on_unknown_zone(self):
        """Unknown zone name raises ValueError."""
        utc_time = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        with pytest.raises(ValueError, match="Unknown timezone"):
            to_local(utc_time, "Mars/Olympus_Mons")


class TestToday:
    """Tests for today_in() and days_between()."""

    def test_local_day_differs_from_utc_near_midnight(self):
        """23:30 UTC on 30 June is already 1 July in Dublin."""
        late = datetime(2026, 6, 30, 23, 30, tzinfo=timezone.utc)
        with patch("utils.timezone.now_utc", return_value=late):
            assert today_in("Europe/Dublin") == date(2026, 7, 1)
            assert today_in("UTC") == date(2026, 6, 30)

    @pytest.mark.parametrize("end,expected", [
        (date(2026, 3, 12), 2),
        (date(2026, 3, 10), 0),
        (date(2026, 3, 5), -5),
    ])
    def test_days_between(self, end, expected):
        assert days_between(date(2026, 3, 10), end) == expected
