"""Tests for weekly anchor date generation."""

from datetime import date, datetime, timedelta

import pytest

from app.scheduling.window import week_anchor_dates, week_end_date


class TestWeekAnchorDates:
    def test_three_weeks(self):
        dates = week_anchor_dates(3, datetime(2026, 10, 14, 8, 30))
        assert dates == [date(2026, 10, 18), date(2026, 10, 25), date(2026, 11, 1)]
        assert {d.weekday() for d in dates} == {6}
        assert all(b - a == timedelta(days=7) for a, b in zip(dates, dates[1:]))

    def test_boundary_day_is_its_own_anchor(self):
        dates = week_anchor_dates(1, datetime(2026, 10, 18, 23, 59))
        assert dates == [date(2026, 10, 18)]

    def test_zero_weeks_is_empty(self):
        assert week_anchor_dates(0, datetime(2026, 10, 14)) == []

    def test_negative_weeks_rejected(self):
        with pytest.raises(ValueError):
            week_anchor_dates(-1, datetime(2026, 10, 14))

    def test_custom_week_end_day(self):
        # Saturday boundary
        assert week_anchor_dates(2, datetime(2026, 10, 14), week_end_day=5) == [
            date(2026, 10, 17),
            date(2026, 10, 24),
        ]

    def test_week_end_date(self):
        assert week_end_date(date(2026, 10, 12)) == date(2026, 10, 18)
        assert week_end_date(date(2026, 10, 19)) == date(2026, 10, 25)
