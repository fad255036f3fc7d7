"""Weekly anchor dates for a scheduling window."""
from datetime import date, datetime, timedelta


def week_end_date(day: date, week_end_day: int = 6) -> date:
    """Return the week boundary on or after ``day`` (Sunday by default)."""
    return day + timedelta(days=(week_end_day - day.weekday()) % 7)


def week_anchor_dates(weeks_out: int, now: datetime, week_end_day: int = 6) -> list[date]:
    """
    Build the anchor dates covered by a scheduling run.

    The first anchor is the boundary of the current week; each following
    anchor is 7 days later. Each anchor closes a lookback window of
    [anchor - 6 days, anchor].
    """
    if weeks_out < 0:
        raise ValueError(f"weeks_out must not be negative, got {weeks_out}")

    first = week_end_date(now.date(), week_end_day)
    return [first + timedelta(weeks=week) for week in range(weeks_out)]
