"""Recurring schedule model.

A schedule describes when something recurs. Recurrence is stored as an
iCalendar RRULE (``FREQ=WEEKLY;BYDAY=SU``) anchored at ``effective_start``;
a schedule without a rule happens once, at ``effective_start``.

All date-times are naive and expressed in the organization's wall clock
(``settings.timezone``).
"""

import re
from datetime import date, datetime
from uuid import UUID, uuid4

from dateutil.rrule import rrulestr
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

# UNTIL=20261231T000000Z -> UNTIL=20261231T000000
UTC_UNTIL = re.compile(r"(UNTIL=\d{8}T\d{6})Z", re.IGNORECASE)


class Schedule(SQLModel, table=True):
    """A recurrence definition that group locations are bound to.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name, e.g. "Sunday 9:00am".
        is_active: Inactive schedules are never materialized.
        recurrence_rule: RRULE text, or None for a one-time schedule.
        effective_start: First start date-time (also the RRULE DTSTART),
            stored naive.
        effective_end: Last date on which the schedule may start, if any.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    is_active: bool = Field(default=True)
    recurrence_rule: str | None = None
    effective_start: datetime = Field(sa_type=DateTime)
    effective_end: date | None = None

    def get_next_start_datetime(self, after: datetime) -> datetime | None:
        """Return the first start at or after ``after``, or None."""
        if self.recurrence_rule:
            # DTSTART is a naive wall clock, so a UTC UNTIL is read as one too
            rule_text = UTC_UNTIL.sub(r"\1", self.recurrence_rule)
            rule = rrulestr(rule_text, dtstart=self.effective_start)
            start = rule.after(after, inc=True)
        elif self.effective_start >= after:
            start = self.effective_start
        else:
            start = None

        if start is not None and self.effective_end and start.date() > self.effective_end:
            return None
        return start
