"""Attendance model for scheduled participation in an occurrence."""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.occurrence import AttendanceOccurrence


class RSVP(str, Enum):
    """A person's response to being scheduled."""
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"
    UNKNOWN = "unknown"


class Attendance(SQLModel, table=True):
    """A person's participation record against one occurrence.

    Attendance rows are created by the assignment engine when a person is
    scheduled. Until the person responds the RSVP stays ``UNKNOWN``; the
    auto-scheduler's confirmation sweep promotes requested, undecided rows
    to ``YES``.

    Attributes:
        id: Unique identifier (UUID).
        occurrence_id: Foreign key to the AttendanceOccurrence.
        person_id: Foreign key to the scheduled Person.
        rsvp: Response state.
        requested_to_attend: Whether the person was asked to serve.
        scheduled_to_attend: Whether the person is confirmed to serve.
        did_attend: Actual attendance; None until the occurrence happens.
        scheduled_by_person_id: Who (or which identity) scheduled the person.
        rsvp_datetime: When the RSVP last changed.
        occurrence: Reference to the parent occurrence.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    occurrence_id: UUID = Field(foreign_key="attendance_occurrence.id", index=True)
    person_id: UUID = Field(foreign_key="person.id", index=True)
    rsvp: RSVP = Field(default=RSVP.UNKNOWN)
    requested_to_attend: bool = Field(default=False)
    scheduled_to_attend: bool = Field(default=False)
    did_attend: bool | None = None
    scheduled_by_person_id: UUID | None = Field(default=None, foreign_key="person.id")
    rsvp_datetime: datetime | None = None

    # Relationship
    occurrence: Optional["AttendanceOccurrence"] = Relationship(back_populates="attendances")
