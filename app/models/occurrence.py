"""Attendance occurrence model.

An occurrence is one concrete instance of a schedule for a group at a
location on a date. The (date, group, location, schedule) key is enforced by
a unique constraint, which is what makes concurrent auto-schedule runs safe.
"""

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel, UniqueConstraint

if TYPE_CHECKING:
    from app.models.attendance import Attendance


class AttendanceOccurrence(SQLModel, table=True):
    """A dated instance of a group meeting.

    Attributes:
        id: Unique identifier (UUID).
        occurrence_date: The calendar date the schedule starts on.
        group_id: Foreign key to the Group.
        location_id: Foreign key to the Location.
        schedule_id: Foreign key to the Schedule.
        attendances: Attendance records for this occurrence.
    """
    __tablename__ = "attendance_occurrence"
    __table_args__ = (
        UniqueConstraint(
            "occurrence_date",
            "group_id",
            "location_id",
            "schedule_id",
            name="uq_attendance_occurrence_key",
        ),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    occurrence_date: date = Field(index=True)
    group_id: UUID = Field(foreign_key="group.id")
    location_id: UUID = Field(foreign_key="location.id")
    schedule_id: UUID = Field(foreign_key="schedule.id")

    attendances: list["Attendance"] = Relationship(back_populates="occurrence")
