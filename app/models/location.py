"""Location models and the group-location/schedule bindings."""

from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from app.models.group import Group
    from app.models.schedule import Schedule


class Location(SQLModel, table=True):
    """A physical place where a group meets (room, campus, etc.)."""
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    is_active: bool = Field(default=True)


class GroupLocationSchedule(SQLModel, table=True):
    """Link table binding schedules to a group location."""
    __tablename__ = "group_location_schedule"

    group_location_id: UUID = Field(foreign_key="group_location.id", primary_key=True)
    schedule_id: UUID = Field(foreign_key="schedule.id", primary_key=True)


class GroupLocation(SQLModel, table=True):
    """A location used by a group, with the schedules it meets on.

    The ``order`` column is the explicit display order configured for the
    group. Auto-scheduling walks group locations in (order, location name)
    order, so earlier locations are filled first.

    Attributes:
        id: Unique identifier (UUID).
        group_id: Foreign key to the Group.
        location_id: Foreign key to the Location.
        order: Explicit display order.
        group: Reference to the Group.
        location: Reference to the Location.
        schedules: Schedules bound to this group location.
    """
    __tablename__ = "group_location"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    group_id: UUID = Field(foreign_key="group.id", index=True)
    location_id: UUID = Field(foreign_key="location.id", index=True)
    order: int = Field(default=0)

    # Relationships
    group: Optional["Group"] = Relationship(back_populates="locations")
    location: Optional[Location] = Relationship()
    schedules: list["Schedule"] = Relationship(link_model=GroupLocationSchedule)
