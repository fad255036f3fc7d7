"""Group catalog models.

Groups are organized by group type. Scheduling is switched on per group type
and can be switched off again per group. The auto-scheduler only reads these
tables; they are maintained elsewhere.
"""

from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel, UniqueConstraint

if TYPE_CHECKING:
    from app.models.location import GroupLocation


class GroupType(SQLModel, table=True):
    """A category of groups (e.g. "Serving Team").

    Attributes:
        id: Unique identifier (UUID).
        name: Display name.
        is_scheduling_enabled: Whether groups of this type can be scheduled.
        groups: Groups of this type.
    """
    __tablename__ = "group_type"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    is_scheduling_enabled: bool = Field(default=False)

    groups: list["Group"] = Relationship(back_populates="group_type")


class Group(SQLModel, table=True):
    """A group whose members can be scheduled into occurrences.

    Attributes:
        id: Unique identifier (UUID).
        name: Display name.
        group_type_id: Foreign key to the GroupType.
        parent_group_id: Parent group. Top-level groups are never
            auto-scheduled.
        is_active: Inactive groups are ignored.
        is_archived: Archived groups are ignored.
        disable_scheduling: Per-group opt out, even when the type allows
            scheduling.
        group_type: Reference to the GroupType.
        locations: The group's GroupLocation rows.
        attribute_values: Free-form key/value attributes.
        members: Group memberships.
    """
    __tablename__ = "group"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str
    group_type_id: UUID = Field(foreign_key="group_type.id", index=True)
    parent_group_id: UUID | None = Field(default=None, foreign_key="group.id")
    is_active: bool = Field(default=True)
    is_archived: bool = Field(default=False)
    disable_scheduling: bool = Field(default=False)

    # Relationships
    group_type: Optional[GroupType] = Relationship(back_populates="groups")
    locations: list["GroupLocation"] = Relationship(back_populates="group")
    attribute_values: list["GroupAttributeValue"] = Relationship(back_populates="group")
    members: list["GroupMember"] = Relationship(back_populates="group")

    @property
    def is_scheduling_enabled(self) -> bool:
        """Scheduling flag inherited from the group type."""
        return bool(self.group_type and self.group_type.is_scheduling_enabled)

    def get_attribute_value(self, key: str) -> str | None:
        for attribute_value in self.attribute_values:
            if attribute_value.key == key:
                return attribute_value.value
        return None


class GroupAttributeValue(SQLModel, table=True):
    """A single attribute value stored against a group."""
    __tablename__ = "group_attribute_value"
    __table_args__ = (UniqueConstraint("group_id", "key", name="uq_group_attribute_key"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    group_id: UUID = Field(foreign_key="group.id", index=True)
    key: str
    value: str | None = None

    group: Optional[Group] = Relationship(back_populates="attribute_values")


class GroupMember(SQLModel, table=True):
    """Membership of a person in a group."""
    __tablename__ = "group_member"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    group_id: UUID = Field(foreign_key="group.id", index=True)
    person_id: UUID = Field(foreign_key="person.id", index=True)
    is_active: bool = Field(default=True)

    group: Optional[Group] = Relationship(back_populates="members")
