"""Person model for group members and schedulers."""

from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Person(SQLModel, table=True):
    """A person who can be scheduled or who runs auto-scheduling.

    Attributes:
        id: Unique identifier (UUID).
        first_name: Given name.
        last_name: Family name.
        email: Contact address, if known.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    first_name: str
    last_name: str
    email: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
