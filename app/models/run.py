"""Audit record of auto-schedule runs."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class AutoScheduleRun(SQLModel, table=True):
    """The outcome of one auto-schedule run.

    Attributes:
        id: Unique identifier (UUID).
        group_type_id: Group type that was scheduled (as requested; may not
            exist if the run failed configuration).
        weeks_out: Size of the scheduling window in weeks.
        started_at: When the run began.
        finished_at: When the run ended.
        occurrence_count: Occurrences identified (created or found).
        assigned_count: Occurrences submitted to the assigner and committed.
        chunk_count: Assignment chunks attempted, including a failed one.
        confirmed_count: Attendances auto-confirmed.
        errors: Newline-separated error messages, None on success.
    """
    __tablename__ = "auto_schedule_run"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    group_type_id: UUID = Field(index=True)
    weeks_out: int
    started_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    occurrence_count: int = Field(default=0)
    assigned_count: int = Field(default=0)
    chunk_count: int = Field(default=0)
    confirmed_count: int = Field(default=0)
    errors: str | None = None
