"""Run the auto-scheduler for one group type.

``run_auto_schedule`` sequences the stages:

1. Resolve the scheduler identity and the eligible groups of the group type.
   If either cannot be resolved the run ends here, before any occurrence is
   touched.
2. Collect the groups' locations and active schedules.
3. Get-or-add an occurrence for every schedule date in the window and every
   group location, then commit. If this fails (for instance on a schedule
   whose recurrence rule cannot be parsed) it is rolled back and the run ends.
4. Feed the occurrences to the assignment engine in committed chunks.
5. Auto-confirm undecided attendance on every occurrence of the run.

Stages 4 and 5 are always both attempted. Failures in any stage are turned
into messages on the returned result; the function itself does not raise for
them. Every run is recorded as an ``AutoScheduleRun`` row.
"""
import logging
from datetime import UTC, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlmodel import Field, Session, SQLModel

from app.core.config import settings
from app.models import AutoScheduleRun, Person
from app.scheduling.assignment import AutoAssigner, GroupMemberAssigner, assign_in_batches
from app.scheduling.confirmation import confirm_scheduled_attendance
from app.scheduling.errors import AssignmentBatchError, ConfigurationError, ConfirmationError
from app.scheduling.groups import resolve_eligible_groups
from app.scheduling.locations import match_schedules_and_locations
from app.scheduling.occurrences import materialize_occurrences
from app.scheduling.window import week_anchor_dates

logger = logging.getLogger(__name__)


class AutoScheduleRequest(SQLModel):
    """Fully resolved inputs of one auto-schedule run."""
    group_type_id: UUID
    scheduler_person_id: UUID
    weeks_out: int = Field(default_factory=lambda: settings.default_weeks_out, ge=0)
    attribute_key: str | None = None
    chunk_size: int = Field(default_factory=lambda: settings.assignment_chunk_size, ge=1)


class AutoScheduleResult(SQLModel):
    """Summary of one auto-schedule run."""
    run_id: UUID | None = None
    occurrence_count: int = 0
    assigned_count: int = 0
    chunk_count: int = 0
    confirmed_count: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        """One-line outcome; the loop count includes a chunk that failed."""
        return (
            f"{self.occurrence_count} occurrences identified and "
            f"{self.assigned_count} occurrences scheduled in "
            f"{self.chunk_count} scheduling loops."
        )


def local_now() -> datetime:
    """Current wall-clock time in the organization's time zone (naive)."""
    return datetime.now(ZoneInfo(settings.timezone)).replace(tzinfo=None)


def resolve_scheduler(session: Session, person_id: UUID) -> Person:
    """Look up the person recorded as the scheduler of new attendance."""
    person = session.get(Person, person_id)
    if person is None:
        raise ConfigurationError(f"Person could not be found for selected value ('{person_id}')")
    return person


def run_auto_schedule(
    session: Session,
    request: AutoScheduleRequest,
    assigner: AutoAssigner | None = None,
    now: datetime | None = None,
) -> AutoScheduleResult:
    """Auto-schedule one group type. See the module docstring for the stages."""
    assigner = assigner or GroupMemberAssigner()
    now = now or local_now()
    result = AutoScheduleResult()
    started_at = datetime.now(UTC)

    logger.info(
        f"Auto-scheduling group type {request.group_type_id} "
        f"for {request.weeks_out} weeks"
    )

    try:
        resolve_scheduler(session, request.scheduler_person_id)
    except ConfigurationError as e:
        result.errors.append(str(e))

    groups = []
    try:
        groups = resolve_eligible_groups(
            session, request.group_type_id, request.attribute_key
        )
    except ConfigurationError as e:
        result.errors.append(str(e))

    if result.errors:
        _finish(session, request, result, started_at)
        return result

    try:
        match = match_schedules_and_locations(session, groups)
        anchor_dates = week_anchor_dates(request.weeks_out, now, settings.week_end_day)
        occurrence_ids = materialize_occurrences(session, anchor_dates, match)
        session.commit()
    except Exception as e:
        session.rollback()
        result.errors.append(f"Occurrences could not be materialized: {e}")
        _finish(session, request, result, started_at)
        return result
    result.occurrence_count = len(occurrence_ids)

    try:
        progress = assign_in_batches(
            session,
            occurrence_ids,
            request.scheduler_person_id,
            assigner,
            request.chunk_size,
        )
    except AssignmentBatchError as e:
        progress = e.progress
        result.errors.append(str(e))
    result.assigned_count = progress.assigned_count
    result.chunk_count = progress.chunk_count

    try:
        result.confirmed_count = confirm_scheduled_attendance(session, occurrence_ids)
    except ConfirmationError as e:
        result.errors.append(str(e))

    _finish(session, request, result, started_at)
    return result


def _finish(
    session: Session,
    request: AutoScheduleRequest,
    result: AutoScheduleResult,
    started_at: datetime,
) -> None:
    """Log the summary and errors, and store the run record."""
    logger.info(result.summary)
    for message in result.errors:
        logger.error(message)

    run = AutoScheduleRun(
        group_type_id=request.group_type_id,
        weeks_out=request.weeks_out,
        started_at=started_at,
        finished_at=datetime.now(UTC),
        occurrence_count=result.occurrence_count,
        assigned_count=result.assigned_count,
        chunk_count=result.chunk_count,
        confirmed_count=result.confirmed_count,
        errors="\n".join(result.errors) or None,
    )
    session.add(run)
    session.commit()
    result.run_id = run.id
