"""Materialize attendance occurrences for a scheduling window.

Occurrences are created with get-or-add semantics keyed on
(date, group, location, schedule). The insert is an upsert against the
unique constraint on ``AttendanceOccurrence``, so several runs over
overlapping windows, even concurrent ones, converge on one row per key.
"""
import logging
from datetime import date, datetime, time, timedelta
from uuid import UUID, uuid4

from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from app.models import AttendanceOccurrence, Schedule
from app.scheduling.locations import ScheduleLocationMatch

logger = logging.getLogger(__name__)

KEY_COLUMNS = ["occurrence_date", "group_id", "location_id", "schedule_id"]

_UPSERT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def get_or_add_occurrence(
    session: Session,
    occurrence_date: date,
    group_id: UUID,
    location_id: UUID,
    schedule_id: UUID,
) -> AttendanceOccurrence:
    """Return the occurrence for the key, creating it if it does not exist."""
    dialect = session.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"Occurrence upsert is not supported on {dialect}")

    statement = (
        insert(AttendanceOccurrence.__table__)
        .values(
            id=uuid4(),
            occurrence_date=occurrence_date,
            group_id=group_id,
            location_id=location_id,
            schedule_id=schedule_id,
        )
        .on_conflict_do_nothing(index_elements=KEY_COLUMNS)
    )
    session.connection().execute(statement)

    return session.exec(
        select(AttendanceOccurrence)
        .where(AttendanceOccurrence.occurrence_date == occurrence_date)
        .where(AttendanceOccurrence.group_id == group_id)
        .where(AttendanceOccurrence.location_id == location_id)
        .where(AttendanceOccurrence.schedule_id == schedule_id)
    ).one()


def occurrence_date_in_window(schedule: Schedule, anchor: date) -> date | None:
    """
    Find the date ``schedule`` starts on within the week ending at ``anchor``.

    The window is [anchor - 6 days, anchor]. Returns None when the schedule's
    next start falls outside it (or there is no next start).
    """
    window_start = anchor - timedelta(days=6)
    next_start = schedule.get_next_start_datetime(datetime.combine(window_start, time.min))
    if next_start is None:
        return None

    start_date = next_start.date()
    if window_start <= start_date <= anchor:
        return start_date
    return None


def materialize_occurrences(
    session: Session,
    anchor_dates: list[date],
    match: ScheduleLocationMatch,
) -> list[UUID]:
    """
    Get-or-add an occurrence for every schedule date and group location.

    For each anchor date, every schedule with a start inside the anchor's
    week yields an occurrence date. Each (occurrence date, schedule) pair is
    then combined with every group location, in the matcher's order.

    Returns:
        Ids of every occurrence touched, new or existing, in creation order.
    """
    occurrence_ids: list[UUID] = []

    for anchor in anchor_dates:
        schedule_dates = []
        for schedule in match.schedules:
            occurrence_date = occurrence_date_in_window(schedule, anchor)
            if occurrence_date is not None:
                schedule_dates.append((occurrence_date, schedule.id))
        schedule_dates.sort(key=lambda pair: pair[0])

        for occurrence_date, schedule_id in schedule_dates:
            for group_id, location_id in match.group_locations:
                occurrence = get_or_add_occurrence(
                    session, occurrence_date, group_id, location_id, schedule_id
                )
                occurrence_ids.append(occurrence.id)

    logger.debug(
        f"Materialized {len(occurrence_ids)} occurrences over {len(anchor_dates)} weeks"
    )
    return occurrence_ids
