"""Collect the group locations and schedules of the eligible groups."""
from dataclasses import dataclass, field
from uuid import UUID

from sqlmodel import Session, select

from app.models import Group, GroupLocation, GroupLocationSchedule, Location, Schedule


@dataclass
class ScheduleLocationMatch:
    """Group locations (ordered) and active schedules for a scheduling run.

    ``group_locations`` holds (group_id, location_id) pairs. Their order is
    the precedence used when occurrences compete for the same person, so it
    must be kept as returned.
    """
    group_locations: list[tuple[UUID, UUID]] = field(default_factory=list)
    schedules: list[Schedule] = field(default_factory=list)


def match_schedules_and_locations(
    session: Session, groups: list[Group]
) -> ScheduleLocationMatch:
    """Find the group locations of ``groups`` and their distinct active schedules."""
    group_ids = [group.id for group in groups]
    if not group_ids:
        return ScheduleLocationMatch()

    location_statement = (
        select(GroupLocation.group_id, GroupLocation.location_id)
        .join(Location, GroupLocation.location_id == Location.id)
        .where(GroupLocation.group_id.in_(group_ids))
        .order_by(GroupLocation.order, Location.name)
    )
    group_locations = [
        (group_id, location_id)
        for group_id, location_id in session.exec(location_statement).all()
    ]

    schedule_statement = (
        select(Schedule)
        .join(GroupLocationSchedule, GroupLocationSchedule.schedule_id == Schedule.id)
        .join(GroupLocation, GroupLocation.id == GroupLocationSchedule.group_location_id)
        .where(GroupLocation.group_id.in_(group_ids))
        .where(Schedule.is_active == True)  # noqa: E712
        .distinct()
        .order_by(Schedule.name, Schedule.id)
    )
    schedules = list(session.exec(schedule_statement).all())

    return ScheduleLocationMatch(group_locations=group_locations, schedules=schedules)
