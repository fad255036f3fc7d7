"""Submit materialized occurrences to the assignment engine in chunks.

The assignment engine decides who serves where; this module only feeds it.
Occurrence ids are sent in bounded chunks so the engine's queries stay under
backend parameter limits, and each chunk is committed before the next one
starts. The loop stops at the first failure: earlier chunks stay committed,
later chunks are not attempted, and re-running the job is the way to finish
the work.
"""
import logging
from collections import defaultdict
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from sqlmodel import Session, select

from app.models import Attendance, AttendanceOccurrence, GroupMember
from app.scheduling.errors import AssignmentBatchError

logger = logging.getLogger(__name__)


class AutoAssigner(Protocol):
    """The external auto-assignment capability."""

    def assign(
        self,
        session: Session,
        occurrence_ids: Sequence[UUID],
        scheduler_person_id: UUID,
    ) -> int:
        """Schedule people into the occurrences; return attendances created."""
        ...


@dataclass
class BatchProgress:
    """Running counters of a batched assignment.

    ``chunk_count`` counts every chunk attempted, including one that failed;
    ``assigned_count`` only counts occurrences in committed chunks.
    """
    occurrence_count: int = 0
    chunk_count: int = 0
    assigned_count: int = 0
    attendance_count: int = 0


def chunked(items: Sequence[UUID], size: int) -> Iterator[list[UUID]]:
    """Yield consecutive slices of at most ``size`` items, in order."""
    if size < 1:
        raise ValueError(f"chunk size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def assign_in_batches(
    session: Session,
    occurrence_ids: Sequence[UUID],
    scheduler_person_id: UUID,
    assigner: AutoAssigner,
    chunk_size: int,
) -> BatchProgress:
    """
    Run the assigner over ``occurrence_ids`` one chunk at a time.

    Each chunk is assigned and then committed. If the assigner or the commit
    raises, the uncommitted chunk is rolled back and no further chunks run.

    Raises:
        AssignmentBatchError: A chunk failed. The error carries the progress
            made so far; its chunk_count includes the failed chunk.
    """
    progress = BatchProgress(occurrence_count=len(occurrence_ids))

    for number, chunk in enumerate(chunked(occurrence_ids, chunk_size), start=1):
        progress.chunk_count += 1
        try:
            created = assigner.assign(session, chunk, scheduler_person_id)
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Assignment chunk {number} failed: {e}")
            raise AssignmentBatchError(str(e), progress) from e

        progress.assigned_count += len(chunk)
        progress.attendance_count += created or 0
        logger.debug(f"Committed assignment chunk {number} ({len(chunk)} occurrences)")

    return progress


class GroupMemberAssigner:
    """Request every active group member for their group's occurrences.

    A person is scheduled at most once per date. Occurrences are filled in
    the order given, so earlier occurrences (lower location order) win when
    a person could serve in several places on the same day.
    """

    def assign(
        self,
        session: Session,
        occurrence_ids: Sequence[UUID],
        scheduler_person_id: UUID,
    ) -> int:
        if not occurrence_ids:
            return 0

        occurrences = {
            occurrence.id: occurrence
            for occurrence in session.exec(
                select(AttendanceOccurrence).where(AttendanceOccurrence.id.in_(occurrence_ids))
            ).all()
        }
        dates = {occurrence.occurrence_date for occurrence in occurrences.values()}
        busy = self._scheduled_people_by_date(session, dates)

        created = 0
        members_by_group: dict[UUID, list[UUID]] = {}
        for occurrence_id in occurrence_ids:
            occurrence = occurrences.get(occurrence_id)
            if occurrence is None:
                continue

            if occurrence.group_id not in members_by_group:
                members_by_group[occurrence.group_id] = list(
                    session.exec(
                        select(GroupMember.person_id)
                        .where(GroupMember.group_id == occurrence.group_id)
                        .where(GroupMember.is_active == True)  # noqa: E712
                        .order_by(GroupMember.id)
                    ).all()
                )

            taken = busy[occurrence.occurrence_date]
            for person_id in members_by_group[occurrence.group_id]:
                if person_id in taken:
                    continue
                session.add(
                    Attendance(
                        occurrence_id=occurrence.id,
                        person_id=person_id,
                        requested_to_attend=True,
                        scheduled_by_person_id=scheduler_person_id,
                    )
                )
                taken.add(person_id)
                created += 1

        session.flush()
        return created

    def _scheduled_people_by_date(
        self, session: Session, dates: set[date]
    ) -> defaultdict[date, set[UUID]]:
        """People already holding an attendance on each of ``dates``."""
        busy: defaultdict[date, set[UUID]] = defaultdict(set)
        if not dates:
            return busy

        statement = (
            select(AttendanceOccurrence.occurrence_date, Attendance.person_id)
            .join(Attendance, Attendance.occurrence_id == AttendanceOccurrence.id)
            .where(AttendanceOccurrence.occurrence_date.in_(sorted(dates)))
        )
        for occurrence_date, person_id in session.exec(statement).all():
            busy[occurrence_date].add(person_id)
        return busy
