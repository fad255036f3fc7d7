"""Auto-confirm attendance for newly scheduled occurrences."""
import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from uuid import UUID

from sqlmodel import Session, or_, select

from app.models import RSVP, Attendance
from app.scheduling.errors import ConfirmationError

logger = logging.getLogger(__name__)

UNDECIDED = (RSVP.MAYBE, RSVP.UNKNOWN)


def confirm_attendance(session: Session, attendance_id: UUID) -> Attendance:
    """
    Mark a scheduled person as confirmed for an occurrence.

    Sets the RSVP to yes and flags the person as scheduled to attend.
    The caller commits.

    Raises:
        LookupError: No attendance has this id.
    """
    attendance = session.get(Attendance, attendance_id)
    if attendance is None:
        raise LookupError(f"Attendance '{attendance_id}' not found")

    attendance.rsvp = RSVP.YES
    attendance.scheduled_to_attend = True
    attendance.rsvp_datetime = datetime.now(UTC)
    session.add(attendance)
    return attendance


def eligible_attendance_ids(session: Session, occurrence_id: UUID) -> list[UUID]:
    """Requested, undecided attendance on an occurrence that has not happened."""
    statement = (
        select(Attendance.id)
        .where(Attendance.occurrence_id == occurrence_id)
        .where(Attendance.requested_to_attend == True)  # noqa: E712
        .where(or_(Attendance.did_attend.is_(None), Attendance.did_attend == False))  # noqa: E712
        .where(Attendance.rsvp.in_(UNDECIDED))
    )
    return list(session.exec(statement).all())


def confirm_scheduled_attendance(session: Session, occurrence_ids: Sequence[UUID]) -> int:
    """
    Confirm every eligible attendance on ``occurrence_ids``.

    Runs over all occurrences of the run, whether or not their assignment
    chunk succeeded, and commits once at the end.

    Raises:
        ConfirmationError: The sweep failed; nothing from it was committed.
    """
    confirmed = 0
    try:
        for occurrence_id in occurrence_ids:
            for attendance_id in eligible_attendance_ids(session, occurrence_id):
                confirm_attendance(session, attendance_id)
                confirmed += 1
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Attendance confirmation failed: {e}")
        raise ConfirmationError(str(e)) from e

    return confirmed
