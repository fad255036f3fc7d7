"""Occurrence and attendance routes."""
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.core.database import get_session
from app.models import AttendanceOccurrence
from app.scheduling.confirmation import confirm_attendance

router = APIRouter(tags=["occurrences"])


@router.get("/occurrences")
async def list_occurrences(
    start: date | None = None,
    end: date | None = None,
    group_id: UUID | None = None,
    limit: int = Query(500, ge=1, le=5000),
    session: Session = Depends(get_session),
):
    """List occurrences between ``start`` and ``end`` (inclusive), by date."""
    statement = select(AttendanceOccurrence)
    if start:
        statement = statement.where(AttendanceOccurrence.occurrence_date >= start)
    if end:
        statement = statement.where(AttendanceOccurrence.occurrence_date <= end)
    if group_id:
        statement = statement.where(AttendanceOccurrence.group_id == group_id)
    statement = statement.order_by(AttendanceOccurrence.occurrence_date).limit(limit)
    return session.exec(statement).all()


@router.get("/occurrences/{occurrence_id}")
async def occurrence_detail(occurrence_id: UUID, session: Session = Depends(get_session)):
    """One occurrence together with its attendance records."""
    occurrence = session.get(AttendanceOccurrence, occurrence_id)
    if not occurrence:
        raise HTTPException(status_code=404, detail="Occurrence not found")

    return {
        **occurrence.model_dump(mode="json"),
        "attendances": [
            attendance.model_dump(mode="json") for attendance in occurrence.attendances
        ],
    }


@router.post("/attendances/{attendance_id}/confirm")
async def confirm(attendance_id: UUID, session: Session = Depends(get_session)):
    """Confirm a scheduled person for their occurrence."""
    try:
        attendance = confirm_attendance(session, attendance_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Attendance not found")
    session.commit()
    session.refresh(attendance)
    return attendance
