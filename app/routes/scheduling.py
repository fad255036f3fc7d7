"""Scheduling routes for running and monitoring auto-schedule runs."""
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from app.core.config import settings
from app.core.database import get_session
from app.models import AutoScheduleRun
from app.scheduling.runner import AutoScheduleRequest, run_auto_schedule

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@router.post("/run")
async def trigger_run(
    request: AutoScheduleRequest, session: Session = Depends(get_session)
):
    """
    Run the auto-scheduler for one group type.

    Always responds 200 once the run has finished. Problems found during the
    run (unknown group type, failed assignment chunk, failed confirmation
    sweep) are listed in ``errors`` and ``success`` is false.
    """
    result = run_auto_schedule(session, request)
    return {
        **result.model_dump(mode="json"),
        "success": result.success,
        "summary": result.summary,
    }


@router.get("/runs")
async def list_runs(
    limit: int = Query(20, ge=1, le=200), session: Session = Depends(get_session)
):
    """Most recent auto-schedule runs, newest first."""
    statement = (
        select(AutoScheduleRun).order_by(AutoScheduleRun.started_at.desc()).limit(limit)
    )
    return session.exec(statement).all()


@router.get("/status")
async def scheduling_status(session: Session = Depends(get_session)):
    """
    Get the auto-scheduler configuration and the outcome of the latest run.
    """
    last_run = session.exec(
        select(AutoScheduleRun).order_by(AutoScheduleRun.started_at.desc()).limit(1)
    ).first()

    return {
        "job_enabled": bool(
            settings.scheduled_group_type_ids and settings.auto_schedule_person_id
        ),
        "group_type_ids": settings.scheduled_group_type_ids,
        "interval_minutes": settings.auto_schedule_interval_minutes,
        "default_weeks_out": settings.default_weeks_out,
        "assignment_chunk_size": settings.assignment_chunk_size,
        "last_run_time": last_run.finished_at.isoformat() if last_run and last_run.finished_at else None,
        "last_run_success": (last_run.errors is None) if last_run else None,
        "last_run_errors": last_run.errors.split("\n") if last_run and last_run.errors else [],
    }
