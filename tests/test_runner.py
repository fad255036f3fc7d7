"""End-to-end tests for the auto-schedule orchestrator."""

from uuid import uuid4

from sqlmodel import Session, func, select

from app.models import RSVP, Attendance, AttendanceOccurrence, AutoScheduleRun
from app.scheduling.assignment import GroupMemberAssigner
from app.scheduling.runner import AutoScheduleRequest, run_auto_schedule


class FailingAssigner(GroupMemberAssigner):
    """Assigns normally but fails on the given call."""

    def __init__(self, fail_on_call: int):
        self.calls = 0
        self.fail_on_call = fail_on_call

    def assign(self, session, occurrence_ids, scheduler_person_id):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise RuntimeError("deadlock detected")
        return super().assign(session, occurrence_ids, scheduler_person_id)


def count(session: Session, model) -> int:
    return session.exec(select(func.count()).select_from(model)).one()


def make_request(catalog, scheduler_person, **overrides) -> AutoScheduleRequest:
    values = dict(
        group_type_id=catalog.group_type.id,
        scheduler_person_id=scheduler_person.id,
        weeks_out=2,
    )
    values.update(overrides)
    return AutoScheduleRequest(**values)


class TestRunAutoSchedule:
    def test_end_to_end(self, catalog, scheduler_person, session: Session, now):
        result = run_auto_schedule(session, make_request(catalog, scheduler_person), now=now)

        assert result.success
        assert result.errors == []
        assert result.occurrence_count == 2
        assert result.assigned_count == 2
        assert result.chunk_count == 1
        assert result.confirmed_count == 4
        assert count(session, AttendanceOccurrence) == 2

        attendances = session.exec(select(Attendance)).all()
        assert len(attendances) == 4
        assert all(a.rsvp == RSVP.YES for a in attendances)
        assert result.summary == (
            "2 occurrences identified and 2 occurrences scheduled in 1 scheduling loops."
        )

    def test_rerun_is_idempotent(self, catalog, scheduler_person, session: Session, now):
        request = make_request(catalog, scheduler_person)
        run_auto_schedule(session, request, now=now)
        first_ids = set(session.exec(select(AttendanceOccurrence.id)).all())

        result = run_auto_schedule(session, request, now=now)

        assert result.occurrence_count == 2
        assert result.confirmed_count == 0
        assert set(session.exec(select(AttendanceOccurrence.id)).all()) == first_ids
        assert count(session, Attendance) == 4

    def test_only_eligible_attendance_promoted(
        self, catalog, scheduler_person, session: Session, now
    ):
        run_auto_schedule(session, make_request(catalog, scheduler_person, weeks_out=1), now=now)
        occurrence = session.exec(select(AttendanceOccurrence)).one()
        declined, attended = occurrence.attendances
        declined.rsvp = RSVP.NO
        attended.rsvp = RSVP.MAYBE
        attended.did_attend = True
        session.add_all([declined, attended])
        session.commit()

        result = run_auto_schedule(
            session, make_request(catalog, scheduler_person, weeks_out=1), now=now
        )

        assert result.confirmed_count == 0
        session.refresh(declined)
        session.refresh(attended)
        assert declined.rsvp == RSVP.NO
        assert attended.rsvp == RSVP.MAYBE

    def test_zero_weeks_is_a_no_op(self, catalog, scheduler_person, session: Session, now):
        result = run_auto_schedule(
            session, make_request(catalog, scheduler_person, weeks_out=0), now=now
        )
        assert result.success
        assert result.occurrence_count == 0
        assert result.chunk_count == 0

    def test_unknown_group_type(self, scheduler_person, session: Session, now):
        request = AutoScheduleRequest(
            group_type_id=uuid4(), scheduler_person_id=scheduler_person.id, weeks_out=2
        )
        result = run_auto_schedule(session, request, now=now)

        assert not result.success
        assert len(result.errors) == 1
        assert "Group type" in result.errors[0]
        assert count(session, AttendanceOccurrence) == 0

    def test_unknown_scheduler(self, catalog, session: Session, now):
        request = AutoScheduleRequest(
            group_type_id=catalog.group_type.id, scheduler_person_id=uuid4(), weeks_out=2
        )
        result = run_auto_schedule(session, request, now=now)

        assert len(result.errors) == 1
        assert "Person could not be found" in result.errors[0]
        assert count(session, AttendanceOccurrence) == 0

    def test_both_lookups_reported(self, session: Session, now):
        request = AutoScheduleRequest(group_type_id=uuid4(), scheduler_person_id=uuid4())
        result = run_auto_schedule(session, request, now=now)
        assert len(result.errors) == 2

    def test_failed_chunk_still_sweeps(self, catalog, scheduler_person, session: Session, now):
        request = make_request(catalog, scheduler_person, weeks_out=3, chunk_size=1)

        result = run_auto_schedule(session, request, assigner=FailingAssigner(2), now=now)

        assert result.errors == ["deadlock detected"]
        assert result.occurrence_count == 3
        assert result.chunk_count == 2
        assert result.assigned_count == 1
        # All three occurrences exist; only chunk 1 got people, and they were confirmed
        assert count(session, AttendanceOccurrence) == 3
        assert result.confirmed_count == 2
        attendances = session.exec(select(Attendance)).all()
        assert len(attendances) == 2
        assert all(a.rsvp == RSVP.YES for a in attendances)

    def test_run_is_recorded(self, catalog, scheduler_person, session: Session, now):
        result = run_auto_schedule(session, make_request(catalog, scheduler_person), now=now)

        run = session.get(AutoScheduleRun, result.run_id)
        assert run is not None
        assert run.group_type_id == catalog.group_type.id
        assert run.occurrence_count == 2
        assert run.confirmed_count == 4
        assert run.errors is None
        assert run.finished_at is not None

    def test_failed_run_is_recorded(self, session: Session, now):
        request = AutoScheduleRequest(group_type_id=uuid4(), scheduler_person_id=uuid4())
        result = run_auto_schedule(session, request, now=now)

        run = session.get(AutoScheduleRun, result.run_id)
        assert run.errors is not None
        assert len(run.errors.split("\n")) == 2

    def test_unparseable_schedule_is_reported(
        self, catalog, scheduler_person, session: Session, now
    ):
        catalog.schedule.recurrence_rule = "FREQ=WEEKLY;BYDAY=XX"
        session.add(catalog.schedule)
        session.commit()

        result = run_auto_schedule(session, make_request(catalog, scheduler_person), now=now)

        assert not result.success
        assert len(result.errors) == 1
        assert "BYDAY" in result.errors[0]
        assert result.occurrence_count == 0
        assert count(session, AttendanceOccurrence) == 0
        run = session.get(AutoScheduleRun, result.run_id)
        assert run.errors == result.errors[0]

    def test_schedule_with_utc_until(self, catalog, scheduler_person, session: Session, now):
        catalog.schedule.recurrence_rule = "FREQ=WEEKLY;BYDAY=SU;UNTIL=20261231T000000Z"
        session.add(catalog.schedule)
        session.commit()

        result = run_auto_schedule(session, make_request(catalog, scheduler_person), now=now)

        assert result.success
        assert result.occurrence_count == 2
