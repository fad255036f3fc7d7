"""Shared test fixtures."""

from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.database import get_session
from app.main import app
from app.models import (
    Group,
    GroupLocation,
    GroupMember,
    GroupType,
    Location,
    Person,
    Schedule,
)

# A Wednesday; the week boundary (Sunday) is 2026-10-18.
NOW = datetime(2026, 10, 14, 8, 30)


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="now")
def now_fixture() -> datetime:
    return NOW


@pytest.fixture(name="scheduler_person")
def scheduler_person_fixture(session: Session) -> Person:
    """The person recorded as scheduling new attendance."""
    person = Person(first_name="Auto", last_name="Scheduler")
    session.add(person)
    session.commit()
    session.refresh(person)
    return person


@pytest.fixture(name="catalog")
def catalog_fixture(session: Session) -> SimpleNamespace:
    """One eligible group, one location, a Sunday 9am schedule and two members."""
    group_type = GroupType(name="Serving Team", is_scheduling_enabled=True)
    session.add(group_type)
    session.flush()

    parent = Group(name="Ministries", group_type_id=group_type.id)
    session.add(parent)
    session.flush()

    group = Group(name="Greeters", group_type_id=group_type.id, parent_group_id=parent.id)
    location = Location(name="Main Lobby")
    schedule = Schedule(
        name="Sunday 9:00am",
        recurrence_rule="FREQ=WEEKLY;BYDAY=SU",
        effective_start=datetime(2026, 1, 4, 9, 0),
    )
    session.add_all([group, location, schedule])
    session.flush()

    group_location = GroupLocation(group_id=group.id, location_id=location.id, order=0)
    group_location.schedules.append(schedule)
    session.add(group_location)

    members = [
        Person(first_name="Ada", last_name="Greene"),
        Person(first_name="Ben", last_name="Okafor"),
    ]
    session.add_all(members)
    session.flush()
    for member in members:
        session.add(GroupMember(group_id=group.id, person_id=member.id))

    session.commit()
    return SimpleNamespace(
        group_type=group_type,
        parent=parent,
        group=group,
        location=location,
        schedule=schedule,
        group_location=group_location,
        members=members,
    )
