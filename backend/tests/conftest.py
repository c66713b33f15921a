from __future__ import annotations

from datetime import datetime
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from sharecal.db import build_engine, get_session, init_db
from sharecal.main import create_application
from sharecal.models import Calendar, CalendarRole, User
from sharecal.schemas import EventCreate
from sharecal.services import calendars


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection of a test."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def make_user(session: Session) -> Callable[[str], User]:
    def _make(pseudo: str) -> User:
        user = User(pseudo=pseudo, email=f"{pseudo}@example.com")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def alice(make_user) -> User:
    return make_user("alice")


@pytest.fixture
def bob(make_user) -> User:
    return make_user("bob")


@pytest.fixture
def carol(make_user) -> User:
    return make_user("carol")


@pytest.fixture
def calendar(session: Session, alice: User) -> Calendar:
    """Calendar created by alice, who is its only confirmed admin."""
    return calendars.create_calendar(
        session, "Team", [(alice.id, CalendarRole.ADMIN)], creator_id=alice.id
    )


@pytest.fixture
def event_payload() -> Callable[..., EventCreate]:
    def _payload(**overrides) -> EventCreate:
        data = {
            "name": "Standup",
            "type": "meeting",
            "start_time": datetime(2024, 1, 7, 9, 0),
            "end_time": datetime(2024, 1, 7, 10, 0),
        }
        data.update(overrides)
        return EventCreate(**data)

    return _payload


@pytest.fixture
def client(engine) -> Generator[TestClient, None, None]:
    app = create_application(create_tables=False)

    def _override_session() -> Generator[Session, None, None]:
        with Session(engine) as db_session:
            yield db_session

    app.dependency_overrides[get_session] = _override_session
    with TestClient(app) as test_client:
        yield test_client
