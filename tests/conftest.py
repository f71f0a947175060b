"""Pytest configuration and shared fixtures for HabitLedger tests.

Provides an isolated SQLite database per test, repository and service
fixtures driven by a controllable clock, habit/completion factories and a
Flask test client.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest
from sqlmodel import create_engine

from habitledger import create_app
from habitledger.infra.database import create_session_factory, init_database
from habitledger.infra.repositories import SQLModelHabitRepository
from habitledger.models import Habit, HabitCompletion
from habitledger.services.habits import HabitService

USER_ID = 1
OTHER_USER_ID = 2
START = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def today(self) -> date:
        return self.now.date()

    def advance(self, days: int = 0, **kwargs) -> datetime:
        self.now = self.now + timedelta(days=days, **kwargs)
        return self.now


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def db_engine(tmp_path):
    """Create an isolated SQLite database file for each test."""

    engine = create_engine(
        f"sqlite:///{tmp_path / 'habits.db'}",
        connect_args={"check_same_thread": False},
    )
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory matching the one used by the application."""

    return create_session_factory(db_engine)


@pytest.fixture
def repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def service(repo, clock) -> HabitService:
    return HabitService(repo, clock=clock)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(repo, clock):
    """Factory for persisting habits directly through the repository."""

    def _create_habit(
        title: str = "Read",
        *,
        user_id: int = USER_ID,
        sort_order: int = 0,
        created_at: datetime | None = None,
        is_active: bool = True,
    ) -> Habit:
        created = created_at or clock.now
        return repo.create(
            Habit(
                user_id=user_id,
                title=title,
                sort_order=sort_order,
                is_active=is_active,
                created_at=created,
                updated_at=created,
            )
        )

    return _create_habit


@pytest.fixture
def complete_on(repo):
    """Persist completion events for arbitrary days, bypassing the ledger."""

    def _complete(habit: Habit, *days: date) -> list[HabitCompletion]:
        return [
            repo.add_completion(
                HabitCompletion.for_day(
                    habit.id,
                    day,
                    completed_at=datetime.combine(day, time(8), tzinfo=timezone.utc),
                )
            )
            for day in days
        ]

    return _complete


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path, monkeypatch: pytest.MonkeyPatch, clock):
    monkeypatch.setenv("HABITLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITLEDGER_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("HABITLEDGER_DEV_MODE", "true")
    monkeypatch.delenv("HABITLEDGER_USER_HEADER", raising=False)
    monkeypatch.delenv("HABITLEDGER_DEFAULT_WINDOW_DAYS", raising=False)
    return create_app("testing", overrides={"HABITLEDGER_CLOCK": clock})


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


def auth(user_id: int = USER_ID) -> dict[str, str]:
    """Headers identifying the caller to the habits API."""

    return {"X-User-Id": str(user_id)}
