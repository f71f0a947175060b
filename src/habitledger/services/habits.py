"""Habit orchestration: ownership checks, ledger writes and view assembly."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional, Sequence

from ..domain.repositories import HabitRepository
from ..errors import HabitNotFound, ValidationFailed
from ..logging_config import get_logger
from ..models.habit import TITLE_MAX_LENGTH, Habit, HabitCompletion, utcnow
from .ledger import CompletionLedger
from .ordering import HabitOrdering
from .stats import DEFAULT_WINDOW_DAYS, HabitStats, build_stats, lifetime_completion_rate
from .streaks import current_streak

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (as SQLite returns them) as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def clean_title(raw: object) -> str:
    """Return the trimmed title or raise ``ValidationFailed``."""

    title = raw.strip() if isinstance(raw, str) else ""
    if not title:
        raise ValidationFailed("Title is required.", details={"title": ["Title is required."]})
    if len(title) > TITLE_MAX_LENGTH:
        message = f"Title must be between 1 and {TITLE_MAX_LENGTH} characters."
        raise ValidationFailed(message, details={"title": [message]})
    return title


@dataclass(slots=True)
class HabitView:
    """Habit fields combined with analytics derived from its completions."""

    id: int
    title: str
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime
    is_completed_today: bool
    last_completed_at: Optional[datetime]
    current_streak: int
    total_completions: int
    completion_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "isActive": self.is_active,
            "sortOrder": self.sort_order,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "isCompletedToday": self.is_completed_today,
            "lastCompletedAt": (
                self.last_completed_at.isoformat() if self.last_completed_at else None
            ),
            "currentStreak": self.current_streak,
            "totalCompletions": self.total_completions,
            "completionRate": self.completion_rate,
        }


@dataclass(frozen=True, slots=True)
class CompletionRecord:
    id: int
    habit_id: int
    completed_at: datetime
    completed_date: date

    @classmethod
    def from_model(cls, completion: HabitCompletion) -> "CompletionRecord":
        return cls(
            id=completion.id,
            habit_id=completion.habit_id,
            completed_at=as_utc(completion.completed_at),
            completed_date=completion.completed_date,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "habitId": self.habit_id,
            "completedAt": self.completed_at.isoformat(),
            "completedDate": self.completed_date.isoformat(),
        }


def build_view(habit: Habit, completions: Iterable[HabitCompletion], *, today: date) -> HabitView:
    """Compute the response view from a habit and its full completion set."""

    events = list(completions)
    dates = [event.completed_date for event in events]
    created_at = as_utc(habit.created_at)
    last_completed_at = max((as_utc(event.completed_at) for event in events), default=None)
    return HabitView(
        id=habit.id,
        title=habit.title,
        is_active=habit.is_active,
        sort_order=habit.sort_order,
        created_at=created_at,
        updated_at=as_utc(habit.updated_at),
        is_completed_today=today in dates,
        last_completed_at=last_completed_at,
        current_streak=current_streak(dates, today=today),
        total_completions=len(events),
        completion_rate=lifetime_completion_rate(
            len(events), created_on=created_at.date(), today=today
        ),
    )


class HabitService:
    """Entry point for every habit operation, scoped to an explicit user id.

    "Today" is the UTC calendar date of the injected clock at call time; the
    client never supplies it.
    """

    def __init__(self, repository: HabitRepository, *, clock: Clock = utcnow) -> None:
        self.repository = repository
        self.ledger = CompletionLedger(repository)
        self.ordering = HabitOrdering(repository)
        self.clock = clock

    def now(self) -> datetime:
        return as_utc(self.clock())

    def _load(self, user_id: int, habit_id: int) -> Habit:
        habit = self.repository.get_by_id(habit_id, user_id=user_id)
        if habit is None:
            raise HabitNotFound()
        return habit

    def _view(self, habit: Habit, *, today: date) -> HabitView:
        completions = self.repository.list_completions([habit.id])
        return build_view(habit, completions, today=today)

    def _views(self, habits: Sequence[Habit], *, today: date) -> list[HabitView]:
        by_habit: dict[int, list[HabitCompletion]] = defaultdict(list)
        for completion in self.repository.list_completions([habit.id for habit in habits]):
            by_habit[completion.habit_id].append(completion)
        return [build_view(habit, by_habit[habit.id], today=today) for habit in habits]

    # Habit CRUD ---------------------------------------------------------------
    def list_habits(self, user_id: int, *, is_active: bool | None = None) -> list[HabitView]:
        habits = self.repository.list_for_user(user_id=user_id, is_active=is_active)
        return self._views(habits, today=self.now().date())

    def get_habit(self, user_id: int, habit_id: int) -> HabitView:
        habit = self._load(user_id, habit_id)
        return self._view(habit, today=self.now().date())

    def create_habit(self, user_id: int, title: object) -> HabitView:
        title = clean_title(title)
        now = self.now()
        habit = Habit(
            user_id=user_id,
            title=title,
            sort_order=self.ordering.next_sort_order(user_id),
            created_at=now,
            updated_at=now,
        )
        habit = self.repository.create(habit)
        logger.info(
            "Created habit",
            extra={"user_id": user_id, "habit_id": habit.id, "sort_order": habit.sort_order},
        )
        return build_view(habit, [], today=now.date())

    def update_habit(
        self, user_id: int, habit_id: int, *, title: object, is_active: bool = True
    ) -> HabitView:
        title = clean_title(title)
        habit = self._load(user_id, habit_id)
        now = self.now()
        habit.title = title
        habit.is_active = is_active
        habit.updated_at = now
        habit = self.repository.update(habit)
        logger.info("Updated habit", extra={"user_id": user_id, "habit_id": habit_id})
        return self._view(habit, today=now.date())

    def delete_habit(self, user_id: int, habit_id: int) -> None:
        if not self.repository.delete(habit_id, user_id=user_id):
            raise HabitNotFound()
        logger.info("Deleted habit", extra={"user_id": user_id, "habit_id": habit_id})

    def reorder_habits(self, user_id: int, habit_ids: Sequence[int]) -> list[HabitView]:
        now = self.now()
        self.ordering.reorder(user_id, habit_ids, now=now)
        return self._views(self.repository.list_for_user(user_id=user_id), today=now.date())

    # Completion ledger --------------------------------------------------------
    def complete_habit(self, user_id: int, habit_id: int) -> HabitView:
        habit = self._load(user_id, habit_id)
        now = self.now()
        self.ledger.record_completion(habit, now.date(), completed_at=now)
        return self._view(habit, today=now.date())

    def uncomplete_habit(self, user_id: int, habit_id: int) -> HabitView:
        habit = self._load(user_id, habit_id)
        today = self.now().date()
        self.ledger.remove_completion(habit, today)
        return self._view(habit, today=today)

    def list_completions(
        self, user_id: int, habit_id: int, *, days: int = DEFAULT_WINDOW_DAYS
    ) -> list[CompletionRecord]:
        habit = self._load(user_id, habit_id)
        since = self.now().date() - timedelta(days=days)
        return [
            CompletionRecord.from_model(completion)
            for completion in self.ledger.list_completions_since(habit, since)
        ]

    def habit_stats(
        self, user_id: int, habit_id: int, *, days: int = DEFAULT_WINDOW_DAYS
    ) -> HabitStats:
        habit = self._load(user_id, habit_id)
        today = self.now().date()
        completions = self.repository.list_completions([habit.id])
        return build_stats(
            habit_id=habit.id,
            habit_title=habit.title,
            created_on=as_utc(habit.created_at).date(),
            completion_dates=[completion.completed_date for completion in completions],
            today=today,
            days=days,
        )


__all__ = [
    "Clock",
    "CompletionRecord",
    "HabitService",
    "HabitView",
    "as_utc",
    "build_view",
    "clean_title",
]
