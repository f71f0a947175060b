"""Completion ledger: at most one completion event per habit per calendar day."""

from __future__ import annotations

from datetime import date, datetime

from ..domain.repositories import HabitRepository
from ..errors import HabitAlreadyCompleted, HabitNotCompleted
from ..logging_config import get_logger
from ..models.habit import Habit, HabitCompletion

logger = get_logger(__name__)


class CompletionLedger:
    """Records and removes completion events for already-authorized habits."""

    def __init__(self, repository: HabitRepository) -> None:
        self.repository = repository

    def record_completion(
        self, habit: Habit, today: date, *, completed_at: datetime
    ) -> HabitCompletion:
        """Create the completion event for ``today``.

        Raises:
            HabitAlreadyCompleted: an event for (habit, today) already exists,
                either before the call or inserted concurrently.
        """
        if self.repository.get_completion(habit.id, today) is not None:
            raise HabitAlreadyCompleted()

        completion = self.repository.add_completion(
            HabitCompletion.for_day(habit.id, today, completed_at=completed_at)
        )
        logger.info(
            "Recorded habit completion",
            extra={"habit_id": habit.id, "completed_date": today.isoformat()},
        )
        return completion

    def remove_completion(self, habit: Habit, today: date) -> None:
        """Delete the completion event for ``today``.

        Raises:
            HabitNotCompleted: no event exists for (habit, today).
        """
        if not self.repository.delete_completion(habit.id, today):
            raise HabitNotCompleted()
        logger.info(
            "Removed habit completion",
            extra={"habit_id": habit.id, "completed_date": today.isoformat()},
        )

    def list_completions_since(self, habit: Habit, since: date) -> list[HabitCompletion]:
        """Return events on or after ``since``, most recent first."""
        return self.repository.list_completions([habit.id], since=since)


__all__ = ["CompletionLedger"]
