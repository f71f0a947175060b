"""Habit repository protocol."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ...models.habit import Habit, HabitCompletion


class HabitRepository(Protocol):
    """Persistence contract for habits and their completion events.

    Every habit lookup is scoped by ``user_id``; a habit owned by another user
    is indistinguishable from a missing one.
    """

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit owned by ``user_id``."""
        ...

    def list_for_user(self, *, user_id: int, is_active: bool | None = None) -> list[Habit]:
        """List a user's habits in display order."""
        ...

    def list_ids(self, *, user_id: int) -> list[int]:
        """Return the ids of every habit owned by the user."""
        ...

    def max_sort_order(self, *, user_id: int) -> Optional[int]:
        """Return the highest sort index among the user's habits."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Persist a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Persist changes to an existing habit."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit and its completions."""
        ...

    def apply_sort_order(
        self, ordered_ids: Sequence[int], *, user_id: int, updated_at: datetime
    ) -> None:
        """Assign ``sort_order = position`` to every listed habit in one transaction."""
        ...

    # Completion event operations
    def get_completion(self, habit_id: int, completed_date: date) -> Optional[HabitCompletion]:
        """Get the completion event for a habit on a given day."""
        ...

    def add_completion(self, completion: HabitCompletion) -> HabitCompletion:
        """Insert a completion event, enforcing one per habit per day."""
        ...

    def delete_completion(self, habit_id: int, completed_date: date) -> bool:
        """Delete the completion event for a habit on a given day."""
        ...

    def list_completions(
        self, habit_ids: Sequence[int], *, since: date | None = None
    ) -> list[HabitCompletion]:
        """List completion events for habits, newest first."""
        ...
