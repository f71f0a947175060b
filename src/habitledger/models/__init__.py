"""SQLModel table exports."""

from .habit import TITLE_MAX_LENGTH, Habit, HabitCompletion, is_storable_id

__all__ = [
    "Habit",
    "HabitCompletion",
    "TITLE_MAX_LENGTH",
    "is_storable_id",
]
