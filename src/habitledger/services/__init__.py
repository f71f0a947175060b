"""Domain services for the habit ledger."""

from .habits import CompletionRecord, HabitService, HabitView
from .ledger import CompletionLedger
from .ordering import HabitOrdering
from .stats import HabitStats, build_stats
from .streaks import current_streak

__all__ = [
    "CompletionLedger",
    "CompletionRecord",
    "HabitOrdering",
    "HabitService",
    "HabitStats",
    "HabitView",
    "build_stats",
    "current_streak",
]
