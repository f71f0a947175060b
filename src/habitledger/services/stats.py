"""Completion-rate and history aggregation for habits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Iterable

from .streaks import LONGEST_STREAK_PLACEHOLDER, current_streak

DEFAULT_WINDOW_DAYS = 30
_ONE_DECIMAL = Decimal("0.1")


def round_rate(value: float) -> float:
    """Round a percentage to one decimal place, halves to even.

    Rounding is applied to the shortest decimal representation of ``value``
    so that 6.25 becomes 6.2 and 18.75 becomes 18.8 regardless of binary
    floating point noise.
    """

    return float(Decimal(repr(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_EVEN))


def lifetime_completion_rate(total_completions: int, *, created_on: date, today: date) -> float:
    """Percentage of days since creation (inclusive) with a completion."""

    days_since_creation = (today - created_on).days + 1
    if days_since_creation <= 0:
        return 0.0
    return round_rate(total_completions / days_since_creation * 100)


def window_start(today: date, days: int) -> date:
    return today - timedelta(days=days)


@dataclass(frozen=True, slots=True)
class DailyCompletion:
    """One calendar day of the completion history."""

    day: date
    completed: bool

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.day.isoformat(), "completed": self.completed}


def completion_history(
    completion_dates: Iterable[date], *, today: date, days: int = DEFAULT_WINDOW_DAYS
) -> list[DailyCompletion]:
    """Return one entry per day from ``today - days`` through ``today``, oldest first."""

    completed = set(completion_dates)
    start = window_start(today, days)
    history: list[DailyCompletion] = []
    cursor = start
    while cursor <= today:
        history.append(DailyCompletion(day=cursor, completed=cursor in completed))
        cursor += timedelta(days=1)
    return history


def windowed_completion_rate(
    completion_dates: Iterable[date], *, today: date, days: int = DEFAULT_WINDOW_DAYS
) -> float:
    """Distinct completed days in the window divided by ``days``.

    The window spans ``days + 1`` calendar days but the denominator is
    ``days``, so a fully completed window reports slightly over 100.
    """

    if days <= 0:
        return 0.0
    start = window_start(today, days)
    in_window = {day for day in completion_dates if start <= day <= today}
    return round_rate(len(in_window) / days * 100)


@dataclass(slots=True)
class HabitStats:
    """Derived statistics for a single habit over a trailing window."""

    habit_id: int
    habit_title: str
    total_completions: int
    current_streak: int
    completion_rate: float
    completion_rate_last_month: float
    days: int
    longest_streak: int = LONGEST_STREAK_PLACEHOLDER
    completion_history: list[DailyCompletion] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "habitId": self.habit_id,
            "habitTitle": self.habit_title,
            "totalCompletions": self.total_completions,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "completionRate": self.completion_rate,
            "completionRateLastMonth": self.completion_rate_last_month,
            "days": self.days,
            "completionHistory": [entry.to_dict() for entry in self.completion_history],
        }


def build_stats(
    *,
    habit_id: int,
    habit_title: str,
    created_on: date,
    completion_dates: Iterable[date],
    today: date,
    days: int = DEFAULT_WINDOW_DAYS,
) -> HabitStats:
    """Assemble the stats payload from a habit's full completion set."""

    dates = list(completion_dates)
    total = len(dates)
    return HabitStats(
        habit_id=habit_id,
        habit_title=habit_title,
        total_completions=total,
        current_streak=current_streak(dates, today=today),
        completion_rate=lifetime_completion_rate(total, created_on=created_on, today=today),
        completion_rate_last_month=windowed_completion_rate(dates, today=today, days=days),
        days=days,
        completion_history=completion_history(dates, today=today, days=days),
    )


__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "DailyCompletion",
    "HabitStats",
    "build_stats",
    "completion_history",
    "lifetime_completion_rate",
    "round_rate",
    "windowed_completion_rate",
]
