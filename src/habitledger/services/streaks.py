"""Current-streak calculation over a habit's completion dates."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

ONE_DAY = timedelta(days=1)

# Longest-ever streaks are not tracked; the stats payload reports this value.
LONGEST_STREAK_PLACEHOLDER = 0


def current_streak(completion_dates: Iterable[date], *, today: date) -> int:
    """Return the number of consecutive completed days ending today or yesterday.

    Walks the distinct dates newest first. A date equal to the expected day, or
    one day before it, extends the streak and moves the expected day to the
    day before that date; anything else ends the walk. A single missed day is
    therefore bridged, while a gap of two or more days ends the streak. Today
    not being completed yet does not break a streak that reaches yesterday.
    """

    streak = 0
    expected = today
    for day in sorted(set(completion_dates), reverse=True):
        if day == expected or day == expected - ONE_DAY:
            streak += 1
            expected = day - ONE_DAY
        elif streak == 0 and day == today - ONE_DAY:
            # Yesterday may open a streak; the first branch already covers it.
            streak += 1
            expected = day - ONE_DAY
        else:
            break
    return streak


__all__ = ["LONGEST_STREAK_PLACEHOLDER", "current_streak"]
