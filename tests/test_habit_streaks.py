"""Tests for the current-streak walk.

Covers consecutive runs, the grace for today not being completed yet,
single-day gaps being bridged, longer gaps ending the streak, duplicate and
unsorted input, and dates after today.
"""

from __future__ import annotations

from datetime import date, timedelta
from itertools import combinations

import pytest

from habitledger.services.streaks import current_streak

TODAY = date(2024, 3, 15)


def days_ago(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=offset) for offset in offsets]


class TestCurrentStreak:
    def test_no_completions_returns_zero(self):
        assert current_streak([], today=TODAY) == 0

    def test_today_only_returns_one(self):
        assert current_streak(days_ago(0), today=TODAY) == 1

    def test_today_and_yesterday_returns_two(self):
        assert current_streak(days_ago(0, 1), today=TODAY) == 2

    def test_three_consecutive_days_returns_three(self):
        assert current_streak(days_ago(0, 1, 2), today=TODAY) == 3

    def test_yesterday_counts_while_today_is_open(self):
        """A streak ending yesterday survives until today is over."""
        assert current_streak(days_ago(1), today=TODAY) == 1
        assert current_streak(days_ago(1, 2, 3), today=TODAY) == 3

    def test_day_before_yesterday_alone_returns_zero(self):
        assert current_streak(days_ago(2), today=TODAY) == 0

    def test_single_missed_day_is_bridged(self):
        """Today and today-2: today-2 equals expected-1 once today matched."""
        assert current_streak(days_ago(0, 2), today=TODAY) == 2
        assert current_streak(days_ago(0, 2, 4), today=TODAY) == 3

    def test_two_day_gap_ends_streak(self):
        assert current_streak(days_ago(0, 3, 4, 5), today=TODAY) == 1
        assert current_streak(days_ago(0, 1, 4, 5), today=TODAY) == 2

    def test_duplicates_and_order_are_ignored(self):
        dates = days_ago(2, 0, 1, 0, 1)
        assert current_streak(dates, today=TODAY) == 3

    def test_date_after_today_stops_the_walk(self):
        tomorrow = TODAY + timedelta(days=1)
        assert current_streak([tomorrow, TODAY], today=TODAY) == 0

    def test_long_run(self):
        assert current_streak(days_ago(*range(60)), today=TODAY) == 60


def _walk_without_yesterday_branch(dates: list[date], today: date) -> int:
    streak = 0
    expected = today
    for day in sorted(set(dates), reverse=True):
        if day == expected or day == expected - timedelta(days=1):
            streak += 1
            expected = day - timedelta(days=1)
        else:
            break
    return streak


@pytest.mark.parametrize("size", range(0, 7))
def test_yesterday_branch_never_changes_the_result(size):
    """Every subset of the last week yields the same streak with or without the extra branch."""
    window = days_ago(*range(7))
    for subset in combinations(window, size):
        dates = list(subset)
        assert current_streak(dates, today=TODAY) == _walk_without_yesterday_branch(dates, TODAY)
