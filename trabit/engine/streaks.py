"""Streaks of consecutive logged days."""

from __future__ import annotations

from datetime import date, timedelta

from trabit.data.schemas import Habit
from trabit.engine.completion import is_day_met


def current_streak(habit: Habit, today: date) -> int:
    """Consecutive logged days ending today. 0 if today has no log."""
    streak = 0
    cursor = today
    while is_day_met(habit, cursor):
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def longest_streak(habit: Habit, start: date, end: date) -> int:
    """Longest run of consecutive logged days inside [start, end]."""
    longest = 0
    current = 0
    cursor = start
    while cursor <= end:
        if is_day_met(habit, cursor):
            current += 1
            longest = max(longest, current)
        else:
            current = 0
        cursor += timedelta(days=1)
    return longest
