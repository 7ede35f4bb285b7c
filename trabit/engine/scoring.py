"""Consistency score: a bounded counter with reward per met day and penalty per miss."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from trabit.data.schemas import GoalDefinition, Habit
from trabit.engine.completion import is_day_met

logger = logging.getLogger(__name__)


def score_start(habit: Habit) -> date:
    """First day of the score walk: the earlier of creation and the first log."""
    if not habit.logs:
        return habit.created_date
    return min(min(log.day for log in habit.logs), habit.created_date)


def _step(score: int, met: bool, target: int, penalty: int) -> int:
    if met:
        return min(score + 1, target)
    return max(0, score - penalty)


def consistency_series(
    habit: Habit,
    goal: GoalDefinition,
    start: date,
    end: date,
) -> list[tuple[date, int]]:
    """Score at every day in [start, end], computed in one forward pass.

    The walk always begins at ``score_start(habit)``; days before ``start``
    are walked but not reported. Days before the habit's first day score 0.
    """
    if goal.difficulty is None:
        logger.debug("Goal %s has no difficulty; scoring as 0", goal.id)
        return [(start + timedelta(days=i), 0) for i in range((end - start).days + 1)]

    target = goal.difficulty.target_occurrences
    penalty = goal.difficulty.penalty
    first = score_start(habit)

    series: list[tuple[date, int]] = []
    score = 0
    day = min(first, start)
    while day <= end:
        if day >= first:
            score = _step(score, is_day_met(habit, day, goal), target, penalty)
        if day >= start:
            series.append((day, score))
        day += timedelta(days=1)
    return series


def consistency_score(habit: Habit, goal: GoalDefinition, upto: date) -> int:
    """Score after walking every day from the habit's first day to ``upto`` inclusive."""
    if goal.difficulty is None or upto < score_start(habit):
        return 0
    series = consistency_series(habit, goal, upto, upto)
    return series[-1][1]


def consistency_percent_series(
    habit: Habit,
    goal: GoalDefinition,
    today: date,
    days: int = 21,
) -> list[tuple[date, float]]:
    """Trend of the score as 0-100 percent of the target over the last ``days`` days."""
    target = goal.difficulty.target_occurrences if goal.difficulty is not None else 0
    start = today - timedelta(days=max(days, 1) - 1)
    series = consistency_series(habit, goal, start, today)
    if target <= 0:
        return [(d, 0.0) for d, _ in series]
    return [(d, score / target * 100.0) for d, score in series]
