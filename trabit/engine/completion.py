"""Day-completion predicate and the views built directly on it."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from trabit.data.schemas import FrequencyType, GoalDefinition, GoalKind, Habit
from trabit.engine.aggregation import aggregate

logger = logging.getLogger(__name__)


def is_day_met(habit: Habit, day: date, goal: GoalDefinition | None = None) -> bool:
    """Return True if ``day`` counts as met for ``habit``.

    A day without any log is never met. Without a goal, or with a goal that is
    not a consistency goal, any log is enough. A consistency goal with both a
    metric and a threshold additionally requires the day's aggregate of that
    metric to reach the threshold.
    """
    if not habit.logs_on(day):
        return False
    if goal is None or goal.kind != GoalKind.CONSISTENCY:
        return True
    if goal.metric_name is None or goal.target_value is None:
        return True
    return aggregate(habit, goal.metric_name, day) >= goal.target_value


def heatmap(
    habit: Habit,
    today: date,
    days: int = 30,
    goal: GoalDefinition | None = None,
) -> list[tuple[date, bool]]:
    """Met/unmet flags for the ``days`` days ending today, oldest first."""
    span = max(days, 1)
    start = today - timedelta(days=span - 1)
    cells: list[tuple[date, bool]] = []
    for i in range(span):
        day = start + timedelta(days=i)
        cells.append((day, is_day_met(habit, day, goal)))
    return cells


def _weekday_number(day: date) -> int:
    """1=Sunday ... 7=Saturday."""
    return day.isoweekday() % 7 + 1


def is_scheduled(habit: Habit, day: date) -> bool:
    """Whether the habit's frequency policy expects it on ``day``.

    Weekly and monthly habits stay due until they have been logged on an
    earlier day of the same ISO week / calendar month.
    """
    if day < habit.created_date:
        return False

    match habit.frequency:
        case FrequencyType.DAILY:
            return True
        case FrequencyType.INTERVAL:
            interval = habit.frequency_interval or 1
            if interval < 1:
                logger.debug("Non-positive interval %s on habit %s", interval, habit.id)
                interval = 1
            return (day - habit.created_date).days % interval == 0
        case FrequencyType.WEEKDAYS:
            return _weekday_number(day) in (habit.frequency_weekdays or [])
        case FrequencyType.WEEKLY:
            week_start = day - timedelta(days=day.weekday())
            return not any(week_start <= log.day < day for log in habit.logs)
        case FrequencyType.MONTHLY:
            month_start = day.replace(day=1)
            return not any(month_start <= log.day < day for log in habit.logs)
    return True
