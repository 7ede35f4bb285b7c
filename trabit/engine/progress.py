"""Goal progress projection, the completion latch and milestone celebrations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from trabit.data.schemas import ActivityLog, AggregationKind, GoalDefinition, GoalKind, Habit
from trabit.engine.aggregation import aggregate_total, aggregation_for
from trabit.engine.scoring import consistency_score

logger = logging.getLogger(__name__)

MILESTONES = (0.25, 0.50, 0.75, 1.0)


@dataclass
class Progress:
    """Computed state of one goal. ``fraction`` is None for deadline goals."""

    kind: GoalKind
    fraction: float | None
    current: float
    target: float
    display: str
    days_remaining: int | None = None
    caption: str = ""


@dataclass
class Celebration:
    """One-shot signal that a logging action pushed a goal past a milestone."""

    goal_id: str
    milestone: float
    message: str


def format_value(value: float) -> str:
    """Whole numbers without decimals, everything else with one."""
    if float(value).is_integer():
        return f"{value:.0f}"
    return f"{value:.1f}"


def format_time(value: float) -> str:
    """Render fractional hours of the day (e.g. 22.5) as a 12-hour clock time."""
    val = value % 24
    h = int(val)
    m = round((val - h) * 60)
    if m == 60:
        h, m = (h + 1) % 24, 0
    period = "PM" if h >= 12 else "AM"
    display_h = h - 12 if h > 12 else (12 if h == 0 else h)
    return f"{display_h}:{m:02d} {period}"


def format_duration(value: float) -> str:
    """Render fractional hours as ``7h 30m``."""
    h = int(value)
    m = round((value - h) * 60)
    if h == 0:
        return f"{m}m"
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


def _target_value_progress(habit: Habit, goal: GoalDefinition, today: date) -> Progress:
    target = goal.target_value or 0.0
    if goal.metric_name is None:
        return Progress(kind=goal.kind, fraction=0.0, current=0.0, target=target, display="")

    current = aggregate_total(habit, goal.metric_name, today)
    fraction = _clamp(current / target) if target > 0 else 0.0
    metric = habit.metric(goal.metric_name)
    unit = metric.unit if metric is not None else ""
    display = f"{format_value(current)} / {format_value(target)} {unit}".rstrip()
    is_max = aggregation_for(habit, goal.metric_name) == AggregationKind.MAX
    return Progress(
        kind=goal.kind,
        fraction=fraction,
        current=current,
        target=target,
        display=display,
        caption="Max Recorded" if is_max else "Total",
    )


def _deadline_progress(goal: GoalDefinition, today: date) -> Progress:
    days_left = (goal.target_date - today).days if goal.target_date is not None else 0
    remaining = max(0, days_left)
    return Progress(
        kind=goal.kind,
        fraction=None,
        current=0.0,
        target=0.0,
        display=f"{remaining} Days Remaining",
        days_remaining=remaining,
        caption=f"Target: {goal.target_date.isoformat()}" if goal.target_date is not None else "",
    )


def _consistency_progress(habit: Habit, goal: GoalDefinition, today: date) -> Progress:
    target = goal.difficulty.target_occurrences if goal.difficulty is not None else 0
    score = consistency_score(habit, goal, today)
    fraction = _clamp(score / target) if target > 0 else 0.0
    return Progress(
        kind=goal.kind,
        fraction=fraction,
        current=float(score),
        target=float(target),
        display=f"{int(fraction * 100)}% Consistent",
        caption=goal.difficulty.value.capitalize() if goal.difficulty is not None else "",
    )


def progress(habit: Habit, goal: GoalDefinition, today: date) -> Progress:
    """Project a goal to a 0-1 fraction plus display values. Never raises on malformed goals."""
    match goal.kind:
        case GoalKind.TARGET_VALUE:
            return _target_value_progress(habit, goal, today)
        case GoalKind.DEADLINE:
            return _deadline_progress(goal, today)
        case GoalKind.CONSISTENCY:
            return _consistency_progress(habit, goal, today)
    logger.warning("Unknown goal kind %r on goal %s", goal.kind, goal.id)
    return Progress(kind=goal.kind, fraction=0.0, current=0.0, target=0.0, display="")


def latch_completion(goal: GoalDefinition, result: Progress, now: datetime) -> bool:
    """Mark the goal completed the first time its fraction reaches 1.0.

    Returns True only on the transition. A completed goal is never reopened.
    """
    if goal.is_completed:
        return False
    if result.fraction is None or result.fraction < 1.0:
        return False
    goal.is_completed = True
    goal.completion_date = now
    logger.info("Goal %s completed", goal.id)
    return True


def evaluate_goal(habit: Habit, goal: GoalDefinition, today: date, now: datetime) -> tuple[Progress, bool]:
    """``progress`` followed by ``latch_completion``.

    Returns the progress and whether this call completed the goal.
    """
    result = progress(habit, goal, today)
    return result, latch_completion(goal, result, now)


def milestones_crossed(before: float, after: float, target: float) -> list[float]:
    """Milestone fractions with ``before < target * m <= after``, ascending."""
    if target <= 0:
        return []
    return [m for m in MILESTONES if before < target * m <= after]


def record_log(habit: Habit, log: ActivityLog, today: date, now: datetime) -> list[Celebration]:
    """Append ``log`` to the habit and report milestone crossings it caused.

    Target value goals compare the aggregate up to ``today`` before and after
    the log and celebrate the highest milestone crossed, so logs dated after
    today count only once their day arrives. Consistency goals celebrate once,
    when their score first reaches the target. Goals reaching 100% are latched
    as completed.
    """
    tracked = [
        g
        for g in habit.goals
        if g.kind == GoalKind.TARGET_VALUE and not g.is_archived and g.metric_name and (g.target_value or 0) > 0
    ]
    before = {g.id: aggregate_total(habit, g.metric_name or "", today) for g in tracked}

    habit.logs.append(log)

    celebrations: list[Celebration] = []
    for goal in tracked:
        target = goal.target_value or 0.0
        after = aggregate_total(habit, goal.metric_name or "", today)
        crossed = milestones_crossed(before[goal.id], after, target)
        if not crossed:
            continue
        milestone = crossed[-1]
        if milestone == 1.0:
            metric = habit.metric(goal.metric_name or "")
            unit = f" {metric.unit}" if metric is not None and metric.unit else ""
            message = f"You reached your goal of {format_value(target)}{unit} for {habit.name}!"
            latch_completion(goal, progress(habit, goal, today), now)
        else:
            message = f"You are {int(milestone * 100)}% of the way there!"
        celebrations.append(Celebration(goal_id=goal.id, milestone=milestone, message=message))

    for goal in habit.goals:
        if goal.kind != GoalKind.CONSISTENCY or goal.is_archived:
            continue
        if latch_completion(goal, progress(habit, goal, today), now):
            celebrations.append(
                Celebration(goal_id=goal.id, milestone=1.0, message=f"{habit.name} is now fully consistent!")
            )

    if celebrations:
        logger.info("Log on %s for %s crossed %d milestone(s)", log.day, habit.name, len(celebrations))
    return celebrations
