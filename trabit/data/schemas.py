"""Habit, metric, log and goal schemas."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum


def _new_id() -> str:
    return uuid.uuid4().hex


class FrequencyType(StrEnum):
    """How often a habit is expected to be performed."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    INTERVAL = "Every X Days"
    WEEKDAYS = "Specific Days"


class GoalKind(StrEnum):
    """Goal variant. Values are the strings carried by shared goal records."""

    TARGET_VALUE = "Reach Value"
    DEADLINE = "Deadline"
    CONSISTENCY = "Consistency"


class ConsistencyDifficulty(StrEnum):
    """Difficulty tier of a consistency goal."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def target_occurrences(self) -> int:
        return _DIFFICULTY_TIERS[self][0]

    @property
    def penalty(self) -> int:
        return _DIFFICULTY_TIERS[self][1]


# difficulty -> (target occurrences, penalty per missed day)
_DIFFICULTY_TIERS: dict[str, tuple[int, int]] = {
    ConsistencyDifficulty.EASY: (14, 2),
    ConsistencyDifficulty.MEDIUM: (28, 4),
    ConsistencyDifficulty.HARD: (42, 6),
}


class AggregationKind(StrEnum):
    """How several values of one metric on the same day reduce to a scalar."""

    SUM = "sum"  # cumulative: distance, volume, reps
    MAX = "max"  # high-water mark: weight, mass


_HIGH_WATER_HINTS = ("weight", "mass")


def infer_aggregation(metric_name: str) -> AggregationKind:
    """Guess the aggregation from a metric name (weight/mass -> max, else sum)."""
    lowered = metric_name.lower()
    if any(hint in lowered for hint in _HIGH_WATER_HINTS):
        return AggregationKind.MAX
    return AggregationKind.SUM


@dataclass
class LogPoint:
    """A single (metric name, value) pair inside an activity log."""

    metric_name: str
    value: float


@dataclass
class ActivityLog:
    """One logging action, stamped with the calendar day it counts for."""

    day: date
    points: list[LogPoint] = field(default_factory=list)
    logged_at: datetime | None = None
    id: str = field(default_factory=_new_id)


@dataclass
class MetricDefinition:
    """A named, unit-labelled numeric dimension of a habit.

    ``aggregation`` is fixed when the metric is created. Leaving it unset
    infers it from the name once, so renaming a metric later never changes
    how its history is aggregated.
    """

    name: str
    unit: str = ""
    aggregation: AggregationKind | None = None
    is_visible: bool = True

    def __post_init__(self) -> None:
        if self.aggregation is None:
            self.aggregation = infer_aggregation(self.name)


@dataclass
class GoalDefinition:
    """Target condition attached to a habit.

    Which fields matter depends on ``kind``: target value goals use
    ``metric_name`` + ``target_value``, deadline goals use ``target_date``,
    consistency goals use ``difficulty`` and optionally ``metric_name`` +
    ``target_value`` as a daily minimum.
    """

    kind: GoalKind
    name: str | None = None
    target_value: float | None = None
    target_date: date | None = None
    difficulty: ConsistencyDifficulty | None = None
    metric_name: str | None = None
    is_archived: bool = False
    is_completed: bool = False
    completion_date: datetime | None = None
    id: str = field(default_factory=_new_id)

    @property
    def display_name(self) -> str:
        return self.name or self.kind.value


@dataclass
class Habit:
    """A user-defined recurring activity with its metrics, logs and goals."""

    name: str
    icon: str
    color: str
    created_date: date
    frequency: FrequencyType = FrequencyType.DAILY
    frequency_interval: int | None = None
    frequency_weekdays: list[int] | None = None  # 1=Sunday ... 7=Saturday
    daily_target: int = 1
    sort_order: int = 0
    is_archived: bool = False
    metrics: list[MetricDefinition] = field(default_factory=list)
    logs: list[ActivityLog] = field(default_factory=list)
    goals: list[GoalDefinition] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    def metric(self, name: str) -> MetricDefinition | None:
        for m in self.metrics:
            if m.name == name:
                return m
        return None

    def goal(self, goal_id: str) -> GoalDefinition | None:
        for g in self.goals:
            if g.id == goal_id:
                return g
        return None

    def logs_on(self, day: date) -> list[ActivityLog]:
        return [log for log in self.logs if log.day == day]


def make_habit(
    name: str,
    created_date: date,
    icon: str = "star.fill",
    color: str = "007AFF",
    frequency: FrequencyType = FrequencyType.DAILY,
    frequency_interval: int | None = None,
    frequency_weekdays: list[int] | None = None,
    metrics: list[MetricDefinition] | None = None,
    goals: list[GoalDefinition] | None = None,
    sort_order: int = 0,
) -> Habit:
    """Create a habit with the default icon and colour."""
    return Habit(
        name=name,
        icon=icon,
        color=color,
        created_date=created_date,
        frequency=frequency,
        frequency_interval=frequency_interval,
        frequency_weekdays=frequency_weekdays,
        metrics=list(metrics or []),
        goals=list(goals or []),
        sort_order=sort_order,
    )


def make_goal(
    kind: GoalKind,
    name: str | None = None,
    target_value: float | None = None,
    target_date: date | None = None,
    difficulty: ConsistencyDifficulty | None = None,
    metric_name: str | None = None,
) -> GoalDefinition:
    """Create a goal; consistency goals default to medium difficulty."""
    if kind == GoalKind.CONSISTENCY and difficulty is None:
        difficulty = ConsistencyDifficulty.MEDIUM
    return GoalDefinition(
        kind=kind,
        name=name,
        target_value=target_value,
        target_date=target_date,
        difficulty=difficulty,
        metric_name=metric_name,
    )


def make_log(
    day: date,
    values: dict[str, float] | None = None,
    logged_at: datetime | None = None,
) -> ActivityLog:
    """Create an activity log from a ``{metric name: value}`` mapping."""
    points = [LogPoint(metric_name=name, value=float(v)) for name, v in (values or {}).items()]
    return ActivityLog(day=day, points=points, logged_at=logged_at)
