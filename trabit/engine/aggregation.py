"""Reduce a habit's log points for one metric to a single scalar."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from trabit.data.schemas import ActivityLog, AggregationKind, Habit, infer_aggregation


def aggregation_for(habit: Habit, metric_name: str) -> AggregationKind:
    """Return the metric's aggregation tag, falling back to the name heuristic.

    The fallback only applies to names without a definition (orphaned points
    of a deleted metric, or a goal referencing an undefined metric).
    """
    metric = habit.metric(metric_name)
    if metric is not None and metric.aggregation is not None:
        return metric.aggregation
    return infer_aggregation(metric_name)


def _reduce(logs: Iterable[ActivityLog], metric_name: str, kind: AggregationKind) -> float:
    values = [p.value for log in logs for p in log.points if p.metric_name == metric_name]
    if not values:
        return 0.0
    if kind == AggregationKind.MAX:
        return float(max(values))
    return float(sum(values))


def aggregate(habit: Habit, metric_name: str, day: date) -> float:
    """Aggregate ``metric_name`` over every log on ``day``. 0 when nothing matches."""
    return _reduce(habit.logs_on(day), metric_name, aggregation_for(habit, metric_name))


def aggregate_total(habit: Habit, metric_name: str, upto: date) -> float:
    """Aggregate ``metric_name`` over every log up to and including ``upto``."""
    logs = (log for log in habit.logs if log.day <= upto)
    return _reduce(logs, metric_name, aggregation_for(habit, metric_name))


def daily_values(habit: Habit, metric_name: str) -> list[tuple[date, float]]:
    """Per-day aggregates for days that carry the metric, oldest first."""
    kind = aggregation_for(habit, metric_name)
    days = sorted({log.day for log in habit.logs if any(p.metric_name == metric_name for p in log.points)})
    return [(d, _reduce(habit.logs_on(d), metric_name, kind)) for d in days]

