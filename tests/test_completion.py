"""Tests for trabit.engine.completion — day predicate, heatmap and frequency policy."""

from __future__ import annotations

from datetime import date, timedelta

from trabit.data.schemas import (
    FrequencyType,
    GoalKind,
    Habit,
    MetricDefinition,
    make_goal,
    make_habit,
    make_log,
)
from trabit.engine.completion import heatmap, is_day_met, is_scheduled

TODAY = date(2026, 3, 1)  # Sunday


def _habit() -> Habit:
    return make_habit("Water", TODAY - timedelta(days=30), metrics=[MetricDefinition("Volume", "L")])


class TestIsDayMetWithoutGoal:
    def test_no_logs_not_met(self) -> None:
        assert is_day_met(_habit(), TODAY) is False

    def test_any_log_met_regardless_of_values(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY, {"Volume": 0}))
        assert is_day_met(habit, TODAY) is True

    def test_log_without_points_met(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY))
        assert is_day_met(habit, TODAY) is True

    def test_log_on_other_day_does_not_count(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY - timedelta(days=1)))
        assert is_day_met(habit, TODAY) is False


class TestIsDayMetWithGoal:
    def test_non_consistency_goal_uses_any_log(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY, {"Volume": 0.1}))
        goal = make_goal(GoalKind.TARGET_VALUE, target_value=100, metric_name="Volume")
        assert is_day_met(habit, TODAY, goal) is True

    def test_threshold_reached(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY, {"Volume": 1.0}))
        habit.logs.append(make_log(TODAY, {"Volume": 1.0}))
        goal = make_goal(GoalKind.CONSISTENCY, target_value=2.0, metric_name="Volume")
        assert is_day_met(habit, TODAY, goal) is True

    def test_threshold_not_reached(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY, {"Volume": 1.5}))
        goal = make_goal(GoalKind.CONSISTENCY, target_value=2.0, metric_name="Volume")
        assert is_day_met(habit, TODAY, goal) is False

    def test_threshold_requires_a_log_even_when_zero(self) -> None:
        goal = make_goal(GoalKind.CONSISTENCY, target_value=0.0, metric_name="Volume")
        assert is_day_met(_habit(), TODAY, goal) is False

    def test_consistency_without_threshold_uses_any_log(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY))
        assert is_day_met(habit, TODAY, make_goal(GoalKind.CONSISTENCY)) is True
        assert is_day_met(habit, TODAY, make_goal(GoalKind.CONSISTENCY, metric_name="Volume")) is True


class TestHeatmap:
    def test_window_oldest_first(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY))
        habit.logs.append(make_log(TODAY - timedelta(days=2)))
        cells = heatmap(habit, TODAY, days=3)
        assert cells == [
            (TODAY - timedelta(days=2), True),
            (TODAY - timedelta(days=1), False),
            (TODAY, True),
        ]

    def test_default_window_is_30_days(self) -> None:
        cells = heatmap(_habit(), TODAY)
        assert len(cells) == 30
        assert cells[-1][0] == TODAY

    def test_goal_gates_cells(self) -> None:
        habit = _habit()
        habit.logs.append(make_log(TODAY, {"Volume": 0.5}))
        goal = make_goal(GoalKind.CONSISTENCY, target_value=2.0, metric_name="Volume")
        assert heatmap(habit, TODAY, days=1, goal=goal) == [(TODAY, False)]


class TestIsScheduled:
    def test_daily(self) -> None:
        assert is_scheduled(_habit(), TODAY) is True

    def test_not_before_creation(self) -> None:
        habit = make_habit("New", TODAY)
        assert is_scheduled(habit, TODAY - timedelta(days=1)) is False

    def test_specific_weekdays_sunday_is_one(self) -> None:
        habit = make_habit(
            "Bench", TODAY - timedelta(days=30), frequency=FrequencyType.WEEKDAYS, frequency_weekdays=[1, 4]
        )
        assert is_scheduled(habit, TODAY) is True  # Sunday
        assert is_scheduled(habit, TODAY + timedelta(days=3)) is True  # Wednesday
        assert is_scheduled(habit, TODAY + timedelta(days=1)) is False  # Monday

    def test_interval_counts_from_creation(self) -> None:
        created = TODAY - timedelta(days=6)
        habit = make_habit("Run", created, frequency=FrequencyType.INTERVAL, frequency_interval=3)
        assert is_scheduled(habit, created) is True
        assert is_scheduled(habit, created + timedelta(days=1)) is False
        assert is_scheduled(habit, TODAY) is True

    def test_weekly_due_until_logged_this_week(self) -> None:
        habit = make_habit("Clean", date(2026, 2, 1), frequency=FrequencyType.WEEKLY)
        habit.logs.append(make_log(date(2026, 2, 24)))  # Tuesday
        assert is_scheduled(habit, date(2026, 2, 24)) is True
        assert is_scheduled(habit, date(2026, 2, 26)) is False
        assert is_scheduled(habit, date(2026, 3, 2)) is True  # next Monday

    def test_monthly_due_until_logged_this_month(self) -> None:
        habit = make_habit("Budget", date(2026, 1, 1), frequency=FrequencyType.MONTHLY)
        habit.logs.append(make_log(date(2026, 2, 3)))
        assert is_scheduled(habit, date(2026, 2, 10)) is False
        assert is_scheduled(habit, TODAY) is True
