"""Tests for trabit.data.schemas."""

from datetime import date

from trabit.data.schemas import (
    AggregationKind,
    ConsistencyDifficulty,
    FrequencyType,
    GoalKind,
    MetricDefinition,
    infer_aggregation,
    make_goal,
    make_habit,
    make_log,
)

DAY = date(2026, 3, 1)


class TestConsistencyDifficulty:
    def test_tiers(self) -> None:
        assert (ConsistencyDifficulty.EASY.target_occurrences, ConsistencyDifficulty.EASY.penalty) == (14, 2)
        assert (ConsistencyDifficulty.MEDIUM.target_occurrences, ConsistencyDifficulty.MEDIUM.penalty) == (28, 4)
        assert (ConsistencyDifficulty.HARD.target_occurrences, ConsistencyDifficulty.HARD.penalty) == (42, 6)

    def test_values_are_plain_strings(self) -> None:
        assert ConsistencyDifficulty("hard") is ConsistencyDifficulty.HARD


class TestGoalKind:
    def test_raw_values(self) -> None:
        assert GoalKind.TARGET_VALUE == "Reach Value"
        assert GoalKind.DEADLINE == "Deadline"
        assert GoalKind.CONSISTENCY == "Consistency"


class TestInferAggregation:
    def test_weight_is_max(self) -> None:
        assert infer_aggregation("Weight") == AggregationKind.MAX

    def test_mass_is_max_case_insensitive(self) -> None:
        assert infer_aggregation("Body MASS") == AggregationKind.MAX

    def test_other_names_sum(self) -> None:
        assert infer_aggregation("Volume") == AggregationKind.SUM
        assert infer_aggregation("Distance") == AggregationKind.SUM


class TestMetricDefinition:
    def test_aggregation_inferred_at_creation(self) -> None:
        assert MetricDefinition(name="Weight", unit="kg").aggregation == AggregationKind.MAX

    def test_explicit_aggregation_wins(self) -> None:
        metric = MetricDefinition(name="Total Weight Lifted", unit="kg", aggregation=AggregationKind.SUM)
        assert metric.aggregation == AggregationKind.SUM

    def test_rename_keeps_aggregation(self) -> None:
        metric = MetricDefinition(name="Weight", unit="kg")
        metric.name = "Load"
        assert metric.aggregation == AggregationKind.MAX


class TestMakeGoal:
    def test_consistency_defaults_to_medium(self) -> None:
        assert make_goal(GoalKind.CONSISTENCY).difficulty == ConsistencyDifficulty.MEDIUM

    def test_target_value_has_no_difficulty(self) -> None:
        goal = make_goal(GoalKind.TARGET_VALUE, target_value=100, metric_name="Distance")
        assert goal.difficulty is None
        assert goal.is_completed is False
        assert goal.completion_date is None

    def test_display_name_falls_back_to_kind(self) -> None:
        assert make_goal(GoalKind.DEADLINE).display_name == "Deadline"
        assert make_goal(GoalKind.DEADLINE, name="Marathon").display_name == "Marathon"

    def test_ids_are_unique(self) -> None:
        assert make_goal(GoalKind.DEADLINE).id != make_goal(GoalKind.DEADLINE).id


class TestMakeHabit:
    def test_defaults(self) -> None:
        habit = make_habit("Water", DAY)
        assert habit.icon == "star.fill"
        assert habit.color == "007AFF"
        assert habit.frequency == FrequencyType.DAILY
        assert habit.daily_target == 1
        assert habit.is_archived is False
        assert habit.logs == []

    def test_lookups(self) -> None:
        goal = make_goal(GoalKind.DEADLINE)
        habit = make_habit("Run", DAY, metrics=[MetricDefinition("Distance", "km")], goals=[goal])
        habit.logs.append(make_log(DAY, {"Distance": 5}))
        habit.logs.append(make_log(date(2026, 2, 28)))

        assert habit.metric("Distance") is not None
        assert habit.metric("Missing") is None
        assert habit.goal(goal.id) is goal
        assert habit.goal("nope") is None
        assert len(habit.logs_on(DAY)) == 1


class TestMakeLog:
    def test_points_from_mapping(self) -> None:
        log = make_log(DAY, {"Distance": 5, "Time": 30.5})
        assert [(p.metric_name, p.value) for p in log.points] == [("Distance", 5.0), ("Time", 30.5)]
        assert log.day == DAY

    def test_no_values(self) -> None:
        assert make_log(DAY).points == []
