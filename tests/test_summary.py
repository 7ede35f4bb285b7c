"""Tests for trabit.engine.summary."""

from __future__ import annotations

from datetime import date, timedelta

from trabit.data.schemas import FrequencyType, make_habit, make_log
from trabit.engine.summary import daily_summary

TODAY = date(2026, 3, 1)  # Sunday
CREATED = TODAY - timedelta(days=10)


def test_counts_scheduled_active_habits() -> None:
    done = make_habit("Water", CREATED, sort_order=0)
    done.logs.append(make_log(TODAY))
    pending = make_habit("Read", CREATED, sort_order=1)
    archived = make_habit("Old", CREATED, sort_order=2)
    archived.is_archived = True
    monday_only = make_habit("Bench", CREATED, frequency=FrequencyType.WEEKDAYS, frequency_weekdays=[2], sort_order=3)

    summary = daily_summary([monday_only, pending, archived, done], TODAY)

    assert summary.total == 2
    assert summary.completed == 1
    assert summary.next_habit == "Read"
    assert [item.name for item in summary.items] == ["Water", "Read"]
    assert summary.items[0].is_done is True


def test_all_done_has_no_next_habit() -> None:
    habit = make_habit("Water", CREATED)
    habit.logs.append(make_log(TODAY))
    summary = daily_summary([habit], TODAY)
    assert summary.completed == summary.total == 1
    assert summary.next_habit == ""


def test_empty() -> None:
    summary = daily_summary([], TODAY)
    assert (summary.completed, summary.total, summary.next_habit, summary.items) == (0, 0, "", [])
