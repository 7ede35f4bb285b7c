"""Today's at-a-glance progress across active habits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from trabit.data.schemas import Habit
from trabit.engine.completion import is_day_met, is_scheduled


@dataclass
class SummaryItem:
    habit_id: str
    name: str
    icon: str
    color: str
    is_done: bool


@dataclass
class DailySummary:
    """How many of today's scheduled habits are done, and what is next."""

    completed: int
    total: int
    next_habit: str
    items: list[SummaryItem] = field(default_factory=list)


def daily_summary(habits: list[Habit], today: date) -> DailySummary:
    """Progress over active habits scheduled for ``today``, in sort order."""
    active = sorted((h for h in habits if not h.is_archived), key=lambda h: h.sort_order)
    items = [
        SummaryItem(habit_id=h.id, name=h.name, icon=h.icon, color=h.color, is_done=is_day_met(h, today))
        for h in active
        if is_scheduled(h, today)
    ]
    pending = [item.name for item in items if not item.is_done]
    return DailySummary(
        completed=sum(1 for item in items if item.is_done),
        total=len(items),
        next_habit=pending[0] if pending else "",
        items=items,
    )
