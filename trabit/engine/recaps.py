"""Weekly to yearly reviews: completion rate, longest streak and metric totals per habit."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import StrEnum

from trabit.data.schemas import Habit
from trabit.engine.streaks import longest_streak


class RecapPeriod(StrEnum):
    """Review period length."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    HALF_YEAR = "half_year"
    YEAR = "year"


_MONTHS_PER_PERIOD: dict[str, int] = {
    RecapPeriod.MONTH: 1,
    RecapPeriod.QUARTER: 3,
    RecapPeriod.HALF_YEAR: 6,
}

# (minimum rate, message), checked top-down
_MESSAGES: tuple[tuple[float, str], ...] = (
    (0.9, "Outstanding. You crushed it this period."),
    (0.75, "Strong period. Keep the momentum going."),
    (0.5, "Good effort. Push a little harder next time."),
    (0.25, "A quiet period. Every comeback starts with one good day."),
)
_FALLBACK_MESSAGE = "New period, fresh start. You've got this."


@dataclass
class HabitStat:
    """One habit's numbers for a review period."""

    habit_id: str
    habit_name: str
    completion_rate: float
    total_logs: int
    longest_streak: int
    best_day: date | None
    metric_totals: dict[str, float] = field(default_factory=dict)


@dataclass
class Recap:
    """A full review across habits."""

    period: RecapPeriod
    start: date
    end: date
    title: str
    stats: list[HabitStat]
    overall_completion_rate: float
    total_logs: int
    message: str

    @property
    def mvp(self) -> HabitStat | None:
        """Habit with the best completion rate."""
        return self.stats[0] if self.stats else None


def _add_months(first_of_month: date, months: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _last_day(first_of_month: date, months: int) -> date:
    last_month = _add_months(first_of_month, months - 1)
    return last_month.replace(day=calendar.monthrange(last_month.year, last_month.month)[1])


def period_range(period: RecapPeriod, today: date, offset: int = 0) -> tuple[date, date]:
    """Start and end of a review period; the end never lies after today.

    ``offset=0`` is the most recently completed week, month, quarter or half
    year, and the current calendar year. Negative offsets go further back.
    """
    if period == RecapPeriod.WEEK:
        this_monday = today - timedelta(days=today.weekday())
        start = this_monday + timedelta(weeks=offset - 1)
        return start, min(start + timedelta(days=6), today)

    if period == RecapPeriod.YEAR:
        year = today.year + offset
        return date(year, 1, 1), min(date(year, 12, 31), today)

    months = _MONTHS_PER_PERIOD[period]
    current_index = (today.month - 1) // months * months + 1
    current_start = date(today.year, current_index, 1)
    start = _add_months(current_start, months * (offset - 1))
    return start, min(_last_day(start, months), today)


def period_title(period: RecapPeriod, start: date, end: date) -> str:
    """Display title such as ``Week of Feb 16``, ``Q4 2025`` or ``2026``."""
    if period == RecapPeriod.WEEK:
        return f"Week of {start:%b} {start.day}"
    if period == RecapPeriod.MONTH:
        return f"{start:%B %Y}"
    if period == RecapPeriod.QUARTER:
        return f"Q{(start.month - 1) // 3 + 1} {start.year}"
    if period == RecapPeriod.HALF_YEAR:
        return f"{start:%b}–{end:%b} {start.year}"
    return str(start.year)


def motivational_message(rate: float) -> str:
    """Encouragement matching the overall completion rate."""
    for threshold, message in _MESSAGES:
        if rate >= threshold:
            return message
    return _FALLBACK_MESSAGE


def habit_stats(habit: Habit, start: date, end: date) -> HabitStat:
    """Completion rate, streak, best day and metric totals for [start, end].

    Metric totals sum every logged value, also for max-aggregated metrics.
    """
    span = max(1, (end - start).days + 1)
    logs = [log for log in habit.logs if start <= log.day <= end]
    logged_days = sorted({log.day for log in logs})

    counts = {d: 0 for d in logged_days}
    for log in logs:
        counts[log.day] += 1
    best_day = max(logged_days, key=lambda d: counts[d]) if logged_days else None

    totals: dict[str, float] = {}
    for log in logs:
        for point in log.points:
            totals[point.metric_name] = totals.get(point.metric_name, 0.0) + point.value

    return HabitStat(
        habit_id=habit.id,
        habit_name=habit.name,
        completion_rate=min(len(logged_days) / span, 1.0),
        total_logs=len(logged_days),
        longest_streak=longest_streak(habit, start, end),
        best_day=best_day,
        metric_totals=totals,
    )


def build_recap(habits: list[Habit], period: RecapPeriod, today: date, offset: int = 0) -> Recap:
    """Review every habit over one period, best completion rate first."""
    start, end = period_range(period, today, offset)
    stats = sorted((habit_stats(h, start, end) for h in habits), key=lambda s: s.completion_rate, reverse=True)
    overall = sum(s.completion_rate for s in stats) / len(stats) if stats else 0.0
    return Recap(
        period=period,
        start=start,
        end=end,
        title=period_title(period, start, end),
        stats=stats,
        overall_completion_rate=overall,
        total_logs=sum(s.total_logs for s in stats),
        message=motivational_message(overall),
    )
