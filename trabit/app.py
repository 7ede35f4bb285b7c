"""FastAPI entrypoint exposing habit goals, streaks and shared goal snapshots."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from trabit.core.config import settings
from trabit.data.schemas import (
    AggregationKind,
    ConsistencyDifficulty,
    FrequencyType,
    GoalDefinition,
    GoalKind,
    Habit,
    MetricDefinition,
    make_goal,
    make_habit,
    make_log,
)
from trabit.data.sharing import SharedGoalRecord, ShareOwner, build_shared_goal
from trabit.data.store import (
    append_log,
    archive_habit,
    delete_habit,
    list_habits,
    load_habit,
    remove_log,
    save_habit,
)
from trabit.engine.completion import heatmap
from trabit.engine.progress import Celebration, Progress, evaluate_goal
from trabit.engine.recaps import Recap, RecapPeriod, build_recap
from trabit.engine.scoring import consistency_percent_series
from trabit.engine.streaks import current_streak
from trabit.engine.summary import DailySummary, daily_summary

logger = logging.getLogger(__name__)


def _today() -> date:
    """Calendar day in the configured timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).date()


def _now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and check that the lake can be read and written."""
    logging.basicConfig(level=settings.log_level)
    if not settings.age_recipient or not settings.age_identity:
        logger.warning("TRABIT_AGE_RECIPIENT/TRABIT_AGE_IDENTITY not set, habit store unavailable")
    if not settings.api_key:
        logger.warning("TRABIT_API_KEY not set, all authenticated routes will reject requests")
    logger.info("Habit lake at %s", settings.data_lake_path)
    yield


app = FastAPI(title="Trabit", version="0.1.0", lifespan=lifespan)

_bearer_scheme = HTTPBearer()


async def _verify_api_key(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),  # noqa: B008
) -> str:
    """Validate the Bearer token against the configured api_key."""
    if not settings.api_key or credentials.credentials != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
    return credentials.credentials


router = APIRouter(dependencies=[Depends(_verify_api_key)])


class HealthResponse(BaseModel):
    """Response for the /health endpoint."""

    status: str


class MetricIn(BaseModel):
    name: str
    unit: str = ""
    aggregation: AggregationKind | None = None
    is_visible: bool = True


class GoalIn(BaseModel):
    kind: GoalKind
    name: str | None = None
    target_value: float | None = None
    target_date: date | None = None
    difficulty: ConsistencyDifficulty | None = None
    metric_name: str | None = None


class HabitCreate(BaseModel):
    """Body for creating a habit."""

    name: str
    icon: str = "star.fill"
    color: str = "007AFF"
    created_date: date | None = None
    frequency: FrequencyType = FrequencyType.DAILY
    frequency_interval: int | None = None
    frequency_weekdays: list[int] | None = None
    sort_order: int = 0
    metrics: list[MetricIn] = Field(default_factory=list)
    goals: list[GoalIn] = Field(default_factory=list)


class LogCreate(BaseModel):
    """Body for logging a habit. ``day`` defaults to today."""

    day: date | None = None
    values: dict[str, float] = Field(default_factory=dict)


class LogResponse(BaseModel):
    log_id: str
    celebrations: list[Celebration]


class StreakResponse(BaseModel):
    habit_id: str
    streak_days: int


class HeatmapDay(BaseModel):
    day: date
    met: bool


class TrendPoint(BaseModel):
    day: date
    percent: float


async def _get_habit(habit_id: str) -> Habit:
    try:
        habit = await load_habit(habit_id, settings)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit


def _get_goal(habit: Habit, goal_id: str) -> GoalDefinition:
    goal = habit.goal(goal_id)
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")


@router.get("/habits", response_model=list[Habit])
async def get_habits(include_archived: bool = False) -> list[Habit]:
    """List habits ordered by sort order, archived ones on request."""
    return await list_habits(include_archived=include_archived, config=settings)


@router.post("/habits", response_model=Habit, status_code=201)
async def create_habit(body: HabitCreate) -> Habit:
    """Create a habit with its metrics and goals."""
    habit = make_habit(
        name=body.name,
        created_date=body.created_date or _today(),
        icon=body.icon,
        color=body.color,
        frequency=body.frequency,
        frequency_interval=body.frequency_interval,
        frequency_weekdays=body.frequency_weekdays,
        sort_order=body.sort_order,
        metrics=[
            MetricDefinition(name=m.name, unit=m.unit, aggregation=m.aggregation, is_visible=m.is_visible)
            for m in body.metrics
        ],
        goals=[
            make_goal(
                g.kind,
                name=g.name,
                target_value=g.target_value,
                target_date=g.target_date,
                difficulty=g.difficulty,
                metric_name=g.metric_name,
            )
            for g in body.goals
        ],
    )
    await save_habit(habit, settings)
    return habit


@router.get("/habits/{habit_id}", response_model=Habit)
async def get_habit(habit_id: str) -> Habit:
    """Fetch one habit with its logs and goals."""
    return await _get_habit(habit_id)


@router.delete("/habits/{habit_id}", status_code=204)
async def remove_habit(habit_id: str) -> None:
    """Delete a habit together with its logs and goals."""
    await _get_habit(habit_id)
    await delete_habit(habit_id, settings)


@router.post("/habits/{habit_id}/archive", response_model=Habit)
async def archive(habit_id: str, archived: bool = True) -> Habit:
    """Archive or restore a habit."""
    await _get_habit(habit_id)
    habit = await archive_habit(habit_id, archived=archived, config=settings)
    if habit is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit


@router.post("/habits/{habit_id}/logs", response_model=LogResponse, status_code=201)
async def log_habit(habit_id: str, body: LogCreate) -> LogResponse:
    """Log a habit and return any milestone celebrations the log triggered."""
    await _get_habit(habit_id)
    today = _today()
    now = _now()
    log = make_log(body.day or today, body.values, logged_at=now)
    celebrations = await append_log(habit_id, log, today, now, settings)
    if celebrations is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    return LogResponse(log_id=log.id, celebrations=celebrations)


@router.delete("/habits/{habit_id}/logs/{log_id}", status_code=204)
async def delete_log(habit_id: str, log_id: str) -> None:
    """Delete one log. Completed goals stay completed."""
    await _get_habit(habit_id)
    if not await remove_log(habit_id, log_id, settings):
        raise HTTPException(status_code=404, detail="Log not found")


@router.get("/habits/{habit_id}/streak", response_model=StreakResponse)
async def get_streak(habit_id: str) -> StreakResponse:
    """Consecutive logged days ending today."""
    habit = await _get_habit(habit_id)
    return StreakResponse(habit_id=habit.id, streak_days=current_streak(habit, _today()))


@router.get("/habits/{habit_id}/heatmap", response_model=list[HeatmapDay])
async def get_heatmap(habit_id: str, days: int | None = Query(default=None, ge=1, le=366)) -> list[HeatmapDay]:
    """Met/unmet days, gated by the habit's first consistency goal if it has one."""
    habit = await _get_habit(habit_id)
    goal = next((g for g in habit.goals if g.kind == GoalKind.CONSISTENCY), None)
    cells = heatmap(habit, _today(), days or settings.heatmap_days, goal)
    return [HeatmapDay(day=d, met=met) for d, met in cells]


@router.get("/habits/{habit_id}/goals/{goal_id}/progress", response_model=Progress)
async def get_progress(habit_id: str, goal_id: str) -> Progress:
    """Current progress. Reaching 100% for the first time marks the goal completed."""
    habit = await _get_habit(habit_id)
    goal = _get_goal(habit, goal_id)
    result, completed = evaluate_goal(habit, goal, _today(), _now())
    if completed:
        await save_habit(habit, settings)
    return result


@router.get("/habits/{habit_id}/goals/{goal_id}/trend", response_model=list[TrendPoint])
async def get_trend(
    habit_id: str,
    goal_id: str,
    days: int | None = Query(default=None, ge=1, le=366),
) -> list[TrendPoint]:
    """Consistency score over the last days as a percent of the target."""
    habit = await _get_habit(habit_id)
    goal = _get_goal(habit, goal_id)
    if goal.kind != GoalKind.CONSISTENCY:
        raise HTTPException(status_code=400, detail="Trend is only available for consistency goals")
    series = consistency_percent_series(habit, goal, _today(), days or settings.trend_days)
    return [TrendPoint(day=d, percent=p) for d, p in series]


@router.get("/habits/{habit_id}/goals/{goal_id}/share")
async def share_goal(habit_id: str, goal_id: str) -> dict[str, object]:
    """Shared goal record in its wire format (camelCase keys)."""
    habit = await _get_habit(habit_id)
    goal = _get_goal(habit, goal_id)
    owner = ShareOwner(record_id=settings.owner_record_id, name=settings.owner_name, code=settings.owner_code)
    record: SharedGoalRecord = build_shared_goal(habit, goal, owner, _today(), _now())
    return record.model_dump(mode="json", by_alias=True)


@router.get("/recaps/{period}", response_model=Recap)
async def get_recap(period: RecapPeriod, offset: int = Query(default=0, le=0)) -> Recap:
    """Review of a completed period; negative offsets go further back."""
    habits = await list_habits(config=settings)
    return build_recap(habits, period, _today(), offset)


@router.get("/summary/today", response_model=DailySummary)
async def get_summary() -> DailySummary:
    """How many of today's scheduled habits are done."""
    habits = await list_habits(config=settings)
    return daily_summary(habits, _today())


app.include_router(router)
