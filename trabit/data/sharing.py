"""Shared goal records: the snapshot of a goal that friends' devices render read-only."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_serializer, model_validator

from trabit.data.schemas import GoalDefinition, Habit
from trabit.engine.progress import progress
from trabit.engine.streaks import current_streak

logger = logging.getLogger(__name__)

SHARE_CODE_PREFIX = "TRABIT-"
_SHARE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
_SHARE_CODE_LENGTH = 6


class SharedGoalRecord(BaseModel):
    """Wire format exchanged with peers. Field aliases are the exact JSON keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    owner_record_id: str = Field(alias="ownerRecordID")
    owner_name: str = Field(default="", alias="ownerName")
    owner_code: str = Field(default="", alias="ownerCode")
    habit_name: str = Field(alias="habitName")
    habit_icon: str = Field(default="star.fill", alias="habitIcon")
    habit_color: str = Field(default="007AFF", alias="habitColor")
    goal_kind: str = Field(alias="goalKind")
    goal_name: str = Field(default="", alias="goalName")
    target_value: float | None = Field(default=None, alias="targetValue")
    target_date: datetime | None = Field(default=None, alias="targetDate")
    progress_value: float = Field(default=0.0, alias="progressValue")
    progress_percent: float = Field(default=0.0, alias="progressPercent")
    streak_days: int = Field(default=0, alias="streakDays")
    is_completed: bool = Field(default=False, alias="isCompleted")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC), alias="updatedAt")

    @model_validator(mode="before")
    @classmethod
    def _default_goal_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("goalName") and not data.get("goal_name"):
            habit_name = data.get("habitName", data.get("habit_name", ""))
            return {**data, "goalName": habit_name}
        return data

    @field_serializer("target_date", "updated_at")
    def _iso8601(self, value: datetime | None) -> str | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


_RECORD = TypeAdapter(SharedGoalRecord)
_RECORD_LIST = TypeAdapter(list[SharedGoalRecord])
_RAW_LIST = TypeAdapter(list[Any])


@dataclass
class ShareOwner:
    """Identity of the user publishing goals."""

    record_id: str
    name: str = ""
    code: str = ""


def generate_share_code() -> str:
    """Readable invite code, e.g. ``TRABIT-A1B2C3`` (no 0/O/1/I)."""
    body = "".join(secrets.choice(_SHARE_CODE_ALPHABET) for _ in range(_SHARE_CODE_LENGTH))
    return f"{SHARE_CODE_PREFIX}{body}"


def _as_datetime(day: date | None) -> datetime | None:
    if day is None:
        return None
    return datetime.combine(day, time.min, tzinfo=UTC)


def build_shared_goal(
    habit: Habit,
    goal: GoalDefinition,
    owner: ShareOwner,
    today: date,
    now: datetime,
) -> SharedGoalRecord:
    """Snapshot a goal's progress and the habit's streak for publishing."""
    result = progress(habit, goal, today)
    if result.fraction is not None:
        percent = result.fraction
    else:
        percent = 1.0 if goal.is_completed else 0.0

    return SharedGoalRecord(
        id=f"goal-{owner.record_id}-{goal.id}",
        owner_record_id=owner.record_id,
        owner_name=owner.name,
        owner_code=owner.code,
        habit_name=habit.name,
        habit_icon=habit.icon,
        habit_color=habit.color,
        goal_kind=goal.kind.value,
        goal_name=goal.name or habit.name,
        target_value=goal.target_value,
        target_date=_as_datetime(goal.target_date),
        progress_value=result.current,
        progress_percent=percent,
        streak_days=current_streak(habit, today),
        is_completed=goal.is_completed,
        updated_at=now,
    )


def dump_shared_goals(records: list[SharedGoalRecord]) -> str:
    """Serialize records to the JSON array cached per friend."""
    return _RECORD_LIST.dump_json(records, by_alias=True).decode("utf-8")


def load_shared_goals(text: str) -> list[SharedGoalRecord]:
    """Parse a cached JSON array.

    Records that fail validation are skipped; malformed text yields an empty list.
    """
    try:
        items = _RAW_LIST.validate_json(text)
    except ValidationError as exc:
        logger.warning("Discarding unreadable shared goal cache: %s", exc.error_count())
        return []

    records: list[SharedGoalRecord] = []
    for index, item in enumerate(items):
        try:
            records.append(_RECORD.validate_python(item))
        except ValidationError as exc:
            logger.warning("Skipping shared goal record %d: %d error(s)", index, exc.error_count())
    return records
