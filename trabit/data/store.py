"""Habit store: one age-encrypted JSON document per habit in the lake."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path

from pydantic import TypeAdapter

from trabit.core.config import Settings, settings
from trabit.data.audit import record_action
from trabit.data.encryption import seal, unseal
from trabit.data.schemas import ActivityLog, Habit
from trabit.engine.progress import Celebration, record_log

logger = logging.getLogger(__name__)

HABITS_DIR = "habits"

_HABIT = TypeAdapter(Habit)
_SAFE_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


def encode_habit(habit: Habit) -> bytes:
    return _HABIT.dump_json(habit)


def decode_habit(data: bytes) -> Habit:
    return _HABIT.validate_json(data)


def _habit_path(habit_id: str, config: Settings) -> Path:
    # Security: the id becomes a file name, reject anything that could traverse
    if not _SAFE_ID_RE.match(habit_id):
        msg = f"Invalid habit id: {habit_id!r}"
        raise ValueError(msg)
    return config.data_lake_path / HABITS_DIR / f"{habit_id}.age"


def _write(habit: Habit, config: Settings) -> None:
    path = _habit_path(habit.id, config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(seal(encode_habit(habit), config.age_recipient))


async def save_habit(habit: Habit, config: Settings | None = None) -> None:
    """Create or overwrite a habit document."""
    cfg = config or settings
    _write(habit, cfg)
    record_action(cfg.data_audit_path, "save", habit.id, name=habit.name)
    logger.info("Saved habit %s (%s)", habit.id, habit.name)


async def load_habit(habit_id: str, config: Settings | None = None) -> Habit | None:
    """Load a consistent snapshot of one habit, or None if it does not exist."""
    cfg = config or settings
    path = _habit_path(habit_id, cfg)
    if not path.exists():
        return None
    return decode_habit(unseal(path.read_bytes(), cfg.age_identity))


async def list_habits(include_archived: bool = False, config: Settings | None = None) -> list[Habit]:
    """All readable habits ordered by ``sort_order``. Unreadable documents are skipped."""
    cfg = config or settings
    habits_dir = cfg.data_lake_path / HABITS_DIR
    if not habits_dir.exists():
        return []

    habits: list[Habit] = []
    for age_file in sorted(habits_dir.glob("*.age")):
        try:
            habit = decode_habit(unseal(age_file.read_bytes(), cfg.age_identity))
        except Exception as exc:
            logger.error("Failed to read %s: %s", age_file, exc)
            continue
        if habit.is_archived and not include_archived:
            continue
        habits.append(habit)
    return sorted(habits, key=lambda h: h.sort_order)


async def archive_habit(habit_id: str, archived: bool = True, config: Settings | None = None) -> Habit | None:
    """Soft-delete (or restore) a habit. Returns None if it does not exist."""
    cfg = config or settings
    habit = await load_habit(habit_id, cfg)
    if habit is None:
        return None
    habit.is_archived = archived
    _write(habit, cfg)
    record_action(cfg.data_audit_path, "archive" if archived else "unarchive", habit_id)
    return habit


async def delete_habit(habit_id: str, config: Settings | None = None) -> bool:
    """Hard-delete a habit together with its metrics, logs and goals."""
    cfg = config or settings
    path = _habit_path(habit_id, cfg)
    if not path.exists():
        return False
    path.unlink()
    record_action(cfg.data_audit_path, "delete", habit_id)
    logger.info("Deleted habit %s", habit_id)
    return True


async def append_log(
    habit_id: str,
    log: ActivityLog,
    today: date,
    now: datetime,
    config: Settings | None = None,
) -> list[Celebration] | None:
    """Add a log to a stored habit and persist any goal completions it caused.

    ``today`` is the caller's local calendar day; milestones only count logs
    up to it. Returns the celebrations to show, or None if the habit does not
    exist.
    """
    cfg = config or settings
    habit = await load_habit(habit_id, cfg)
    if habit is None:
        return None
    celebrations = record_log(habit, log, today, now)
    _write(habit, cfg)
    record_action(
        cfg.data_audit_path,
        "log",
        habit_id,
        day=log.day.isoformat(),
        points=len(log.points),
        milestones=[c.milestone for c in celebrations],
    )
    return celebrations


async def remove_log(habit_id: str, log_id: str, config: Settings | None = None) -> bool:
    """Delete one log. Completed goals stay completed. False if nothing matched."""
    cfg = config or settings
    habit = await load_habit(habit_id, cfg)
    if habit is None:
        return False
    remaining = [log for log in habit.logs if log.id != log_id]
    if len(remaining) == len(habit.logs):
        return False
    habit.logs = remaining
    _write(habit, cfg)
    record_action(cfg.data_audit_path, "remove_log", habit_id, log_id=log_id)
    return True
