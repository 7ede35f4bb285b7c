"""Append-only JSON-lines audit trail of habit store mutations."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

AUDIT_FILE = "habits.jsonl"


def audit_path(audit_dir: Path) -> Path:
    return audit_dir / AUDIT_FILE


def record_action(audit_dir: Path, action: str, habit_id: str, **details: Any) -> None:
    """Append one ``{timestamp, action, habit_id, ...details}`` line."""
    path = audit_path(audit_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    entry = {"timestamp": datetime.now(UTC).isoformat(), "action": action, "habit_id": habit_id, **details}
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry, default=str) + "\n")
