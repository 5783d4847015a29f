from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ai_orchestrator.models.plan import RunResult
from ai_orchestrator.utils import utc_timestamp

logger = logging.getLogger(__name__)

STATS_FILE = "stats.json"


@dataclass(frozen=True)
class HistoryEntry:
    """A recorded orchestrator run."""

    entry_id: str
    recorded_at: str
    task: str
    result: RunResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "recorded_at": self.recorded_at,
            "task": self.task,
            "result": self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        return cls(
            entry_id=str(data["entry_id"]),
            recorded_at=str(data.get("recorded_at", "")),
            task=str(data.get("task", "")),
            result=RunResult.from_dict(data.get("result") or {}),
        )


def new_entry_id() -> str:
    """Create a sortable, collision-free entry id based on current UTC time."""
    return f"{datetime.now(UTC).strftime('%Y%m%dT%H%M%S%fZ')}-{uuid.uuid4().hex[:8]}"


class RunHistoryStore:
    """Keep the most recent runs as JSON files in ``base_dir``.

    Entries past ``max_items`` are evicted oldest first. A small stats file
    tracks how many successful runs were ever recorded, independent of
    eviction.
    """

    def __init__(self, base_dir: str | Path = ".orchestrator/history", max_items: int = 50) -> None:
        if max_items <= 0:
            msg = "max_items must be greater than zero"
            raise ValueError(msg)
        self.base_dir = Path(base_dir)
        self.max_items = max_items

    def record(self, task: str, result: RunResult) -> HistoryEntry:
        """Persist ``result`` and return the new entry."""
        entry = HistoryEntry(
            entry_id=new_entry_id(),
            recorded_at=utc_timestamp(),
            task=task,
            result=result,
        )
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._entry_path(entry.entry_id).write_text(
            json.dumps(entry.to_dict(), indent=2),
            encoding="utf-8",
        )
        if result.success:
            self._write_stats({"tasks_completed": self.tasks_completed() + 1})
        self._prune()
        logger.debug("Recorded history entry %s", entry.entry_id)
        return entry

    def list_entries(self) -> list[HistoryEntry]:
        """List entries, newest first."""
        if not self.base_dir.exists():
            return []
        entries: list[HistoryEntry] = []
        for path in self.base_dir.glob("*.json"):
            if path.name == STATS_FILE:
                continue
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                entries.append(HistoryEntry.from_dict(data))
            except (OSError, ValueError, KeyError) as exc:
                logger.warning("Skipping unreadable history entry %s: %s", path.name, exc)
        return sorted(entries, key=lambda item: (item.recorded_at, item.entry_id), reverse=True)

    def get(self, entry_id: str) -> HistoryEntry | None:
        path = self._entry_path(entry_id)
        if path.name == STATS_FILE or not path.is_file():
            return None
        try:
            return HistoryEntry.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError) as exc:
            logger.warning("Unreadable history entry %s: %s", path.name, exc)
            return None

    def remove(self, entry_id: str) -> bool:
        """Delete one entry; returns False when it does not exist."""
        path = self._entry_path(entry_id)
        if path.name == STATS_FILE or not path.is_file():
            return False
        path.unlink()
        return True

    def clear(self) -> int:
        """Delete every entry and return how many were removed.

        The completed-task counter is kept.
        """
        removed = 0
        for entry in self.list_entries():
            if self.remove(entry.entry_id):
                removed += 1
        return removed

    def tasks_completed(self) -> int:
        path = self.base_dir / STATS_FILE
        if not path.is_file():
            return 0
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring corrupt %s", path)
            return 0
        return int(data.get("tasks_completed", 0))

    def _write_stats(self, stats: dict[str, int]) -> None:
        (self.base_dir / STATS_FILE).write_text(json.dumps(stats, indent=2), encoding="utf-8")

    def _prune(self) -> None:
        for entry in self.list_entries()[self.max_items :]:
            self.remove(entry.entry_id)
            logger.debug("Evicted history entry %s", entry.entry_id)

    def _entry_path(self, entry_id: str) -> Path:
        # Ids are generated here; reject anything that could escape base_dir
        safe_id = Path(entry_id).name
        return self.base_dir / f"{safe_id}.json"
