# src/tickoff/checklists/checklist_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any


class ChecklistPhase(StrEnum):
    """
    Where a checklist sits in the reset lifecycle.

    PENDING_COMPUTATION is the short window between a reset (or a fresh start)
    and the next engine tick, which fills in `next_reset`.
    """

    NO_SCHEDULE = "no_schedule"
    PENDING_COMPUTATION = "pending_computation"
    AWAITING_RESET = "awaiting_reset"
    OVERDUE = "overdue"


def parse_instant(raw: str | None) -> datetime | None:
    """Decode an ISO-8601 timestamp from a record (naive values are taken as UTC)."""
    if raw is None:
        return None
    value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_instant(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def format_remaining(delta: timedelta) -> str:
    """Render a duration as H:MM:SS (hours unbounded, negative clamped to zero)."""
    total = max(0, int(delta.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


@dataclass(slots=True)
class Checklist:
    name: str
    tasks: dict[str, bool] = field(default_factory=dict)
    schedule: str | None = None
    next_reset: datetime | None = None

    @classmethod
    def fresh(cls, name: str, labels: list[str], schedule: str | None = None) -> Checklist:
        """New checklist from configuration: every task unchecked, reset not yet computed."""
        return cls(name=name, tasks={label: False for label in labels}, schedule=schedule)

    # ---- lifecycle ----

    def phase(self, now: datetime) -> ChecklistPhase:
        if self.schedule is None:
            return ChecklistPhase.NO_SCHEDULE
        if self.next_reset is None:
            return ChecklistPhase.PENDING_COMPUTATION
        if now >= self.next_reset:
            return ChecklistPhase.OVERDUE
        return ChecklistPhase.AWAITING_RESET

    def reset(self) -> None:
        """Uncheck every task and consume the cached reset instant."""
        for label in self.tasks:
            self.tasks[label] = False
        self.next_reset = None

    # ---- presentation helpers ----

    def time_remaining(self, now: datetime) -> timedelta | None:
        if self.next_reset is None:
            return None
        return max(timedelta(0), self.next_reset - now)

    @property
    def completed_count(self) -> int:
        return sum(1 for done in self.tasks.values() if done)

    @property
    def is_complete(self) -> bool:
        return bool(self.tasks) and all(self.tasks.values())

    # ---- record codec ----

    def to_record(self) -> dict[str, Any]:
        """Durable representation. The schedule itself is not stored."""
        return {
            "name": self.name,
            "next_reset": format_instant(self.next_reset),
            "tasks": dict(self.tasks),
        }

    @classmethod
    def from_record(cls, data: Any, *, schedule: str | None = None) -> Checklist:
        """
        Rebuild a checklist from a decoded record.

        Raises ValueError/TypeError on malformed input; the store turns those into
        PersistenceLoadError with the file path attached.
        """
        if not isinstance(data, dict):
            raise TypeError("record must be a JSON object")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("record has no name")

        raw_tasks = data.get("tasks")
        if not isinstance(raw_tasks, dict):
            raise ValueError("record 'tasks' must be an object")
        tasks: dict[str, bool] = {}
        for label, done in raw_tasks.items():
            if not isinstance(done, bool):
                raise ValueError(f"task {label!r} has non-boolean state {done!r}")
            tasks[str(label)] = done

        raw_reset = data.get("next_reset")
        if raw_reset is not None and not isinstance(raw_reset, str):
            raise ValueError("record 'next_reset' must be a string or null")

        return cls(
            name=name,
            tasks=tasks,
            schedule=schedule,
            next_reset=parse_instant(raw_reset),
        )


@dataclass(slots=True, frozen=True)
class ChecklistView:
    """Read-only snapshot handed to the presentation layer."""

    name: str
    tasks: tuple[tuple[str, bool], ...]
    schedule: str | None
    next_reset: datetime | None
    time_remaining: timedelta | None

    @classmethod
    def of(cls, checklist: Checklist, now: datetime) -> ChecklistView:
        return cls(
            name=checklist.name,
            tasks=tuple(sorted(checklist.tasks.items())),
            schedule=checklist.schedule,
            next_reset=checklist.next_reset,
            time_remaining=checklist.time_remaining(now),
        )

    @property
    def remaining_text(self) -> str | None:
        if self.time_remaining is None:
            return None
        return format_remaining(self.time_remaining)
