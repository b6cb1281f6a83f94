# src/tickoff/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo

from ..checklists.checklist_models import Checklist, ChecklistView
from .ports import ChecklistRepo


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class AppState:
    """
    The shared collection plus the one lock that guards it.

    The engine thread and the presentation layer both go through `lock`; nothing
    may read or write a Checklist outside it.
    """

    settings: object
    store: ChecklistRepo
    checklists: list[Checklist] = field(default_factory=list)
    tz: tzinfo = UTC
    lock: threading.Lock = field(default_factory=threading.Lock)

    def _find(self, name: str) -> Checklist:
        for checklist in self.checklists:
            if checklist.name == name:
                return checklist
        raise KeyError(name)

    # ---- presentation API ----

    def names(self) -> list[str]:
        with self.lock:
            return [c.name for c in self.checklists]

    def views(self, now: datetime | None = None) -> list[ChecklistView]:
        """Consistent snapshot of every checklist, in configuration order."""
        now = now or utcnow()
        with self.lock:
            return [ChecklistView.of(c, now) for c in self.checklists]

    def view(self, name: str, now: datetime | None = None) -> ChecklistView:
        now = now or utcnow()
        with self.lock:
            return ChecklistView.of(self._find(name), now)

    def set_task(self, name: str, label: str, done: bool) -> bool:
        """Set one flag; returns the previous value. KeyError for unknown names/labels."""
        with self.lock:
            checklist = self._find(name)
            if label not in checklist.tasks:
                raise KeyError(label)
            previous = checklist.tasks[label]
            checklist.tasks[label] = bool(done)
            return previous

    def toggle_task(self, name: str, label: str) -> bool:
        """Flip one flag; returns the new value."""
        with self.lock:
            checklist = self._find(name)
            if label not in checklist.tasks:
                raise KeyError(label)
            checklist.tasks[label] = not checklist.tasks[label]
            return checklist.tasks[label]
