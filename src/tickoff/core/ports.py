# src/tickoff/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine depends on a Protocol instead of the concrete JSON store, which keeps
tests free of the filesystem when they only care about lifecycle logic.
"""

from typing import Any, Protocol


class ChecklistRepo(Protocol):
    def load(self, name: str, *, schedule: str | None = None) -> Any | None: ...
    def save(self, checklist: Any) -> None: ...
    def save_record(self, name: str, record: dict[str, Any]) -> None: ...
    def exists(self, name: str) -> bool: ...
