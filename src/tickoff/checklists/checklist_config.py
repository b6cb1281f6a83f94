# src/tickoff/checklists/checklist_config.py

"""
Checklist definitions from config.toml.

    [[checklist]]
    name = "daily"
    reset_schedule = "0 0 * * *"
    todo = ["dishes", "laundry"]

Definitions only seed new checklists; an existing record keeps its own tasks.
Every problem here is a ConfigurationError and aborts startup.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError, InvalidScheduleExpression
from .schedule import validate_schedule

logger = logging.getLogger(__name__)

_FORBIDDEN_NAME_CHARS = set('/\\\0')


@dataclass(frozen=True, slots=True)
class ChecklistDefinition:
    name: str
    todo: tuple[str, ...]
    reset_schedule: str | None = None


def _check_name(name: Any, index: int) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"checklist #{index + 1}: 'name' must be a non-empty string")
    name = name.strip()
    # The name doubles as the record file name.
    if name in (".", "..") or any(ch in _FORBIDDEN_NAME_CHARS for ch in name):
        raise ConfigurationError(f"checklist {name!r}: name cannot be used as a file name")
    return name


def _check_todo(name: str, todo: Any) -> tuple[str, ...]:
    if not isinstance(todo, list):
        raise ConfigurationError(f"checklist {name!r}: 'todo' must be a list of strings")
    labels: list[str] = []
    for item in todo:
        if not isinstance(item, str) or not item.strip():
            raise ConfigurationError(f"checklist {name!r}: task labels must be non-empty strings")
        label = item.strip()
        if label in labels:
            raise ConfigurationError(f"checklist {name!r}: duplicate task {label!r}")
        labels.append(label)
    return tuple(labels)


def parse_definitions(data: dict[str, Any]) -> list[ChecklistDefinition]:
    raw = data.get("checklist")
    if raw is None:
        raise ConfigurationError("configuration has no [[checklist]] entries")
    if not isinstance(raw, list):
        raise ConfigurationError("'checklist' must be an array of tables ([[checklist]])")

    out: list[ChecklistDefinition] = []
    seen: set[str] = set()
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"checklist #{i + 1} must be a table")
        name = _check_name(entry.get("name"), i)
        if name in seen:
            raise ConfigurationError(f"duplicate checklist name {name!r}")
        seen.add(name)

        todo = _check_todo(name, entry.get("todo"))

        schedule = entry.get("reset_schedule")
        if schedule is not None:
            if not isinstance(schedule, str):
                raise ConfigurationError(f"checklist {name!r}: 'reset_schedule' must be a string")
            try:
                schedule = validate_schedule(schedule)
            except InvalidScheduleExpression as e:
                raise InvalidScheduleExpression(schedule, f"checklist {name!r}: {e.reason}") from e

        out.append(ChecklistDefinition(name=name, todo=todo, reset_schedule=schedule))
    return out


def load_definitions(path: str | Path) -> list[ChecklistDefinition]:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"no configuration file at {path}")
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"invalid TOML in {path}: {e}") from e

    definitions = parse_definitions(data)
    logger.info("Loaded %d checklist definitions from %s", len(definitions), path)
    return definitions
