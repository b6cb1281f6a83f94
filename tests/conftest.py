# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from tickoff.checklists.checklist_models import Checklist
from tickoff.checklists.checklist_store import ChecklistStore
from tickoff.core.state import AppState

from .fakes import MemoryChecklistStore

CONFIG_TOML = """
[[checklist]]
name = "daily"
reset_schedule = "0 0 * * *"
todo = ["dishes", "laundry"]

[[checklist]]
name = "oneoff"
todo = ["buy milk"]
"""


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the engine.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the user's home directory and environment.
    """
    config_dir = tmp_path / "config"
    return SimpleNamespace(
        app_name="tickoff-test",
        log_level="DEBUG",
        config_dir=config_dir,
        config_path=config_dir / "config.toml",
        records_dir=config_dir,
        log_dir=tmp_path / "logs",
        tick_interval_seconds=0.01,
        timezone="UTC",
        write_retries=0,
        write_retry_delay_seconds=0.0,
        skip_corrupt_records=False,
        console_enabled=False,
    )


@pytest.fixture()
def config_file(settings: SimpleNamespace) -> Path:
    settings.config_dir.mkdir(parents=True, exist_ok=True)
    settings.config_path.write_text(CONFIG_TOML, "utf-8")
    return settings.config_path


@pytest.fixture()
def store(settings: SimpleNamespace) -> ChecklistStore:
    return ChecklistStore(settings.records_dir, write_retries=0, retry_delay_seconds=0.0)


@pytest.fixture()
def daily() -> Checklist:
    return Checklist(
        name="daily",
        tasks={"dishes": False, "laundry": True},
        schedule="0 0 * * *",
        next_reset=datetime(2024, 1, 2, tzinfo=UTC),
    )


@pytest.fixture()
def oneoff() -> Checklist:
    return Checklist(name="oneoff", tasks={"buy milk": False})


@pytest.fixture()
def memory_store() -> MemoryChecklistStore:
    return MemoryChecklistStore()


@pytest.fixture()
def state(settings: SimpleNamespace, memory_store: MemoryChecklistStore, daily, oneoff) -> AppState:
    """AppState with the two example checklists and an in-memory store."""
    return AppState(settings=settings, store=memory_store, checklists=[daily, oneoff])
