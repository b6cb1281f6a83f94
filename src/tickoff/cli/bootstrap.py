# src/tickoff/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local directories exist,
- reads checklist definitions from config.toml,
- restores each checklist from its record, or creates it fresh,
- wires the store and the checklists into AppState.
"""

from __future__ import annotations

import logging

from ..checklists.checklist_config import ChecklistDefinition, load_definitions
from ..checklists.checklist_models import Checklist
from ..checklists.checklist_store import ChecklistStore
from ..checklists.schedule import resolve_timezone
from ..config import get_settings
from ..core.ports import ChecklistRepo
from ..core.state import AppState
from ..errors import PersistenceLoadError

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.config_dir.mkdir(parents=True, exist_ok=True)
    settings.records_dir.mkdir(parents=True, exist_ok=True)
    settings.log_dir.mkdir(parents=True, exist_ok=True)


def _warn_on_task_drift(checklist: Checklist, definition: ChecklistDefinition) -> None:
    # Stored tasks win; a changed config is reported, not merged.
    stored = set(checklist.tasks)
    configured = set(definition.todo)
    if stored == configured:
        return
    logger.warning(
        "Checklist %r: stored tasks differ from config (only in config: %s; only stored: %s). "
        "Keeping stored tasks; delete the record to start over from config.",
        checklist.name,
        sorted(configured - stored),
        sorted(stored - configured),
    )


def restore_or_create(
    store: ChecklistRepo,
    definition: ChecklistDefinition,
) -> Checklist:
    """Load the durable record for a definition, or build a fresh checklist."""
    checklist = store.load(definition.name, schedule=definition.reset_schedule)
    if checklist is None:
        logger.info("Checklist %r created from config (%d tasks)", definition.name, len(definition.todo))
        return Checklist.fresh(definition.name, list(definition.todo), definition.reset_schedule)

    if checklist.schedule is None and checklist.next_reset is not None:
        logger.info("Checklist %r no longer has a schedule; dropping stored reset time", checklist.name)
        checklist.next_reset = None

    _warn_on_task_drift(checklist, definition)
    logger.info(
        "Checklist %r restored (%d/%d done, next reset %s)",
        checklist.name,
        checklist.completed_count,
        len(checklist.tasks),
        checklist.next_reset.isoformat() if checklist.next_reset else "not set",
    )
    return checklist


def load_checklists(
    store: ChecklistRepo,
    definitions: list[ChecklistDefinition],
    *,
    skip_corrupt: bool = False,
) -> list[Checklist]:
    out: list[Checklist] = []
    for definition in definitions:
        try:
            out.append(restore_or_create(store, definition))
        except PersistenceLoadError as e:
            if not skip_corrupt:
                raise
            logger.error("Skipping checklist %r: %s", definition.name, e)
    return out


def create_initial_state(*, settings=None, store: ChecklistRepo | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Raises ConfigurationError / PersistenceLoadError; the CLI turns them into exit code 1.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    tz = resolve_timezone(settings.timezone)
    definitions = load_definitions(settings.config_path)

    if store is None:
        store = ChecklistStore(
            settings.records_dir,
            write_retries=settings.write_retries,
            retry_delay_seconds=settings.write_retry_delay_seconds,
        )

    checklists = load_checklists(store, definitions, skip_corrupt=settings.skip_corrupt_records)
    return AppState(settings=settings, store=store, checklists=checklists, tz=tz)
