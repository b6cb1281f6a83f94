# src/tickoff/checklists/lifecycle.py

from __future__ import annotations

"""
Checklist lifecycle engine.

A small polling loop that, every tick and for every checklist:
- computes `next_reset` from the schedule when it is missing,
- resets the checklist (all tasks unchecked, `next_reset` cleared) once that
  instant has passed,
- writes the checklist's full record to the store, changed or not.

State transitions and snapshots happen under AppState.lock; the disk writes use the
snapshots and run after the lock is released, so a slow disk never stalls the UI.
A write that keeps failing stops the engine (PersistenceWriteError); nothing is
skipped silently.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, tzinfo
from typing import Any

from ..core.state import AppState, utcnow
from .checklist_models import Checklist
from .schedule import next_after

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TickReport:
    at: datetime
    computed: list[str] = field(default_factory=list)
    reset: list[str] = field(default_factory=list)
    saved: int = 0


def advance_checklist(checklist: Checklist, now: datetime, *, tz: tzinfo = UTC) -> tuple[bool, bool]:
    """
    Apply one tick's state transition to a single checklist.

    Returns (computed, reset):
    - computed: `next_reset` was missing and has been filled from the schedule
    - reset: `next_reset` had passed; tasks were cleared and `next_reset` consumed

    Caller must hold the state lock.
    """
    computed = False
    reset = False

    if checklist.next_reset is None and checklist.schedule is not None:
        checklist.next_reset = next_after(checklist.schedule, now, tz=tz)
        computed = True

    if checklist.next_reset is not None and now >= checklist.next_reset:
        checklist.reset()
        reset = True

    return computed, reset


def _save_snapshots(state: AppState, snapshots: list[tuple[str, dict[str, Any]]]) -> int:
    for name, record in snapshots:
        state.store.save_record(name, record)
    return len(snapshots)


def persist_all(state: AppState) -> int:
    """Write every record as-is, without any lifecycle transition (used on shutdown)."""
    with state.lock:
        snapshots = [(c.name, c.to_record()) for c in state.checklists]
    saved = _save_snapshots(state, snapshots)
    logger.info("Saved %d checklists.", saved)
    return saved


def run_tick(state: AppState, now: datetime | None = None) -> TickReport:
    """One engine pass over the whole collection. Raises PersistenceWriteError."""
    now = now or utcnow()
    report = TickReport(at=now)
    snapshots: list[tuple[str, dict[str, Any]]] = []

    with state.lock:
        for checklist in state.checklists:
            computed, reset = advance_checklist(checklist, now, tz=state.tz)
            if computed:
                report.computed.append(checklist.name)
                logger.info("Checklist %r resets at %s", checklist.name, checklist.next_reset)
            if reset:
                report.reset.append(checklist.name)
                logger.info("Checklist %r reset", checklist.name)
            snapshots.append((checklist.name, checklist.to_record()))

    report.saved = _save_snapshots(state, snapshots)

    logger.debug(
        "Tick at %s: computed=%s reset=%s saved=%d",
        now.isoformat(),
        report.computed,
        report.reset,
        report.saved,
    )
    return report


async def run_lifecycle_engine(
        state: AppState,
        *,
        interval_seconds: float = 10.0,
        stop_event: asyncio.Event | None = None,
        clock: Callable[[], datetime] = utcnow,
) -> None:
    """
    Tick every interval_seconds until stop_event is set (or the task is cancelled).

    The first tick runs immediately. Errors from a tick propagate and end the loop.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        run_tick(state, clock())

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)
        except TimeoutError:
            continue
        logger.info("Lifecycle engine stopped.")
        return


@dataclass
class EngineBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event
    errors: list[BaseException] = field(default_factory=list)

    @property
    def error(self) -> BaseException | None:
        return self.errors[0] if self.errors else None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            # Loop already closed: the engine has finished on its own.
            logger.debug("Engine loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_engine_in_background(
        state: AppState,
        *,
        interval_seconds: float = 10.0,
        on_fatal: Callable[[BaseException], None] | None = None,
) -> EngineBackgroundRunner | None:
    """
    Start the lifecycle engine in a background thread with its own event loop,
    so the console REPL (blocking input()) can run in the main thread.

    If the engine dies, the error is logged, kept on the runner and passed to
    on_fatal (the CLI uses it to bring the main thread down).
    """
    ready = threading.Event()
    holder: dict[str, Any] = {}
    errors: list[BaseException] = []

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_lifecycle_engine(state, interval_seconds=interval_seconds, stop_event=stop_event)
            )
        except Exception as e:
            logger.critical("Lifecycle engine failed: %s", e, exc_info=True)
            errors.append(e)
            if on_fatal is not None:
                on_fatal(e)
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="tickoff-engine", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Engine thread did not initialize properly.")
        return None

    run = EngineBackgroundRunner(thread=t, loop=loop, stop_event=stop_event, errors=errors)
    logger.info("Lifecycle engine started (tick every %.1fs).", interval_seconds)
    return run
