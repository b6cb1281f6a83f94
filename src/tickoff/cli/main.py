# src/tickoff/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs:
- the lifecycle engine in a background thread,
- the console REPL in the main thread (optional; otherwise waits for a signal).

Exit code 1 on configuration/record errors at startup or if the engine dies.
"""

from __future__ import annotations

import _thread
import logging
import signal
import sys
import threading

from .. import __version__
from ..checklists.lifecycle import persist_all, start_engine_in_background
from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import TickoffError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _interrupt_main_thread() -> None:
    """
    Raise KeyboardInterrupt in the main thread, even while it sits in input().

    _thread.interrupt_main() only sets the pending-signal flag, which a blocking
    read never sees; a real SIGINT sent to the main thread makes the read return.
    """
    if hasattr(signal, "pthread_kill"):
        signal.pthread_kill(threading.main_thread().ident, signal.SIGINT)
    else:
        _thread.interrupt_main()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("%s v%s", settings.app_name, __version__)

    try:
        state = create_initial_state(settings=settings)
    except TickoffError as e:
        logger.error("Startup failed: %s", e)
        sys.exit(1)

    stop_main = threading.Event()

    if settings.console_enabled:
        # A dead engine must also end a blocking input(); edits after this point are not saved.
        def on_fatal(exc: BaseException) -> None:
            print(
                f"\n[ENGINE] Stopped: {exc}. Changes can no longer be saved; exiting.",
                file=sys.stderr,
                flush=True,
            )
            _interrupt_main_thread()
    else:
        def on_fatal(_exc: BaseException) -> None:
            stop_main.set()

    runner = None
    try:
        runner = start_engine_in_background(
            state,
            interval_seconds=settings.tick_interval_seconds,
            on_fatal=on_fatal,
        )
        if runner is None:
            sys.exit(1)

        if settings.console_enabled:
            run_console_loop(state)
        else:
            def _handle_signal(signum, _frame) -> None:
                logger.info("Signal %s received, shutting down...", signum)
                stop_main.set()

            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError):
                # Some platforms may not support SIGTERM, etc.
                pass

            logger.info("Console disabled. Running the engine only. Press Ctrl+C to stop.")
            stop_main.wait()
    except KeyboardInterrupt:
        # on_fatal lands here when input() was not the active call.
        print()
    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=10.0)

    if runner is None:
        sys.exit(1)
    if runner.failed:
        logger.error("Exiting: %s", runner.error)
        sys.exit(1)

    if runner.thread.is_alive():
        # Still inside a write; a second writer would race on the same temp file.
        logger.error("Engine thread did not stop in time; skipping final save.")
        sys.exit(1)

    try:
        persist_all(state)
    except TickoffError as e:
        logger.error("Final save failed: %s", e)
        sys.exit(1)
    logger.info("Bye.")


if __name__ == "__main__":
    main()
