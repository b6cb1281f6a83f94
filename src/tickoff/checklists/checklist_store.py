# src/tickoff/checklists/checklist_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import time
from pathlib import Path

from ..errors import PersistenceLoadError, PersistenceWriteError
from .checklist_models import Checklist

logger = logging.getLogger(__name__)


class ChecklistStore:
    """
    JSON file store: one record per checklist at <records_dir>/<name>.json.

    Writes replace the whole record (temp file + os.replace), so calling save()
    every tick never leaves a half-written or appended file behind.

    Thread-safety:
    - only the engine thread writes; loads happen once at startup
    """

    def __init__(
        self,
        records_dir: str | Path,
        *,
        write_retries: int = 2,
        retry_delay_seconds: float = 0.5,
    ) -> None:
        self._dir = Path(records_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._write_retries = max(0, int(write_retries))
        self._retry_delay = max(0.0, float(retry_delay_seconds))
        logger.info("ChecklistStore ready dir=%s", self._dir)

    @property
    def records_dir(self) -> Path:
        return self._dir

    def record_path(self, name: str) -> Path:
        return self._dir / f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.record_path(name).exists()

    # ---- public API ----

    def load(self, name: str, *, schedule: str | None = None) -> Checklist | None:
        """
        Restore a checklist, or None if no record exists yet.

        The schedule is not part of the record; the caller passes it back in.
        """
        path = self.record_path(name)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceLoadError(name, path, str(e)) from e

        try:
            data = json.loads(raw.decode("utf-8"))
            checklist = Checklist.from_record(data, schedule=schedule)
        except (ValueError, TypeError) as e:
            raise PersistenceLoadError(name, path, str(e)) from e

        if checklist.name != name:
            logger.warning(
                "Record %s is named %r; using configured name %r", path, checklist.name, name
            )
            checklist.name = name

        logger.debug(
            "Checklist loaded name=%s tasks=%d next_reset=%s",
            name,
            len(checklist.tasks),
            checklist.next_reset,
        )
        return checklist

    def save(self, checklist: Checklist) -> None:
        self.save_record(checklist.name, checklist.to_record())

    def save_record(self, name: str, record: dict) -> None:
        """
        Write an already-snapshotted record.

        Retries transient OS errors a bounded number of times, then raises
        PersistenceWriteError.
        """
        path = self.record_path(name)
        payload = json.dumps(record, ensure_ascii=False, indent=2)

        attempt = 0
        while True:
            try:
                self._write_atomic(path, payload)
                return
            except OSError as e:
                if attempt >= self._write_retries:
                    raise PersistenceWriteError(name, path, str(e)) from e
                attempt += 1
                logger.warning(
                    "Write failed for %s (%s); retry %d/%d", path, e, attempt, self._write_retries
                )
                time.sleep(self._retry_delay)

    @staticmethod
    def _write_atomic(path: Path, payload: str) -> None:
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(payload, "utf-8")
            os.replace(tmp, path)
        except OSError:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
