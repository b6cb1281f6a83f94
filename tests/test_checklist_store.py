# tests/test_checklist_store.py

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from tickoff.checklists.checklist_models import Checklist
from tickoff.checklists.checklist_store import ChecklistStore
from tickoff.errors import PersistenceLoadError, PersistenceWriteError


def test_load_missing_returns_none(store: ChecklistStore) -> None:
    assert store.load("nothing-here") is None
    assert not store.exists("nothing-here")


def test_save_load_round_trip(store: ChecklistStore, daily: Checklist) -> None:
    daily.next_reset = datetime(2024, 1, 2, 0, 0, 0, 123456, tzinfo=UTC)
    store.save(daily)

    assert store.exists("daily")
    loaded = store.load("daily", schedule="0 0 * * *")
    assert loaded is not None
    assert loaded.tasks == daily.tasks
    assert loaded.next_reset == daily.next_reset
    assert loaded.schedule == "0 0 * * *"


def test_record_file_format(store: ChecklistStore, daily: Checklist) -> None:
    store.save(daily)
    data = json.loads(store.record_path("daily").read_text("utf-8"))
    assert data == {
        "name": "daily",
        "next_reset": "2024-01-02T00:00:00+00:00",
        "tasks": {"dishes": False, "laundry": True},
    }


def test_repeated_saves_overwrite(store: ChecklistStore, daily: Checklist) -> None:
    for _ in range(50):
        store.save(daily)
    daily.tasks["dishes"] = True
    store.save(daily)

    path = store.record_path("daily")
    assert path.read_text("utf-8") == json.dumps(daily.to_record(), ensure_ascii=False, indent=2)
    assert list(store.records_dir.glob("*.tmp")) == []


def test_unicode_labels_survive(store: ChecklistStore) -> None:
    c = Checklist(name="покупки", tasks={"молоко": True, "☕": False})
    store.save(c)
    loaded = store.load("покупки")
    assert loaded is not None
    assert loaded.tasks == {"молоко": True, "☕": False}


def test_corrupt_json_raises_load_error(store: ChecklistStore) -> None:
    store.record_path("daily").write_text("{not json", "utf-8")
    with pytest.raises(PersistenceLoadError) as exc:
        store.load("daily")
    assert exc.value.name == "daily"


def test_invalid_utf8_record_raises_load_error(store: ChecklistStore) -> None:
    store.record_path("daily").write_bytes(b"\xff\xfe garbage")
    with pytest.raises(PersistenceLoadError) as exc:
        store.load("daily")
    assert exc.value.name == "daily"

    store.record_path("daily").write_bytes(b'{"name": "daily", "tasks": {"\xff": true}}')
    with pytest.raises(PersistenceLoadError):
        store.load("daily")


def test_malformed_record_raises_load_error(store: ChecklistStore) -> None:
    store.record_path("daily").write_text(json.dumps({"name": "daily", "tasks": {"a": 1}}), "utf-8")
    with pytest.raises(PersistenceLoadError):
        store.load("daily")


def test_record_name_mismatch_uses_requested_name(store: ChecklistStore) -> None:
    store.record_path("daily").write_text(
        json.dumps({"name": "renamed", "next_reset": None, "tasks": {}}), "utf-8"
    )
    loaded = store.load("daily")
    assert loaded is not None
    assert loaded.name == "daily"


def test_transient_write_errors_are_retried(tmp_path: Path, daily: Checklist, monkeypatch) -> None:
    store = ChecklistStore(tmp_path, write_retries=2, retry_delay_seconds=0.0)
    real_write = ChecklistStore._write_atomic
    calls = {"n": 0}

    def flaky(path: Path, payload: str) -> None:
        calls["n"] += 1
        if calls["n"] < 3:
            raise OSError("device busy")
        real_write(path, payload)

    monkeypatch.setattr(store, "_write_atomic", flaky)
    store.save(daily)

    assert calls["n"] == 3
    assert store.load("daily") is not None


def test_persistent_write_error_is_raised(tmp_path: Path, daily: Checklist, monkeypatch) -> None:
    store = ChecklistStore(tmp_path, write_retries=2, retry_delay_seconds=0.0)
    calls = {"n": 0}

    def broken(path: Path, payload: str) -> None:
        calls["n"] += 1
        raise OSError("No space left on device")

    monkeypatch.setattr(store, "_write_atomic", broken)
    with pytest.raises(PersistenceWriteError) as exc:
        store.save(daily)

    assert calls["n"] == 3
    assert exc.value.name == "daily"
    assert "No space left" in str(exc.value)


def test_failed_write_keeps_previous_record(store: ChecklistStore, daily: Checklist, monkeypatch) -> None:
    store.save(daily)
    before = store.record_path("daily").read_text("utf-8")

    def fail_replace(src, dst):
        raise OSError("rename failed")

    monkeypatch.setattr("tickoff.checklists.checklist_store.os.replace", fail_replace)
    daily.tasks["dishes"] = True
    with pytest.raises(PersistenceWriteError):
        store.save(daily)

    assert store.record_path("daily").read_text("utf-8") == before
    assert list(store.records_dir.glob("*.tmp")) == []
