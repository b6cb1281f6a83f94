# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from tickoff.config import Settings


def test_defaults_live_under_config_dir(monkeypatch, tmp_path: Path) -> None:
    for name in ("CONFIG_PATH", "RECORDS_DIR", "LOG_DIR", "TICK_SECONDS", "TIMEZONE", "CONSOLE_ENABLED"):
        monkeypatch.delenv(f"TICKOFF_{name}", raising=False)
    monkeypatch.setenv("TICKOFF_CONFIG_DIR", str(tmp_path))

    s = Settings.from_env()

    assert s.config_dir == tmp_path
    assert s.config_path == tmp_path / "config.toml"
    assert s.records_dir == tmp_path
    assert s.log_dir == tmp_path
    assert s.tick_interval_seconds == 10.0
    assert s.timezone == "UTC"
    assert s.console_enabled is True


def test_overrides_and_bad_numbers(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TICKOFF_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("TICKOFF_RECORDS_DIR", str(tmp_path / "records"))
    monkeypatch.setenv("TICKOFF_TICK_SECONDS", "2.5")
    monkeypatch.setenv("TICKOFF_WRITE_RETRIES", "many")
    monkeypatch.setenv("TICKOFF_SKIP_CORRUPT_RECORDS", "yes")
    monkeypatch.setenv("TICKOFF_CONSOLE_ENABLED", "0")

    s = Settings.from_env()

    assert s.records_dir == tmp_path / "records"
    assert s.tick_interval_seconds == 2.5
    assert s.write_retries == 2
    assert s.skip_corrupt_records is True
    assert s.console_enabled is False
