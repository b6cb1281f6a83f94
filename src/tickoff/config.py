# src/tickoff/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read from disk here except .env; config.toml is parsed at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TICKOFF"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Paths ----
    config_dir: Path
    config_path: Path
    records_dir: Path
    log_dir: Path

    # ---- Engine ----
    tick_interval_seconds: float
    timezone: str
    write_retries: int
    write_retry_delay_seconds: float
    skip_corrupt_records: bool

    # ---- Presentation ----
    console_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tickoff")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        config_dir = _env_path(_k("CONFIG_DIR"), Path.home() / ".config" / "tickoff")
        config_path = _env_path(_k("CONFIG_PATH"), config_dir / "config.toml")
        # Records live next to the config by default, one <name>.json per checklist.
        records_dir = _env_path(_k("RECORDS_DIR"), config_dir)
        log_dir = _env_path(_k("LOG_DIR"), config_dir)

        tick_interval_seconds = _env_float(_k("TICK_SECONDS"), 10.0)
        timezone = _env(_k("TIMEZONE"), "UTC").strip() or "UTC"
        write_retries = max(0, _env_int(_k("WRITE_RETRIES"), 2))
        write_retry_delay_seconds = max(0.0, _env_float(_k("WRITE_RETRY_DELAY"), 0.5))
        skip_corrupt_records = _env_bool(_k("SKIP_CORRUPT_RECORDS"), False)

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            config_dir=config_dir,
            config_path=config_path,
            records_dir=records_dir,
            log_dir=log_dir,
            tick_interval_seconds=tick_interval_seconds,
            timezone=timezone,
            write_retries=write_retries,
            write_retry_delay_seconds=write_retry_delay_seconds,
            skip_corrupt_records=skip_corrupt_records,
            console_enabled=console_enabled,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
