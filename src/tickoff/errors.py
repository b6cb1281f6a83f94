# src/tickoff/errors.py

"""
Exception hierarchy.

Every failure the app can surface at startup or from the engine thread derives
from TickoffError, so the CLI can turn them into a diagnostic + non-zero exit.
"""

from __future__ import annotations


class TickoffError(Exception):
    """Base class for all tickoff errors."""


class ConfigurationError(TickoffError):
    """Missing, unreadable or invalid checklist configuration."""


class InvalidScheduleExpression(ConfigurationError):
    def __init__(self, expression: str, reason: str = "") -> None:
        self.expression = expression
        self.reason = reason
        msg = f"Invalid reset schedule {expression!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PersistenceLoadError(TickoffError):
    """A durable record exists but cannot be read or decoded."""

    def __init__(self, name: str, path: object, reason: str) -> None:
        self.name = name
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load checklist {name!r} from {path}: {reason}")


class PersistenceWriteError(TickoffError):
    """A durable record could not be written (after retries)."""

    def __init__(self, name: str, path: object, reason: str) -> None:
        self.name = name
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot save checklist {name!r} to {path}: {reason}")
