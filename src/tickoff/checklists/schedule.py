# src/tickoff/checklists/schedule.py

from __future__ import annotations

"""
Schedule resolver.

Turns a five-field cron expression ("minute hour day-of-month month day-of-week",
or one of the @daily/@weekly/... aliases) into future reset instants.

The resolver is pure: nothing here keeps iterator state between calls, so a cached
`next_reset` can be persisted and the sequence resumed from any reference instant.
"""

import logging
from collections.abc import Iterator
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

from ..errors import ConfigurationError, InvalidScheduleExpression

logger = logging.getLogger(__name__)

# croniter raises ValueError subclasses (CroniterBadCronError, ...); KeyError on unknown aliases.
_CRON_ERRORS = (ValueError, KeyError)


def resolve_timezone(name: str | None) -> tzinfo:
    """Map a zone name from settings to a tzinfo ("UTC" and empty mean UTC)."""
    if not name or name.strip().upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(f"Unknown time zone {name!r}") from e


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def validate_schedule(expression: str) -> str:
    """
    Normalise and validate a schedule expression.

    Returns the stripped expression; raises InvalidScheduleExpression otherwise.
    """
    expr = (expression or "").strip()
    if not expr:
        raise InvalidScheduleExpression(expression, "empty expression")
    # croniter also accepts 6/7-field (seconds/year) forms; keep the grammar to 5 fields.
    if not expr.startswith("@") and len(expr.split()) != 5:
        raise InvalidScheduleExpression(expression, "expected 5 fields: minute hour day month weekday")
    try:
        if not croniter.is_valid(expr):
            raise InvalidScheduleExpression(expression, "not a valid cron expression")
        # is_valid() does not catch every impossible date (e.g. "0 0 30 2 *").
        croniter(expr, datetime(2000, 1, 1, tzinfo=UTC)).get_next(datetime)
    except InvalidScheduleExpression:
        raise
    except _CRON_ERRORS as e:
        raise InvalidScheduleExpression(expression, str(e)) from e
    return expr


def upcoming(expression: str, start: datetime, *, tz: tzinfo = UTC) -> Iterator[datetime]:
    """
    Lazy, infinite sequence of reset instants strictly after `start`.

    Restartable: calling again with any reference instant yields the same values
    from that point on. All yielded instants are timezone-aware UTC.
    """
    expr = validate_schedule(expression)
    it = croniter(expr, _as_utc(start).astimezone(tz))
    while True:
        try:
            nxt = it.get_next(datetime)
        except _CRON_ERRORS as e:
            raise InvalidScheduleExpression(expression, str(e)) from e
        yield _as_utc(nxt)


def next_after(expression: str, now: datetime, *, tz: tzinfo = UTC) -> datetime:
    """Next reset instant strictly after `now` (deterministic for a given pair)."""
    nxt = next(upcoming(expression, now, tz=tz))
    logger.debug("Schedule %r next after %s -> %s", expression, now.isoformat(), nxt.isoformat())
    return nxt
