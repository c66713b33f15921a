"""Weekly timeslot preferences of a calendar.

Each calendar keeps, per event type, a 7x24 grid of counters indexed by
weekday (0 is Sunday) and hour of day. Every scheduled event increments the
buckets it covers in the calendar-local wall clock. Counters only grow.

The scheduling assistant reads the grid through ``get_preferences`` and ranks
the least occupied buckets; that ranking lives outside this package.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Iterable, Mapping

from sharecal.core.exceptions import InvalidEventTypeError, InvalidInputError
from sharecal.models import Calendar

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24
STEP = timedelta(hours=1)
# UTC-14:00 to UTC+14:00
MAX_TIMEZONE_OFFSET = 14 * 60

Matrix = dict[str, list[list[int]]]
FrozenMatrix = Mapping[str, tuple[tuple[int, ...], ...]]


def empty_matrix(event_types: Iterable[str]) -> Matrix:
    return {
        event_type: [[0] * HOURS_PER_DAY for _ in range(DAYS_PER_WEEK)]
        for event_type in event_types
    }


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _weekday(value: datetime) -> int:
    # datetime.weekday() starts on Monday
    return (value.weekday() + 1) % DAYS_PER_WEEK


def covered_buckets(
    start_time: datetime,
    end_time: datetime,
    timezone_offset: int = 0,
) -> list[tuple[int, int]]:
    """Return the (weekday, hour) buckets an event touches, in visiting order.

    Both instants are shifted by ``timezone_offset`` minutes. The walk steps one
    hour at a time from the shifted start and includes every step that is not
    after the shifted end, so an event lasting exactly n hours touches n + 1
    buckets.
    """
    if not -MAX_TIMEZONE_OFFSET <= timezone_offset <= MAX_TIMEZONE_OFFSET:
        raise InvalidInputError(
            f"Timezone offset must be within {MAX_TIMEZONE_OFFSET} minutes of UTC"
        )
    shift = timedelta(minutes=timezone_offset)
    try:
        current = _as_naive_utc(start_time) + shift
        end = _as_naive_utc(end_time) + shift
    except OverflowError as exc:
        raise InvalidInputError("Event time is out of range") from exc
    if end < current:
        raise InvalidInputError("Event end time is before its start time")

    buckets: list[tuple[int, int]] = []
    while True:
        buckets.append((_weekday(current), current.hour))
        if end - current < STEP:
            return buckets
        current += STEP


def record_event(
    matrix: Mapping[str, list[list[int]]],
    event_type: str,
    start_time: datetime,
    end_time: datetime,
    timezone_offset: int = 0,
) -> Matrix:
    """Return a copy of ``matrix`` with the event's buckets incremented."""
    if event_type not in matrix:
        raise InvalidEventTypeError(event_type)

    updated = {key: [list(day) for day in grid] for key, grid in matrix.items()}
    grid = updated[event_type]
    for weekday, hour in covered_buckets(start_time, end_time, timezone_offset):
        grid[weekday][hour] += 1
    return updated


def ensure_event_type(calendar: Calendar, event_type: str) -> None:
    if event_type not in calendar.timeslot_preferences:
        raise InvalidEventTypeError(event_type)


def apply_event(
    calendar: Calendar,
    event_type: str,
    start_time: datetime,
    end_time: datetime,
    timezone_offset: int = 0,
) -> None:
    """Account an event on the calendar; the caller holds the calendar lock."""
    calendar.timeslot_preferences = record_event(
        calendar.timeslot_preferences,
        event_type,
        start_time,
        end_time,
        timezone_offset,
    )
    logger.debug(f"Timeslot preferences of calendar {calendar.id} updated for {event_type}")


def get_preferences(calendar: Calendar) -> FrozenMatrix:
    """Read-only snapshot of the calendar's preference matrix."""
    return MappingProxyType(
        {
            event_type: tuple(tuple(day) for day in grid)
            for event_type, grid in calendar.timeslot_preferences.items()
        }
    )
