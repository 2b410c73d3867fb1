"""Quiet-hours (Do-Not-Disturb) window evaluation.

A window is a pair of ``HH:MM`` bounds in 24-hour time. When the start is
earlier than the end the window sits inside one day. Otherwise it spans
midnight. ``start == end`` therefore covers the whole day: the window is
always active. That case is kept as is.
"""

import re
from datetime import time

from protean.exceptions import ValidationError

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_time_of_day(value, field: str) -> str:
    """Return ``value`` if it is a valid ``HH:MM`` string, else raise ValidationError."""
    if not value:
        raise ValidationError({field: ["is required (format: HH:MM)"]})
    if not isinstance(value, str) or not TIME_OF_DAY_PATTERN.match(value):
        raise ValidationError({field: [f"Invalid time format: {value}. Use HH:MM (24-hour format)"]})
    return value


def minutes_since_midnight(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def is_within_window(now: time, start: str, end: str) -> bool:
    """Check whether ``now`` falls inside the ``start``-``end`` window.

    The start bound is inclusive and the end bound exclusive.
    """
    current = now.hour * 60 + now.minute
    start_minutes = minutes_since_midnight(start)
    end_minutes = minutes_since_midnight(end)

    if start_minutes < end_minutes:
        return start_minutes <= current < end_minutes

    # Spans midnight (or covers the whole day when start == end)
    return current >= start_minutes or current < end_minutes
