"""Time-of-day parsing and presentation helpers."""

from __future__ import annotations

import math
import re

from ...models.domain import TimeWindow
from .exceptions import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")
_WINDOW = re.compile(r"^\s*(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})\s*$")


def parse_time_string(value: str) -> int:
    """Parse "HH:MM" into minutes since midnight."""

    match = _HHMM.match(str(value).strip())
    if not match:
        raise InvalidTimeFormat(f"Expected HH:MM, got '{value}'.")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(f"Time '{value}' is out of range.")
    return hours * 60 + minutes


def parse_time_window(value: str) -> TimeWindow:
    """Parse "HH:MM - HH:MM" (spaces optional) into a TimeWindow."""

    match = _WINDOW.match(str(value))
    if not match:
        raise InvalidTimeFormat(f"Expected 'HH:MM - HH:MM', got '{value}'.")
    start = parse_time_string(match.group(1))
    end = parse_time_string(match.group(2))
    if end < start:
        raise InvalidTimeFormat(f"Time window '{value}' ends before it starts.")
    return TimeWindow(start_min=start, end_min=end)


def format_time_from_minutes(minutes: float) -> str:
    """Format minutes since midnight as HH:MM (wrapping past midnight)."""

    total = int(math.floor(minutes)) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def format_time_window(window: TimeWindow) -> str:
    return f"{format_time_from_minutes(window.start_min)} - {format_time_from_minutes(window.end_min)}"


def format_duration(minutes: float) -> str:
    total = int(round(minutes))
    if total < 60:
        return f"{total}min"
    hours, remaining = divmod(total, 60)
    return f"{hours}h {remaining}min" if remaining else f"{hours}h"


def format_distance(km: float) -> str:
    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{round(km, 1):g}km"
