"""Parse human-readable time spans such as "15m", "7d" or "2 days" into timedeltas."""

import re
from datetime import timedelta

_SECOND = 1.0
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_YEAR = 365.25 * _DAY

# Unit spelling -> seconds per unit.
UNIT_SECONDS: dict[str, float] = {
    "ms": 0.001,
    "msec": 0.001,
    "msecs": 0.001,
    "millisecond": 0.001,
    "milliseconds": 0.001,
    "s": _SECOND,
    "sec": _SECOND,
    "secs": _SECOND,
    "second": _SECOND,
    "seconds": _SECOND,
    "m": _MINUTE,
    "min": _MINUTE,
    "mins": _MINUTE,
    "minute": _MINUTE,
    "minutes": _MINUTE,
    "h": _HOUR,
    "hr": _HOUR,
    "hrs": _HOUR,
    "hour": _HOUR,
    "hours": _HOUR,
    "d": _DAY,
    "day": _DAY,
    "days": _DAY,
    "w": _WEEK,
    "week": _WEEK,
    "weeks": _WEEK,
    "y": _YEAR,
    "yr": _YEAR,
    "yrs": _YEAR,
    "year": _YEAR,
    "years": _YEAR,
}

# Longest accepted span; datetime arithmetic overflows long before timedelta.max.
MAX_DURATION_SECONDS = 100 * _YEAR

_DURATION_RE = re.compile(r"^(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>[a-z]*)$")


def parse_duration(value: str | int) -> timedelta:
    """
    Convert a duration to a timedelta.

    Integers and bare numeric strings are seconds; otherwise a number followed by
    a unit ("900s", "15m", "12h", "7d", "2 weeks"). Raises ValueError when the
    value cannot be parsed, is not positive, or exceeds 100 years.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int):
        try:
            seconds = float(value)
        except OverflowError:
            raise ValueError(f"Duration out of range: {value!r}") from None
    else:
        match = _DURATION_RE.match(str(value).strip().lower())
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        unit = match.group("unit") or "s"
        if unit not in UNIT_SECONDS:
            raise ValueError(f"Unknown duration unit {unit!r} in {value!r}")
        seconds = float(match.group("value")) * UNIT_SECONDS[unit]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    if seconds > MAX_DURATION_SECONDS:
        raise ValueError(f"Duration must not exceed 100 years: {value!r}")
    return timedelta(seconds=seconds)
