"""
Human-friendly duration parsing ("30s", "10m", "2h").
"""

import re

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)

_UNIT_SECONDS = {
    "": 1.0,
    "ms": 0.001,
    "s": 1.0,
    "sec": 1.0,
    "secs": 1.0,
    "second": 1.0,
    "seconds": 1.0,
    "m": 60.0,
    "min": 60.0,
    "mins": 60.0,
    "minute": 60.0,
    "minutes": 60.0,
    "h": 3600.0,
    "hr": 3600.0,
    "hrs": 3600.0,
    "hour": 3600.0,
    "hours": 3600.0,
    "d": 86400.0,
    "day": 86400.0,
    "days": 86400.0,
}


def parse_duration(value: str | int | float) -> float:
    """
    Convert a duration to seconds.

    Numbers are taken as seconds. Strings carry an optional unit suffix:
    ms, s, m, h or d (long forms like "minutes" also work).

    Raises:
        ValueError: If the value is negative or the unit is unknown
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")

    if isinstance(value, (int, float)):
        seconds = float(value)
    else:
        match = _DURATION_RE.match(str(value))
        if not match:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        unit = unit.lower()
        if unit not in _UNIT_SECONDS:
            raise ValueError(f"Unknown duration unit '{unit}' in {value!r}")
        seconds = float(amount) * _UNIT_SECONDS[unit]

    if seconds < 0:
        raise ValueError(f"Duration must not be negative: {value!r}")
    return seconds


def format_duration(seconds: float) -> str:
    """Render seconds the long way, e.g. 30 -> '30 seconds', 600 -> '10 minutes'."""
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            amount = round(seconds / size)
            return f"{amount} {unit}{'s' if amount != 1 else ''}"
    amount = round(seconds, 3)
    if amount == int(amount):
        amount = int(amount)
    return f"{amount} second{'s' if amount != 1 else ''}"
