"""Timestamp formatting - pure functions turning UNIX seconds into display strings."""
import math
from datetime import datetime, timezone

# Largest unit first; the first non-zero magnitude wins
RELATIVE_UNITS = (
    ("day", 24 * 60 * 60),
    ("hour", 60 * 60),
    ("minute", 60),
)


def to_absolute_utc(unix: int) -> str:
    """
    Format a timestamp as 12-hour UTC time and day/month/year date.

    Example: 0 -> "12:00:00 AM on 01/01/1970"
    """
    date = datetime.fromtimestamp(unix, tz=timezone.utc)

    if date.hour < 12:
        ampm = "AM"
        hours12 = 12 if date.hour == 0 else date.hour
    else:
        ampm = "PM"
        hours12 = 12 if date.hour == 12 else date.hour - 12

    return (
        f"{hours12}:{date.minute:02d}:{date.second:02d} {ampm} "
        f"on {date.day:02d}/{date.month:02d}/{date.year}"
    )


def to_absolute_locale(unix: int) -> str:
    """Format a timestamp with the host locale's time and date conventions."""
    date = datetime.fromtimestamp(unix)
    return f"{date.strftime('%X')} on {date.strftime('%x')}"


def to_relative(now: float, unix: int) -> str:
    """
    Describe how long ago (or how far ahead) a timestamp is relative to now.

    Magnitudes are floor-divided and the largest non-zero unit among days,
    hours and minutes is used; anything shorter is reported in seconds.

    Args:
        now: Current time in UNIX seconds
        unix: Timestamp to describe

    Returns:
        str: e.g. "1 hour ago", "45 seconds ago", "in 2 days"
    """
    elapsed = math.floor(now - unix)
    magnitude = abs(elapsed)

    unit, count = "second", magnitude
    for name, size in RELATIVE_UNITS:
        if magnitude // size > 0:
            unit, count = name, magnitude // size
            break

    label = unit if count == 1 else f"{unit}s"
    if elapsed < 0:
        return f"in {count} {label}"
    return f"{count} {label} ago"
