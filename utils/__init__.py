"""Shared utilities for Athlete Hub."""

from __future__ import annotations

__all__ = [
    "fmt_hours",
    "fmt_percent",
]


def fmt_hours(hours: float) -> str:
    """Format fractional hours into a string like ``7h 05m``.

    >>> fmt_hours(7.0833333)
    '7h 05m'
    >>> fmt_hours(0.5)
    '0h 30m'
    """

    total_minutes = int(round(max(hours, 0.0) * 60))
    h, m = divmod(total_minutes, 60)
    return f"{h}h {m:02d}m"


def fmt_percent(value: int) -> str:
    """Format a whole percentage for messages."""

    return f"{int(value)}%"
