"""Human readable labels for sizes and timestamps."""

from __future__ import annotations

import time
from typing import Optional

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(n: float) -> str:
    """Format a byte count with binary (1024) prefixes.

    >>> format_bytes(0)
    '0 B'
    >>> format_bytes(1536)
    '1.5 KB'
    """
    if n < 1024:
        return f"{int(n)} B"

    value = float(n)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f} {BYTE_UNITS[unit]}"


def time_ago(timestamp_ms: float, now_ms: Optional[float] = None) -> str:
    """Relative label for an epoch-millisecond timestamp.

    Timestamps in the future are reported as ``just now``.
    """
    if now_ms is None:
        now_ms = time.time() * 1000

    seconds = max(0, int((now_ms - timestamp_ms) // 1000))
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    return f"{days}d ago"
