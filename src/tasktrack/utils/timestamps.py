"""Helpers for the integer millisecond timestamps stored by tasktrack."""

from __future__ import annotations

import math
import time
from datetime import UTC, date, datetime, time as dt_time


def now_ms() -> int:
    """Current time as milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def to_epoch_ms(value: int | float | str | date | datetime) -> int:
    """Convert a date-like value to epoch milliseconds.

    Accepts epoch milliseconds, ISO-8601 date or datetime strings (a trailing
    ``Z`` is understood), and ``date``/``datetime`` objects. Naive values are
    taken as UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a date")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"non-finite date value: {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("empty date string")
        value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp() * 1000)
    if isinstance(value, date):
        return int(datetime.combine(value, dt_time.min, tzinfo=UTC).timestamp() * 1000)
    raise ValueError(f"unsupported date value: {value!r}")
