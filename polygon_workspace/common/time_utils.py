"""UTC-focused helpers for record timestamps."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def millis_to_iso(value: int | None) -> str | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat(timespec="milliseconds")
