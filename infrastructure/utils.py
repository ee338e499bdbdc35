"""Timestamp conversion and formatting helpers.

The sidecar stores timestamps as objects with whole seconds and the
nanosecond remainder since the Unix epoch, the shape every version of the
application reads. ISO-8601 strings are accepted on read as well.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import os
from typing import Any

DISPLAY_DT_FMT = "%Y-%m-%d %H:%M"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SECS = "secs_since_epoch"
_NANOS = "nanos_since_epoch"


def format_json_datetime(dt: datetime) -> dict[str, int]:
    """Format `dt` for the sidecar; naive values are taken as local time.

    Round-trips through `parse_json_datetime` at microsecond precision.
    """
    micros = (dt.astimezone() - _EPOCH) // timedelta(microseconds=1)
    secs, rem = divmod(micros, 1_000_000)
    return {_SECS: secs, _NANOS: rem * 1000}


def parse_json_datetime(value: Any) -> datetime:
    """Parse a sidecar timestamp into a naive local datetime.

    Raises:
        ValueError: If `value` is neither an epoch object nor an ISO string.
    """
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    if isinstance(value, dict) and _SECS in value:
        secs = value[_SECS]
        nanos = value.get(_NANOS, 0)
        if not isinstance(secs, int) or not isinstance(nanos, int) or isinstance(secs, bool):
            raise ValueError(f"Invalid epoch timestamp: {value!r}")
        try:
            return datetime.fromtimestamp(secs).replace(microsecond=nanos // 1000)
        except (OverflowError, OSError) as ex:
            raise ValueError(f"Timestamp out of range: {value!r}") from ex
    raise ValueError(f"Invalid timestamp: {value!r}")


def get_modified_datetime(st: os.stat_result) -> datetime:
    """Local modification time from a stat result."""
    return datetime.fromtimestamp(st.st_mtime)


def format_display_time(dt: datetime | None) -> str:
    """Format `dt` for display; empty string when None."""
    return dt.strftime(DISPLAY_DT_FMT) if dt else ""
