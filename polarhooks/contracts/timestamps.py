from __future__ import annotations

import re
from datetime import datetime, timezone


# Serializers for an unset .NET-style DateTime emit this value.
_ZERO_TIMESTAMP_PREFIX = "0001-01-01T00:00:00"

_UTC_SUFFIX = re.compile(r"[zZ]$")
_FRACTION = re.compile(r"\.(\d+)")


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def is_zero_timestamp(s: str) -> bool:
    return s.startswith(_ZERO_TIMESTAMP_PREFIX)


def _normalize_iso8601(s: str) -> str:
    s = _UTC_SUFFIX.sub("+00:00", s.strip())
    # fromisoformat on 3.10 only takes 3 or 6 fractional digits; providers send 1-7.
    return _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], s, count=1)


def parse_iso8601(s: str) -> datetime:
    """Parse an ISO8601 timestamp; `Z`/`z` suffix accepted, naive values taken as UTC.

    Fractional seconds of any precision are padded or truncated to microseconds.
    """
    try:
        dt = datetime.fromisoformat(_normalize_iso8601(s))
    except ValueError as e:
        raise ValueError(f"invalid ISO8601 timestamp: {s}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
