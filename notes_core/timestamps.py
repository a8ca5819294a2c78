"""Timestamp parsing and generation for notes.

All comparisons go through :func:`parse_timestamp`, which never raises:
anything it cannot read becomes :data:`EPOCH`, so notes without a usable
timestamp sort after every dated note.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any, Optional

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_iso(moment: datetime) -> str:
    """Render *moment* as an ISO-8601 string in UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat()


def try_parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string, Unix seconds or datetime into aware UTC.

    Returns None for missing or unparseable input. Naive values are taken
    as UTC.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except OverflowError:
        return None


def parse_timestamp(value: Any) -> datetime:
    """Like :func:`try_parse_timestamp`, with ``EPOCH`` instead of None."""
    parsed = try_parse_timestamp(value)
    return parsed if parsed is not None else EPOCH
