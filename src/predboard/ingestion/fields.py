"""Tolerant field coercion shared by the venue normalizers."""

from __future__ import annotations

import json
import math
from datetime import datetime, timedelta, timezone
from typing import Any

NEW_MARKET_WINDOW = timedelta(days=7)


def to_amount(value: Any) -> float | None:
    """Number or numeric string -> non-negative finite float. None if unparseable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(num):
        return None
    return max(num, 0.0)


def first_amount(raw: dict[str, Any], *keys: str) -> float:
    """First parseable amount among keys, else 0."""
    for key in keys:
        num = to_amount(raw.get(key))
        if num is not None:
            return num
    return 0.0


def optional_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def first_str(raw: dict[str, Any], *keys: str) -> str | None:
    """First non-empty string value among keys."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def decode_json(value: Any) -> Any:
    """Decode a JSON-encoded string; non-strings pass through. Bad JSON -> None."""
    if not isinstance(value, str):
        return value
    if not value.strip():
        return None
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """ISO-8601 string -> aware datetime (naive values are taken as UTC)."""
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_recent(value: Any, now: datetime | None = None, window: timedelta = NEW_MARKET_WINDOW) -> bool:
    """True if the timestamp falls within `window` before now."""
    ts = parse_timestamp(value)
    if ts is None:
        return False
    now = now or datetime.now(timezone.utc)
    return ts >= now - window
