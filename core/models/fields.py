"""Strict field coercion for JSON payloads from the bot server.

Every helper raises MalformedDataError instead of TypeError/ValueError so
callers see one error type for any shape problem.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from core.errors import MalformedDataError


def require_mapping(data: Any, what: str) -> Mapping:
    if not isinstance(data, Mapping):
        raise MalformedDataError(f"{what}: expected object, got {type(data).__name__}")
    return data


def require_list(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise MalformedDataError(f"{what}: expected array, got {type(data).__name__}")
    return data


def _get(data: Mapping, key: str, what: str) -> Any:
    if key not in data or data[key] is None:
        raise MalformedDataError(f"{what}: missing '{key}'")
    return data[key]


def as_float(data: Mapping, key: str, what: str) -> float:
    value = _get(data, key, what)
    # bool is an int subclass; never a valid amount
    if isinstance(value, bool):
        raise MalformedDataError(f"{what}: '{key}' is not numeric ({value!r})")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedDataError(f"{what}: '{key}' is not numeric ({value!r})") from None


def as_str(data: Mapping, key: str, what: str) -> str:
    value = _get(data, key, what)
    if isinstance(value, (dict, list)):
        raise MalformedDataError(f"{what}: '{key}' is not a scalar")
    return str(value)


def as_bool(data: Mapping, key: str, what: str) -> bool:
    value = _get(data, key, what)
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise MalformedDataError(f"{what}: '{key}' is not a boolean ({value!r})")


def parse_timestamp(value: Any, what: str) -> datetime:
    """Parse ISO-8601 text or epoch milliseconds into an aware UTC datetime."""
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise MalformedDataError(f"{what}: timestamp out of range ({value!r})") from None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedDataError(f"{what}: bad timestamp {value!r}") from None
    else:
        raise MalformedDataError(f"{what}: bad timestamp {value!r}")

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def as_timestamp(data: Mapping, key: str, what: str) -> datetime:
    return parse_timestamp(_get(data, key, what), what)


def as_optional_timestamp(data: Mapping, key: str, what: str) -> Optional[datetime]:
    value = data.get(key)
    if value is None:
        return None
    return parse_timestamp(value, what)
