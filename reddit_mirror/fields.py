"""Typed accessors for the loosely-shaped JSON returned by Reddit."""
from __future__ import annotations

import logging
import math
from typing import Any

logger = logging.getLogger(__name__)

U64_LIMIT = 2**64


def get_path(node: Any, *keys: str | int) -> Any:
    """Walk ``node`` by dict keys and list indexes, returning ``None`` on any miss."""
    current = node
    for key in keys:
        if isinstance(key, int) and not isinstance(key, bool):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        elif isinstance(current, dict):
            current = current.get(key)
        else:
            return None
        if current is None:
            return None
    return current


def _malformed(value: Any, expected: str) -> None:
    if value is not None:
        logger.debug("Malformed field: expected %s, got %s (%r)", expected, type(value).__name__, value)


def as_str(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    _malformed(value, "string")
    return default


def as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        _malformed(value, "integer")
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    _malformed(value, "integer")
    return default


def as_float(value: Any, default: float = 0.0) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            number = float(value)
        except OverflowError:
            number = math.inf
        if math.isfinite(number):
            return number
    _malformed(value, "number")
    return default


def as_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    _malformed(value, "boolean")
    return default


def as_optional_u64(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < U64_LIMIT:
        return value
    _malformed(value, "unsigned 64-bit integer")
    return None


def as_list(value: Any) -> list[Any]:
    if isinstance(value, list):
        return value
    _malformed(value, "array")
    return []


def as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    _malformed(value, "object")
    return {}


def val(node: Any, key: str) -> str:
    """Shorthand for the string at ``node["data"][key]``."""
    return as_str(get_path(node, "data", key))
