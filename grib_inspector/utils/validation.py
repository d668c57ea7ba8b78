from typing import Optional

from grib_inspector.config import NAME_KEYS
from grib_inspector.utils.errors import ArgumentError, RangeError


def require_text(value, argument: str) -> str:
    """Return `value` if it is a non-empty string, otherwise raise ArgumentError"""
    if not isinstance(value, str) or not value.strip():
        raise ArgumentError(f"{argument} must be a non-empty string, got {value!r}")
    return value


def require_index(value, argument: str) -> int:
    # bool is an int subclass but never a valid index
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArgumentError(f"{argument} must be an integer, got {value!r}")
    return value


def require_name_key(name_key) -> str:
    if name_key not in NAME_KEYS:
        raise ArgumentError(f"name_key must be one of {', '.join(NAME_KEYS)}, got {name_key!r}")
    return name_key


def check_message_index(index: int, message_count: int) -> int:
    """Raise RangeError unless 1 <= index <= message_count"""
    if not 1 <= index <= message_count:
        raise RangeError(index, message_count)
    return index


def optional_record_count(value) -> Optional[int]:
    if value is None:
        return None
    value = require_index(value, "record_count")
    if value < 1:
        raise ArgumentError(f"record_count must be a positive integer, got {value}")
    return value
