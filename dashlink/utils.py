"""Utility functions for dashlink."""

import secrets
import time
from datetime import datetime, timezone

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    """Encode a non-negative integer in base 36."""
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate an opaque record id.

    Millisecond timestamp in base 36 followed by a random base-36 suffix,
    the same shape the dashboard uses for all of its records.
    """
    timestamp = to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(11))
    return timestamp + suffix


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def coerce_id(value):
    """Turn an integer record id into text; other values pass through."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value
