"""Identifier generation."""

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Generate a unique identifier for a new transaction or contact.

    The ID is a base-36 millisecond timestamp followed by a random base-36
    suffix, matching the shape of IDs in existing ledger files.
    """
    timestamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(11))
    return f"{timestamp}{suffix}"
