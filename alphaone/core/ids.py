"""
Record identifiers.

Ids are opaque strings. Ordering carries no meaning.
"""

import logging
import random
import time
import uuid

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    """Encode a non-negative integer in base 36."""
    if number < 0:
        raise ValueError(f"Cannot encode negative number: {number}")

    if number == 0:
        return "0"

    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])

    return "".join(reversed(digits))


def fallback_id() -> str:
    """
    Timestamp + random suffix id.

    Used when the OS has no secure random source.
    """
    millis = int(time.time() * 1000)
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"id_{to_base36(millis)}{suffix}"


def new_id() -> str:
    """Generate a new unique record id (UUID4 when available)."""
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        logger.debug("No secure random source, using fallback id scheme")
        return fallback_id()
