"""
Utility functions for AlphaOne.
"""

from datetime import date, datetime, timezone
from typing import Optional


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse a record date into a comparable naive datetime.

    Accepts day-only ("2024-03-05"), minute precision ("2024-03-05T14:30")
    and full ISO strings with offsets or a trailing "Z". Aware values are
    converted to UTC before the offset is dropped.

    Returns None if the value cannot be parsed.
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)

    return parsed


def day_key(value: date) -> str:
    """
    Day prefix used to match record dates to a calendar day.

    Examples:
        date(2024, 3, 5) -> "2024-03-05"
    """
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def trade_day(value: str) -> Optional[date]:
    """Calendar day of a record date string, ignoring time of day."""
    if not value or not isinstance(value, str) or len(value) < 10:
        return None

    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def format_money(amount: float, signed: bool = False) -> str:
    """
    Format a monetary amount.

    Examples:
        1234.5 -> "$1,234.50"
        -50 -> "-$50.00"
        25 (signed) -> "+$25.00"
    """
    sign = ""
    if amount < 0:
        sign = "-"
    elif signed and amount > 0:
        sign = "+"

    return f"{sign}${abs(amount):,.2f}"
