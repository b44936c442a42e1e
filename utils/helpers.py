"""
Helper Utility Module

This module provides various helper functions used throughout the Profile Dashboard.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Union

Number = Union[int, float]


def round_half_up(value: Number, digits: int = 0) -> Union[int, float]:
    """
    Round a number to the nearest value, with halves rounded away from zero.

    Python's round() uses banker's rounding, which would turn 2.5 into 2.
    Dashboard figures must round halves up.

    Args:
        value: The number to round
        digits: Number of decimal places to keep

    Returns:
        int when digits is 0, float otherwise
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)


def format_number(num: Number) -> str:
    """
    Format a count for display, e.g. 1500 -> "1.5K", 2300000 -> "2.3M".

    Args:
        num: The count to format

    Returns:
        str: Abbreviated count
    """
    if num >= 1_000_000:
        return f"{round_half_up(num / 1_000_000, 1):.1f}M"
    if num >= 1_000:
        return f"{round_half_up(num / 1_000, 1):.1f}K"
    return str(num)


def format_post_date(timestamp: Number) -> str:
    """
    Format a post's epoch timestamp (seconds) as a calendar date.

    Args:
        timestamp: Seconds since the epoch

    Returns:
        str: Date in YYYY-MM-DD form (UTC)
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def truncate_text(text: str, max_length: int = 100, add_ellipsis: bool = True) -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: The text to truncate
        max_length: Maximum length
        add_ellipsis: Whether to add an ellipsis if text is truncated

    Returns:
        str: Truncated text
    """
    if not text or len(text) <= max_length:
        return text

    truncated = text[:max_length].rstrip()
    if add_ellipsis:
        truncated += "..."

    return truncated


def safe_get(data: Dict[str, Any], *keys, default: Any = None) -> Any:
    """
    Safely get a value from a nested dictionary.

    Args:
        data: The dictionary to search
        *keys: The keys to follow
        default: Default value if key doesn't exist or is None

    Returns:
        The value at the specified keys or the default value
    """
    for key in keys:
        try:
            data = data[key]
        except (KeyError, TypeError, IndexError):
            return default
    return default if data is None else data
