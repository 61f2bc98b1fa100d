"""
Helper utility functions.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Tuple


def format_duration(minutes: int) -> str:
    """
    Format duration in human-readable format.

    Args:
        minutes: Duration in minutes

    Returns:
        Formatted string (e.g., "1h 30m", "45m")
    """
    if minutes < 60:
        return f"{minutes}m"

    hours = minutes // 60
    mins = minutes % 60

    if mins == 0:
        return f"{hours}h"

    return f"{hours}h {mins}m"


def format_number(value: float) -> str:
    """Render 5.0 as "5" and 5.25 as "5.25"."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def parse_time(time_str: str) -> Optional[datetime]:
    """
    Parse time string to datetime.

    Args:
        time_str: Time string in various formats

    Returns:
        datetime object or None if parsing fails
    """
    formats = [
        '%Y-%m-%d %H:%M:%S',
        '%Y-%m-%dT%H:%M:%S',
        '%Y-%m-%dT%H:%M:%S.%fZ',
        '%Y-%m-%d'
    ]

    try:
        return datetime.fromisoformat(time_str)
    except (TypeError, ValueError):
        pass

    for fmt in formats:
        try:
            return datetime.strptime(time_str, fmt)
        except (TypeError, ValueError):
            continue

    return None


def percent_of(value: float, total: float) -> int:
    """
    Whole-number percentage of value over total, 0 when total is 0.

    Halves round up (37.5 -> 38) rather than to the nearest even number.
    """
    if total == 0:
        return 0
    return round_half_up(100 * value / total)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int((value + 0.5) // 1)


def week_window(day: date) -> Tuple[date, date]:
    """
    Return the Monday-to-Sunday window containing day.

    Args:
        day: Any date inside the week

    Returns:
        (week_start, week_end) inclusive
    """
    week_start = day - timedelta(days=day.weekday())
    return week_start, week_start + timedelta(days=6)


def truncate_text(text: str, max_length: int = 100) -> str:
    """
    Truncate text with ellipsis.

    Args:
        text: Text to truncate
        max_length: Maximum length

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[:max_length-3] + "..."
