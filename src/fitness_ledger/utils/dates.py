"""
Calendar date utilities.

All record maps are keyed by ISO calendar dates (YYYY-MM-DD). Helpers here
produce and normalize those keys so one day never has two representations.
"""

import re
from datetime import date, datetime, timedelta

import pytz
from dateutil import parser

from fitness_ledger.utils.exceptions import InvalidInputError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today(timezone_str: str = "UTC") -> date:
    """
    Get the current calendar date in a timezone.

    Args:
        timezone_str: Timezone string (e.g., "Asia/Kolkata").

    Returns:
        Today's date as seen in that timezone.
    """
    return datetime.now(pytz.timezone(timezone_str)).date()


def today_iso(timezone_str: str = "UTC") -> str:
    """Get today's date as an ISO string."""
    return today(timezone_str).isoformat()


def to_iso(value: date | str) -> str:
    """
    Normalize a date or strict ISO date string to its canonical key.

    Args:
        value: A date (or datetime) instance or a YYYY-MM-DD string.

    Returns:
        Canonical YYYY-MM-DD string.

    Raises:
        InvalidInputError: If the value is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()

    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, str) and ISO_DATE_PATTERN.match(value):
        try:
            return date.fromisoformat(value).isoformat()
        except ValueError as e:
            raise InvalidInputError(f"Invalid calendar date: {value!r}") from e

    raise InvalidInputError(f"Expected a YYYY-MM-DD date, got {value!r}")


def parse_date_input(value: str | None, timezone_str: str = "UTC") -> str:
    """
    Parse a user-entered date leniently.

    Accepts "today", "yesterday", empty input (today) and anything
    dateutil can read, e.g. "2024-1-5" or "5 Jan 2024".

    Args:
        value: Raw user input.
        timezone_str: Timezone used to resolve relative dates.

    Returns:
        Canonical YYYY-MM-DD string.

    Raises:
        InvalidInputError: If the input cannot be parsed as a date.
    """
    if value is None or not value.strip() or value.strip().lower() == "today":
        return today_iso(timezone_str)

    if value.strip().lower() == "yesterday":
        return (today(timezone_str) - timedelta(days=1)).isoformat()

    try:
        return parser.parse(value.strip()).date().isoformat()
    except (ValueError, OverflowError) as e:
        raise InvalidInputError(f"Could not parse date: {value!r}") from e


def range_days(n: int, end: date | None = None, timezone_str: str = "UTC") -> list[str]:
    """
    Build n consecutive ISO dates ending at `end`, oldest first.

    Args:
        n: Number of days. Non-positive values yield an empty list.
        end: Last day of the range. Defaults to today in `timezone_str`.
        timezone_str: Timezone used when `end` is not given.

    Returns:
        List of ISO date strings.
    """
    last = end if end is not None else today(timezone_str)
    return [(last - timedelta(days=i)).isoformat() for i in range(n - 1, -1, -1)]


def days_between(start: str, end: str) -> int:
    """Whole days from `start` to `end` (negative if `end` is earlier)."""
    return (date.fromisoformat(end) - date.fromisoformat(start)).days
