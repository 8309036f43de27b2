"""Date parsing utilities."""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date typed by the user into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last friday", "this month", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            if days_ago == 0:
                days_ago = 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_iso_date(value: object) -> date:
    """Parse an ISO-8601 date read from a ledger file.

    Full timestamps are accepted and truncated to their date part.

    Raises:
        ValueError: If the value is not an ISO-8601 date string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date {value!r}: {e}")


def parse_iso_datetime(value: object) -> datetime:
    """Parse an ISO-8601 timestamp read from a ledger file.

    Naive timestamps are assumed to be UTC.

    Raises:
        ValueError: If the value is not an ISO-8601 timestamp string
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid timestamp {value!r}: {e}")
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: Period string (this-month, this-year, this-week, last-month, last-year, last-week)
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, this-year, "
            "this-week, last-month, last-year, last-week"
        )
