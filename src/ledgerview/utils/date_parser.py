"""Date parsing utilities."""

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = (
    "this-month",
    "this-year",
    "this-week",
    "last-month",
    "last-year",
    "last-week",
)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative forms "today", "yesterday", "tomorrow" and "last/this month",
    "last/this year", "last/this week".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

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


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of ``PERIODS``
        today: Reference day, defaults to the current date

    Returns:
        Tuple of (start_date, end_date), both inclusive

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

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
    )


def parse_instant(value: Any) -> Optional[datetime]:
    """Leniently convert a record timestamp to a naive UTC datetime.

    Aware values are converted to UTC; naive values are taken as UTC
    already. Missing or unparsable values, and aware values whose UTC
    equivalent falls outside the datetime range, yield ``None``.

    Args:
        value: datetime, date, ISO-like string or None

    Returns:
        Naive UTC datetime or None
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            instant = date_parser.isoparse(value.strip())
        except (ValueError, OverflowError):
            try:
                instant = date_parser.parse(value)
            except (ValueError, OverflowError):
                return None
    else:
        return None

    if instant.tzinfo is not None:
        try:
            instant = instant.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            return None
    return instant


def is_calendar_day(text: str) -> bool:
    """Return True if ``text`` names a day without a time of day.

    The string is parsed against two defaults differing only in the time;
    if the results differ, the time came from the default.

    >>> is_calendar_day("January 15, 2024"), is_calendar_day("2024-01-15T00:00")
    (True, False)
    """
    try:
        midnight = date_parser.parse(text, default=datetime(2000, 1, 1, 0, 0))
        noon = date_parser.parse(text, default=datetime(2000, 1, 1, 12, 30))
    except (ValueError, OverflowError):
        return False
    return midnight != noon


def to_calendar_date(value: Any) -> Optional[date]:
    """Return the UTC calendar date of a record timestamp, or None."""
    instant = parse_instant(value)
    return instant.date() if instant is not None else None
