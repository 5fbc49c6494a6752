"""Date parsing and month-stepping utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "next month", etc.

    Day-first is assumed for ambiguous numeric dates such as "05/03/2024",
    matching the dd/MM/yyyy format used across the dashboard.

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

    if date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return add_months(today, 1)
        elif period == "week":
            return today + timedelta(days=7)
        elif period == "year":
            return today + relativedelta(years=1)

    # ISO dates are unambiguous; everything else is read day-first
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    try:
        dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def add_months(start: date, months: int) -> date:
    """Return ``start`` shifted by whole calendar months.

    The day of month is preserved where possible and clamped to the last
    valid day otherwise (Jan 31 + 1 month -> Feb 28/29).

    Args:
        start: Starting date
        months: Number of months to add (may be negative)

    Returns:
        Shifted date
    """
    return start + relativedelta(months=months)
