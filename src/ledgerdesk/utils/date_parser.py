"""Date parsing utilities for entry dates and list filters."""

from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "last-month", "this-year", "last-year")


def parse_date(date_str: str) -> date:
    """Parse a ledger date.

    Accepts ISO days ("2026-01-20"), backend timestamps
    ("2026-01-20T04:00:00.000Z", only the day part is kept) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = (date_str or "").strip().lower()
    if not text:
        raise ValueError("Empty date")

    today = date.today()
    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative:
        return relative[text]

    # Backend timestamps are UTC midnight of the local day; keep the day part
    if "t" in text and text[:4].isdigit():
        text = text.split("t")[0]

    try:
        return date_parser.parse(text, dayfirst=False, yearfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from e


def get_date_range(period: str) -> tuple[date, date]:
    """First and last day of a named accounting period.

    Args:
        period: One of this-month, last-month, this-year, last-year

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = (period or "").strip().lower()
    today = date.today()
    month_start = today.replace(day=1)
    year_start = today.replace(month=1, day=1)

    if period == "this-month":
        return month_start, today
    if period == "last-month":
        return month_start - relativedelta(months=1), month_start - timedelta(days=1)
    if period == "this-year":
        return year_start, today
    if period == "last-year":
        return year_start - relativedelta(years=1), year_start - timedelta(days=1)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
