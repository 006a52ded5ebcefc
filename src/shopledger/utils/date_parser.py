"""Parsing of user-entered dates.

Accepts ISO and free-form dates (through dateutil) plus a few shop-counter
shortcuts: ``today``, ``yesterday``, ``N days ago`` and the first day of
``this``/``last`` ``week``/``month``/``year``.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Callable

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_DAYS_AGO_RE = re.compile(r"^(\d+)\s+days?\s+ago$")

_PERIOD_START: dict[str, Callable[[date], date]] = {
    "week": lambda day: day - timedelta(days=day.weekday()),
    "month": lambda day: day.replace(day=1),
    "year": lambda day: day.replace(month=1, day=1),
}

_PERIOD_STEP = {
    "week": relativedelta(weeks=1),
    "month": relativedelta(months=1),
    "year": relativedelta(years=1),
}


def _relative_date(text: str, today: date) -> date | None:
    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    match = _DAYS_AGO_RE.match(text)
    if match:
        return today - timedelta(days=int(match.group(1)))

    which, _, period = text.partition(" ")
    if which in ("this", "last") and period in _PERIOD_START:
        anchor = today if which == "this" else today - _PERIOD_STEP[period]
        return _PERIOD_START[period](anchor)
    return None


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Args:
        date_str: "2024-01-15", "15 Jan 2024", "yesterday", "3 days ago",
            "last month" and similar

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = " ".join(date_str.strip().lower().split())
    relative = _relative_date(text, date.today())
    if relative is not None:
        return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(date_str: str) -> datetime:
    """Parse a date string into midnight of that day, for backdating records."""
    return datetime.combine(parse_date(date_str), time.min)
