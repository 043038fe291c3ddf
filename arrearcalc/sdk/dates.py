"""Calendar helpers for segment boundaries and proration.

Parsing never falls back to "today": an unparseable value raises
ValueError so a bad input cannot silently shift segment boundaries.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y", "%d-%m-%Y")


def parse_date(value: DateLike) -> date:
    """Parse a date from a date, datetime or string.

    Accepts ISO (YYYY-MM-DD) and the day-first forms used on pay sheets
    (DD.MM.YYYY, DD/MM/YYYY, DD-MM-YYYY).

    Raises:
        ValueError: If the value cannot be resolved to a calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Cannot interpret {value!r} as a date")

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unparseable date: {value!r}")


def days_in_month(d: date) -> int:
    """Number of days in the calendar month containing d."""
    return calendar.monthrange(d.year, d.month)[1]


def month_end(d: date) -> date:
    return d.replace(day=days_in_month(d))


def next_month_start(d: date) -> date:
    """First day of the month following the one containing d."""
    return month_end(d) + timedelta(days=1)


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def is_full_month(start: date, end: date) -> bool:
    """True when [start, end] is exactly one whole calendar month."""
    return start.day == 1 and end == month_end(start)
