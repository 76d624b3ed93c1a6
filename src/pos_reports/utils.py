"""Calendar utilities shared by the record stores and aggregators.

Every join across record kinds happens on a calendar day, never on an exact
timestamp. This module provides the helpers that turn the various date
inputs into days and walk day ranges:

- Date parsing: standardized ``YYYY-MM-DD`` parsing
- Day truncation: ``date``/``datetime``/string to a calendar ``date``
- Month boundaries and day iteration

Examples:
    >>> from datetime import date
    >>> from pos_reports.utils import month_range
    >>> month_range(date(2024, 2, 10))
    (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))

"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from typing import Union

from pos_reports.exceptions import InvalidMonthError, InvalidRangeError

DayLike = Union[date, datetime, str]


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2023-01-15")
        datetime.date(2023, 1, 15)

    """
    return datetime.strptime(s, "%Y-%m-%d").date()


def to_day(value: DayLike) -> date:
    """Truncate a date-like value to its calendar day.

    Args:
        value: A ``date``, a ``datetime`` (its time part is dropped) or an
            ISO date string. Strings with a time part are accepted too.

    Returns:
        The calendar day as a ``date``.

    Examples:
        >>> to_day(datetime(2024, 6, 15, 23, 59))
        datetime.date(2024, 6, 15)
        >>> to_day("2024-06-15")
        datetime.date(2024, 6, 15)

    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if len(value) == 10:
        return parse_date(value)
    return datetime.fromisoformat(value).date()


def date_key(value: DayLike) -> str:
    """Return the ``YYYY-MM-DD`` join key of a date-like value."""
    return to_day(value).isoformat()


def year_month_key(value: DayLike) -> str:
    """Return the ``YYYY-MM`` label of the month containing ``value``."""
    return to_day(value).strftime("%Y-%m")


def in_day_range(value: DayLike, start: date, end: date) -> bool:
    """Check whether ``value`` falls on a day between start and end (inclusive)."""
    d = to_day(value)
    return start <= d <= end


def month_range(value: DayLike) -> tuple[date, date]:
    """Resolve the first and last calendar day of the month containing ``value``.

    Args:
        value: Any day within the month.

    Returns:
        Tuple of (first_day, last_day), both inclusive.

    Raises:
        InvalidMonthError: If the month boundaries cannot be computed.

    Examples:
        >>> month_range(date(2023, 4, 30))
        (datetime.date(2023, 4, 1), datetime.date(2023, 4, 30))

    """
    try:
        day = to_day(value)
        _, last = calendar.monthrange(day.year, day.month)
        return date(day.year, day.month, 1), date(day.year, day.month, last)
    except (ValueError, TypeError, OverflowError) as e:
        raise InvalidMonthError(f"Cannot resolve month for {value!r}: {e}") from e


def iter_days(start: date, end: date) -> Iterator[date]:
    """Iterate every calendar day from start to end, inclusive, in ascending order.

    Args:
        start: First day of the range.
        end: Last day of the range.

    Returns:
        Iterator over each day of the range. The range is validated eagerly,
        before the first day is produced.

    Raises:
        InvalidRangeError: If start is after end.

    Examples:
        >>> list(iter_days(date(2023, 1, 30), date(2023, 2, 1)))
        [datetime.date(2023, 1, 30), datetime.date(2023, 1, 31), datetime.date(2023, 2, 1)]

    """
    if start > end:
        raise InvalidRangeError(f"Start date {start} is after end date {end}")
    return _walk_days(start, end)


def _walk_days(start: date, end: date) -> Iterator[date]:
    cur = start
    step = timedelta(days=1)
    while True:
        yield cur
        # Stop before stepping past date.max.
        if cur >= end:
            break
        cur += step
