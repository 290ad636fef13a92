"""
Calendar-date helpers.

Everything here works on ``datetime.date`` values. Datetimes are truncated to
their date before any arithmetic, so results never depend on the time of day
or on daylight-saving transitions.
"""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            # "2025-01-05" as well as "2025-01-05T00:00:00.000Z"
            return date.fromisoformat(text[:10])
        except ValueError as exc:
            raise ValueError(f"Invalid date: {value!r}") from exc
    raise TypeError(f"Unsupported date value: {value!r}")


def calculate_days(start: DateLike, end: DateLike) -> int:
    """
    Inclusive number of calendar days between two dates.

    Same day gives 1, consecutive days give 2. The result is symmetric, an
    inverted range is not reported; callers validate ordering themselves.
    """
    return abs((parse_date(end) - parse_date(start)).days) + 1


def month_start(value: DateLike) -> date:
    return parse_date(value).replace(day=1)


def add_months(value: date, months: int) -> date:
    """First day of the month ``months`` away from ``value``'s month."""
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def trailing_months(as_of: DateLike, months_back: int) -> list[date]:
    """First days of the last ``months_back`` months, ending with ``as_of``'s month."""
    current = month_start(as_of)
    return [add_months(current, offset) for offset in range(-(months_back - 1), 1)]


def spans_overlap(
    start: date,
    end: date,
    range_start: Optional[date] = None,
    range_end: Optional[date] = None,
) -> bool:
    if range_start is not None and end < range_start:
        return False
    if range_end is not None and start > range_end:
        return False
    return True
