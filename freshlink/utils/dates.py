# File: freshlink/utils/dates.py

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Accept full ISO timestamps as well as plain dates.
    return date.fromisoformat(value[:10])


def difference_in_days(target: DateLike, start: DateLike) -> int:
    """Whole calendar days from ``start`` to ``target`` (negative if past)."""
    return (to_date(target) - to_date(start)).days


def days_left(expiration: Optional[DateLike], today: Optional[date] = None) -> Optional[int]:
    if not expiration:
        return None
    today = today or date.today()
    return max(0, difference_in_days(expiration, today))
