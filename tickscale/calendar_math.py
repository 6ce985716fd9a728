from __future__ import annotations

import calendar
import datetime as dt
from enum import Enum
from typing import Any

from tickscale.errors import InvalidDomainError


MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_ONE_MICROSECOND = dt.timedelta(microseconds=1)


class DateTimeKind(Enum):
    NAIVE = "naive"
    AWARE = "aware"


def datetime_kind(value: Any) -> DateTimeKind:
    if not isinstance(value, dt.datetime):
        raise InvalidDomainError(f"date-time value required, got {value!r}")
    if value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None:
        return DateTimeKind.AWARE
    return DateTimeKind.NAIVE


def as_datetime(value: Any) -> dt.datetime:
    """Promote a plain ``date`` to naive midnight; pass date-times through."""
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    raise InvalidDomainError(f"date-time value required, got {value!r}")


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_month_end(value: dt.date) -> bool:
    return value.day == last_day_of_month(value.year, value.month)


def add_months(value: dt.datetime, months: int) -> dt.datetime:
    """Shift by whole months, clamping the day to the target month's length.

    Jan 31 + 1 month is Feb 28 (Feb 29 in leap years).
    """
    total = value.year * 12 + (value.month - 1) + months
    year, month0 = divmod(total, 12)
    month = month0 + 1
    day = min(value.day, last_day_of_month(year, month))
    return value.replace(year=year, month=month, day=day)


def add_years(value: dt.datetime, years: int) -> dt.datetime:
    return add_months(value, 12 * years)


def add_months_month_end(value: dt.datetime, months: int) -> dt.datetime:
    """Shift by whole months, landing on the last day of the target month."""
    shifted = add_months(value.replace(day=1), months)
    return shifted.replace(day=last_day_of_month(shifted.year, shifted.month))


def round_down_multiple(value: int, multiple: int) -> int:
    return (value // multiple) * multiple


def microseconds_between(later: dt.datetime, earlier: dt.datetime) -> int:
    """Signed elapsed microseconds; aware values are compared on the UTC timeline."""
    if later.tzinfo is not None and earlier.tzinfo is not None:
        later = later.astimezone(dt.timezone.utc)
        earlier = earlier.astimezone(dt.timezone.utc)
    return (later - earlier) // _ONE_MICROSECOND


def format_datetime(value: dt.datetime, fmt: str) -> str:
    """strftime with locale-independent month names and a ``%L`` millisecond field."""
    fmt = fmt.replace("%b", MONTH_ABBREVIATIONS[value.month - 1])
    fmt = fmt.replace("%L", f"{value.microsecond // 1000:03d}")
    fmt = fmt.replace("%Y", f"{value.year:04d}")
    return value.strftime(fmt)
