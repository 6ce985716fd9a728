from __future__ import annotations

from dataclasses import dataclass, field, replace
import datetime as dt
from enum import Enum
import logging
import numbers
from typing import Any, Callable, ClassVar, Iterable

from tickscale.calendar_math import (
    DateTimeKind,
    add_months,
    add_months_month_end,
    add_years,
    as_datetime,
    datetime_kind,
    format_datetime,
    is_month_end,
    last_day_of_month,
    microseconds_between,
    round_down_multiple,
)
from tickscale.config import DEFAULT_RANGE, DEFAULT_TIME_INTERVAL_COUNT, ScaleDefaults
from tickscale.errors import DomainNotSetError, InvalidDomainError, ScaleConfigError
from tickscale.scale import Scale, ScaleKind, coerce_range, rescale, validate_range


LOGGER = logging.getLogger(__name__)


class TimeUnit(Enum):
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


@dataclass(frozen=True)
class TickInterval:
    unit: TimeUnit
    size: int
    # Exact for fixed-length units; months and years use 30 and 365 days.
    approx: dt.timedelta


_MILLISECOND = dt.timedelta(milliseconds=1)
_SECOND = dt.timedelta(seconds=1)
_MINUTE = dt.timedelta(minutes=1)
_HOUR = dt.timedelta(hours=1)
_DAY = dt.timedelta(days=1)
_MONTH = dt.timedelta(days=30)
_YEAR = dt.timedelta(days=365)

_FIXED_UNITS = {
    TimeUnit.MILLISECONDS: _MILLISECOND,
    TimeUnit.SECONDS: _SECOND,
    TimeUnit.MINUTES: _MINUTE,
    TimeUnit.HOURS: _HOUR,
    TimeUnit.DAYS: _DAY,
}


def _interval(unit: TimeUnit, size: int) -> TickInterval:
    base = _FIXED_UNITS.get(unit) or (_MONTH if unit is TimeUnit.MONTHS else _YEAR)
    return TickInterval(unit=unit, size=size, approx=base * size)


# Candidate tick spacings, finest first.
TICK_INTERVALS = (
    _interval(TimeUnit.MILLISECONDS, 1),
    _interval(TimeUnit.MILLISECONDS, 10),
    _interval(TimeUnit.MILLISECONDS, 100),
    _interval(TimeUnit.SECONDS, 1),
    _interval(TimeUnit.SECONDS, 5),
    _interval(TimeUnit.SECONDS, 15),
    _interval(TimeUnit.SECONDS, 30),
    _interval(TimeUnit.MINUTES, 1),
    _interval(TimeUnit.MINUTES, 5),
    _interval(TimeUnit.MINUTES, 15),
    _interval(TimeUnit.MINUTES, 30),
    _interval(TimeUnit.HOURS, 1),
    _interval(TimeUnit.HOURS, 3),
    _interval(TimeUnit.HOURS, 6),
    _interval(TimeUnit.HOURS, 12),
    _interval(TimeUnit.DAYS, 1),
    _interval(TimeUnit.DAYS, 2),
    _interval(TimeUnit.DAYS, 5),
    _interval(TimeUnit.DAYS, 10),
    _interval(TimeUnit.MONTHS, 1),
    _interval(TimeUnit.MONTHS, 3),
    _interval(TimeUnit.YEARS, 1),
    _interval(TimeUnit.YEARS, 2),
    _interval(TimeUnit.YEARS, 5),
    _interval(TimeUnit.YEARS, 10),
    _interval(TimeUnit.YEARS, 25),
    _interval(TimeUnit.YEARS, 50),
    _interval(TimeUnit.YEARS, 100),
)

_DISPLAY_FORMATS = {
    TimeUnit.MILLISECONDS: "%M:%S.%L",
    TimeUnit.SECONDS: "%M:%S",
    TimeUnit.MINUTES: "%H:%M:%S",
    TimeUnit.HOURS: "%d %b %H:%M",
    TimeUnit.DAYS: "%d %b %H:%M",
    TimeUnit.MONTHS: "%b %Y",
    TimeUnit.YEARS: "%Y",
}


@dataclass(frozen=True)
class TimeSettings:
    nice_domain: tuple[dt.datetime, dt.datetime]
    tick_interval: TickInterval
    interval_count: int
    ticks: tuple[dt.datetime, ...]
    display_format: str


def lookup_tick_interval(raw_interval: dt.timedelta) -> TickInterval:
    for interval in TICK_INTERVALS:
        if interval.approx >= raw_interval:
            return interval
    return TICK_INTERVALS[-1]


def add_interval(value: dt.datetime, interval: TickInterval, count: int) -> dt.datetime:
    """Move ``value`` by ``count`` steps of ``interval`` in local wall-clock time."""
    if interval.unit is TimeUnit.MONTHS:
        months = interval.size * count
        if interval.size > 1 and is_month_end(value):
            return add_months_month_end(value, months)
        return add_months(value, months)
    if interval.unit is TimeUnit.YEARS:
        return add_years(value, interval.size * count)
    return value + interval.approx * count


def round_down_to(value: dt.datetime, interval: TickInterval) -> dt.datetime:
    """Snap ``value`` back to the calendar boundary that starts its tick interval."""
    n = interval.size
    unit = interval.unit
    if unit is TimeUnit.MILLISECONDS:
        return value.replace(microsecond=round_down_multiple(value.microsecond // 1000, n) * 1000)
    if unit is TimeUnit.SECONDS:
        return value.replace(second=round_down_multiple(value.second, n), microsecond=0)
    if unit is TimeUnit.MINUTES:
        return value.replace(minute=round_down_multiple(value.minute, n), second=0, microsecond=0)
    if unit is TimeUnit.HOURS:
        return value.replace(hour=round_down_multiple(value.hour, n), minute=0, second=0, microsecond=0)

    midnight = value.replace(hour=0, minute=0, second=0, microsecond=0)
    if unit is TimeUnit.DAYS:
        return midnight
    if unit is TimeUnit.MONTHS:
        if n == 1:
            return midnight.replace(day=1)
        return _round_down_month_end(midnight, value, n)
    year = max(1, round_down_multiple(value.year, n))
    return midnight.replace(year=year, month=1, day=1)


def _round_down_month_end(midnight: dt.datetime, value: dt.datetime, n: int) -> dt.datetime:
    # Multi-month ticks sit on period ends: Mar 31, Jun 30, Sep 30, Dec 31 for quarters.
    month = round_down_multiple(midnight.month, n)
    year = midnight.year
    if month == 0:
        month, year = 12, year - 1
    snapped = midnight.replace(year=year, month=month, day=last_day_of_month(year, month))
    if snapped > value:
        snapped = add_months_month_end(snapped, -n)
    return snapped


@dataclass(frozen=True)
class TimeScale(Scale):
    """Maps naive or aware date-times onto a pixel range.

    Picks a tick spacing anywhere from milliseconds to centuries, snaps the
    first tick to a calendar boundary (midnight, first of the month, quarter
    end) and formats labels to suit the spacing. Naive and aware values cannot
    be mixed in one scale.
    """

    kind: ClassVar[ScaleKind] = ScaleKind.TIME

    domain: tuple[dt.datetime, dt.datetime] | None = None
    range: tuple[float, float] = DEFAULT_RANGE
    interval_count: int = DEFAULT_TIME_INTERVAL_COUNT
    custom_tick_formatter: Callable[[dt.datetime], str] | None = None
    settings: TimeSettings | None = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "range", coerce_range(self.range, DEFAULT_RANGE))
        if isinstance(self.interval_count, bool) or not isinstance(self.interval_count, numbers.Integral) or self.interval_count < 2:
            raise ScaleConfigError(f"interval_count must be an integer >= 2, got {self.interval_count!r}")
        if self.domain is None:
            return
        d_min, d_max = _validate_domain(*self.domain)
        object.__setattr__(self, "domain", (d_min, d_max))
        object.__setattr__(self, "settings", _nice(d_min, d_max, int(self.interval_count)))

    @classmethod
    def new(cls, *, defaults: ScaleDefaults | None = None, **kwargs: Any) -> "TimeScale":
        if defaults is not None:
            kwargs.setdefault("range", defaults.range)
            kwargs.setdefault("interval_count", defaults.time_interval_count)
        return cls(**kwargs)

    def with_domain(self, *args: Any) -> "TimeScale":
        """Set the domain from ``(min, max)`` arguments or from a collection of date-times."""
        if len(args) == 2:
            return replace(self, domain=(args[0], args[1]))
        if len(args) == 1:
            return replace(self, domain=_extents(args[0]))
        raise TypeError("with_domain() takes (min, max) or a collection of date-times")

    def with_interval_count(self, interval_count: int) -> "TimeScale":
        return replace(self, interval_count=interval_count)

    def with_tick_formatter(self, formatter: Callable[[dt.datetime], str] | None) -> "TimeScale":
        return replace(self, custom_tick_formatter=formatter)

    def set_range(self, start: float, finish: float) -> "TimeScale":
        return replace(self, range=validate_range(start, finish))

    def get_range(self) -> tuple[float, float]:
        return self.range

    @property
    def nice_domain(self) -> tuple[dt.datetime, dt.datetime] | None:
        return None if self.settings is None else self.settings.nice_domain

    @property
    def tick_interval(self) -> TickInterval | None:
        return None if self.settings is None else self.settings.tick_interval

    @property
    def effective_interval_count(self) -> int | None:
        return None if self.settings is None else self.settings.interval_count

    @property
    def display_format(self) -> str | None:
        return None if self.settings is None else self.settings.display_format

    def domain_to_range_fn(self) -> Callable[[Any], float]:
        d_min, d_max = self._require_settings().nice_domain
        kind = datetime_kind(d_min)
        width = microseconds_between(d_max, d_min)
        r_min, r_max = self.range
        r_width = r_max - r_min

        def transform(value: Any) -> float:
            value = as_datetime(value)
            if datetime_kind(value) is not kind:
                raise InvalidDomainError(f"cannot map a {datetime_kind(value).value} date-time onto a {kind.value} scale")
            return rescale(microseconds_between(value, d_min), 0, width, r_min, r_width)

        return transform

    def range_to_domain(self, position: float) -> dt.datetime:
        d_min, d_max = self._require_settings().nice_domain
        r_min, r_max = self.range
        width = microseconds_between(d_max, d_min)
        offset = dt.timedelta(microseconds=round(rescale(position, r_min, r_max - r_min, 0, width)))
        if datetime_kind(d_min) is DateTimeKind.AWARE:
            return (d_min.astimezone(dt.timezone.utc) + offset).astimezone(d_min.tzinfo)
        return d_min + offset

    def ticks_domain(self) -> list[dt.datetime]:
        return list(self._require_settings().ticks)

    def get_formatted_tick(self, value: Any) -> str:
        if self.custom_tick_formatter is not None:
            return self.custom_tick_formatter(value)
        return format_datetime(as_datetime(value), self._require_settings().display_format)

    def _require_settings(self) -> TimeSettings:
        if self.settings is None:
            raise DomainNotSetError("time scale has no domain; call with_domain() first")
        return self.settings


def _validate_domain(lo: Any, hi: Any) -> tuple[dt.datetime, dt.datetime]:
    lo = as_datetime(lo)
    hi = as_datetime(hi)
    lo_kind, hi_kind = datetime_kind(lo), datetime_kind(hi)
    if lo_kind is not hi_kind:
        raise InvalidDomainError(f"domain bounds must both be naive or both be aware, got {lo_kind.value} and {hi_kind.value}")
    return (lo, hi) if lo <= hi else (hi, lo)


def _extents(values: Iterable[Any]) -> tuple[dt.datetime, dt.datetime]:
    present = [as_datetime(v) for v in values if v is not None]
    if not present:
        raise InvalidDomainError("domain data contains no date-time values")
    kinds = {datetime_kind(v) for v in present}
    if len(kinds) > 1:
        raise InvalidDomainError("domain data mixes naive and aware date-times")
    return (min(present), max(present))


def _nice(d_min: dt.datetime, d_max: dt.datetime, interval_count: int) -> TimeSettings:
    if d_min == d_max:
        LOGGER.debug("widening zero-width time domain at %s to one day", d_min)
        d_max = d_min + _DAY
    width = microseconds_between(d_max, d_min)
    raw_interval = dt.timedelta(microseconds=width / (interval_count - 1))
    interval = lookup_tick_interval(raw_interval)
    LOGGER.debug("time span %s -> %s uses %d %s ticks", d_min, d_max, interval.size, interval.unit.value)

    start = round_down_to(d_min, interval)
    steps = 1
    while add_interval(start, interval, steps) < d_max:
        steps += 1
    ticks = tuple(add_interval(start, interval, i) for i in range(steps + 1))
    return TimeSettings(
        nice_domain=(start, ticks[-1]),
        tick_interval=interval,
        interval_count=steps,
        ticks=ticks,
        display_format=_DISPLAY_FORMATS[interval.unit],
    )
