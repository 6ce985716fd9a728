from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
import logging
import math
import numbers
from typing import Any, Callable, ClassVar, Sequence, TypeVar

from tickscale.adapters.extents import ExtentsProvider, get_domain
from tickscale.config import (
    DEFAULT_INTERVAL_COUNT,
    DEFAULT_LOG_BASE,
    DEFAULT_NEGATIVE_NUMBERS,
    DEFAULT_RANGE,
    MAX_DISPLAY_DECIMALS,
    ScaleDefaults,
)
from tickscale.errors import ScaleConfigError, UnsupportedModeError
from tickscale.nice import (
    NiceSettings,
    compute_nice_settings,
    display_decimals,
    format_tick,
    nice_step,
    settings_for_step,
    widen_degenerate,
)
from tickscale.scale import Scale, ScaleKind, coerce_range, rescale, validate_range


LOGGER = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class LogBase(Enum):
    BASE_2 = "base_2"
    BASE_E = "base_e"
    BASE_10 = "base_10"

    def log(self, value: float) -> float:
        if self is LogBase.BASE_2:
            return math.log2(value)
        if self is LogBase.BASE_10:
            return math.log10(value)
        return math.log(value)

    def power(self, exponent: float) -> float:
        if self is LogBase.BASE_2:
            return 2.0**exponent
        if self is LogBase.BASE_10:
            return 10.0**exponent
        return math.exp(exponent)


class NegativeNumbers(Enum):
    """How non-positive values are treated by a log transform.

    CLIP: values <= 0 map to the position of the domain's lower bound.
    MASK: values <= 0 map to zero in log space.
    SYM: the log of a negative ``v`` is ``-log(|v|)``.
    """

    CLIP = "clip"
    MASK = "mask"
    SYM = "sym"


def coerce_option(value: Any, enum_cls: type[E], option_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise UnsupportedModeError(f"option `{option_name}` cannot be {value!r}; valid values are {valid}") from None


@dataclass(frozen=True)
class LogTransform:
    """Log transform with an optional linear band ``|v| <= linear_range`` around zero.

    Outside the band the magnitude is ``max(L, log(|v|))``, so both branches
    agree at ``|v| == L``. Every ``|v|`` between ``L`` and ``base ** L`` shares the
    transformed value ``L``; automatic ticks inside that stretch collapse onto one
    position (base 10 with ``L = 1`` gives ticks 0, 1, 100 and no 10).

    Without a band, clip and mask take the true log of positive values and
    send non-positive values to 0. The symmetric mode floors ``log(|v|)`` at 0 so
    it stays monotone through (-1, 1).
    """

    base: LogBase = LogBase.BASE_2
    mode: NegativeNumbers = NegativeNumbers.CLIP
    linear_range: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", coerce_option(self.base, LogBase, "log_base"))
        object.__setattr__(self, "mode", coerce_option(self.mode, NegativeNumbers, "negative_numbers"))
        lin = self.linear_range
        if lin is not None:
            if isinstance(lin, bool) or not isinstance(lin, numbers.Real) or not math.isfinite(lin) or lin < 0:
                raise ScaleConfigError(f"linear_range must be a finite number >= 0, got {lin!r}")
            object.__setattr__(self, "linear_range", float(lin))

    def __call__(self, value: float) -> float:
        if self.linear_range is not None and abs(value) <= self.linear_range:
            return self.linear_part(value)
        return self.log_part(value)

    def linear_part(self, value: float) -> float:
        if self.mode is NegativeNumbers.SYM:
            return float(value)
        return float(value) if value > 0 else 0.0

    def log_part(self, value: float) -> float:
        if value == 0:
            return 0.0
        if value < 0 and self.mode is not NegativeNumbers.SYM:
            return 0.0
        magnitude = self.base.log(abs(value))
        if self.linear_range is not None:
            magnitude = max(self.linear_range, magnitude)
        elif self.mode is NegativeNumbers.SYM:
            magnitude = max(0.0, magnitude)
        return magnitude if value > 0 else -magnitude

    def inverse(self, log_value: float) -> float:
        """A domain value that transforms back to ``log_value``."""
        lin = self.linear_range
        if self.mode is not NegativeNumbers.SYM:
            if lin is not None and log_value <= lin:
                return max(float(log_value), 0.0)
            return self.base.power(float(log_value))
        magnitude = abs(log_value)
        if lin is not None and magnitude <= lin:
            return float(log_value)
        if magnitude == 0:
            return 0.0
        return math.copysign(self.base.power(magnitude), log_value)


def log_value(
    value: float,
    base: LogBase | str = LogBase.BASE_2,
    mode: NegativeNumbers | str = NegativeNumbers.CLIP,
    linear_range: float | None = None,
) -> float:
    return LogTransform(base=base, mode=mode, linear_range=linear_range)(value)


@dataclass(frozen=True)
class ContinuousLogScale(Scale):
    """Logarithmic mapping of a numeric domain onto a pixel range.

    Ticks are either computed (evenly spaced in log space, on whole powers of
    the base) or picked from ``tick_positions``, of which only the values
    inside the domain are shown::

        ContinuousLogScale.new(
            domain=(0, 100),
            tick_positions=[0, 5, 10, 15, 30, 60, 120, 240],
            log_base="base_10",
            negative_numbers="mask",
            linear_range=1,
        )
    """

    kind: ClassVar[ScaleKind] = ScaleKind.LOG

    domain: tuple[float, float] = (0.0, 1.0)
    range: tuple[float, float] = DEFAULT_RANGE
    log_base: LogBase = LogBase(DEFAULT_LOG_BASE)
    negative_numbers: NegativeNumbers = NegativeNumbers(DEFAULT_NEGATIVE_NUMBERS)
    linear_range: float | None = None
    interval_count: int = DEFAULT_INTERVAL_COUNT
    tick_positions: tuple[float, ...] | None = None
    custom_tick_formatter: Callable[[Any], str] | None = None
    max_display_decimals: int = MAX_DISPLAY_DECIMALS
    transform: LogTransform = field(init=False, repr=False, compare=False)
    settings: NiceSettings = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        transform = LogTransform(base=self.log_base, mode=self.negative_numbers, linear_range=self.linear_range)
        object.__setattr__(self, "log_base", transform.base)
        object.__setattr__(self, "negative_numbers", transform.mode)
        object.__setattr__(self, "linear_range", transform.linear_range)
        object.__setattr__(self, "transform", transform)
        object.__setattr__(self, "range", coerce_range(self.range, DEFAULT_RANGE))
        if isinstance(self.interval_count, bool) or not isinstance(self.interval_count, numbers.Integral) or self.interval_count < 1:
            raise ScaleConfigError(f"interval_count must be an integer >= 1, got {self.interval_count!r}")
        if self.tick_positions is not None:
            object.__setattr__(self, "tick_positions", tuple(self.tick_positions))

        settings = self._nice()
        lo, hi = self.domain
        object.__setattr__(self, "domain", (min(float(lo), float(hi)), max(float(lo), float(hi))))
        object.__setattr__(self, "settings", settings)

    @classmethod
    def new(
        cls,
        *,
        domain: tuple[float, float] | None = None,
        provider: ExtentsProvider | None = None,
        columns: str | Sequence[str] | None = None,
        defaults: ScaleDefaults | None = None,
        **kwargs: Any,
    ) -> "ContinuousLogScale":
        """Build a scale; the domain comes from ``domain``, else from the combined
        extents of ``columns`` in ``provider``, else ``(0, 1)``."""
        if defaults is not None:
            kwargs.setdefault("range", defaults.range)
            kwargs.setdefault("interval_count", defaults.interval_count)
            kwargs.setdefault("log_base", defaults.log_base)
            kwargs.setdefault("negative_numbers", defaults.negative_numbers)
            kwargs.setdefault("max_display_decimals", defaults.max_display_decimals)
        return cls(domain=get_domain(domain, provider, columns), **kwargs)

    def with_domain(self, vmin: float, vmax: float) -> "ContinuousLogScale":
        return replace(self, domain=(vmin, vmax))

    def with_interval_count(self, interval_count: int) -> "ContinuousLogScale":
        return replace(self, interval_count=interval_count, tick_positions=None)

    def with_tick_positions(self, tick_positions: Sequence[float] | None) -> "ContinuousLogScale":
        return replace(self, tick_positions=None if tick_positions is None else tuple(tick_positions))

    def with_tick_formatter(self, formatter: Callable[[Any], str] | None) -> "ContinuousLogScale":
        return replace(self, custom_tick_formatter=formatter)

    def set_range(self, start: float, finish: float) -> "ContinuousLogScale":
        return replace(self, range=validate_range(start, finish))

    def get_range(self) -> tuple[float, float]:
        return self.range

    @property
    def nice_domain(self) -> tuple[float, float]:
        return self.settings.nice_domain

    @property
    def display_decimals(self) -> int:
        return self.settings.display_decimals

    def log_value(self, value: float) -> float:
        return self.transform(value)

    def domain_to_range_fn(self) -> Callable[[float], float]:
        transform = self.transform
        clip = self.negative_numbers is NegativeNumbers.CLIP
        d_min, d_max = self.settings.nice_domain
        t_min = transform(d_min)
        t_width = transform(d_max) - t_min
        r_min, r_max = self.range
        r_width = r_max - r_min

        def to_range(value: float) -> float:
            if clip:
                t = t_min if value <= 0 else max(transform(value), t_min)
            else:
                t = transform(value)
            return rescale(t, t_min, t_width, r_min, r_width)

        return to_range

    def range_to_domain(self, position: float) -> float:
        d_min, d_max = self.settings.nice_domain
        t_min = self.transform(d_min)
        t_max = self.transform(d_max)
        r_min, r_max = self.range
        t = rescale(position, r_min, r_max - r_min, t_min, t_max - t_min)
        return self.transform.inverse(t)

    def ticks_domain(self) -> list[float]:
        return list(self.settings.ticks)

    def get_formatted_tick(self, value: Any) -> str:
        if self.custom_tick_formatter is not None:
            return self.custom_tick_formatter(value)
        if isinstance(value, numbers.Real) and not isinstance(value, bool):
            # Log ticks span several magnitudes, so each label gets its own precision.
            return format_tick(value, display_decimals([value], max_decimals=self.max_display_decimals))
        return format_tick(value, self.display_decimals)

    def _nice(self) -> NiceSettings:
        lo, hi = self.domain
        if self.tick_positions is not None:
            return compute_nice_settings(lo, hi, self.tick_positions, self.interval_count, max_decimals=self.max_display_decimals)

        linear = compute_nice_settings(lo, hi, None, self.interval_count, max_decimals=self.max_display_decimals)
        vmin, vmax = widen_degenerate(*sorted((float(lo), float(hi))))
        t_lo, t_hi = self.transform(vmin), self.transform(vmax)
        if t_hi - t_lo < 1.0:
            LOGGER.debug("log span %r..%r under one order of magnitude; using linear ticks", t_lo, t_hi)
            return linear

        step = max(nice_step(t_hi - t_lo, self.interval_count), Decimal(1))
        in_log_space = settings_for_step(t_lo, t_hi, step)
        ticks: list[float] = []
        for t in in_log_space.ticks:
            value = _clean(self.transform.inverse(t))
            if not ticks or value > ticks[-1]:
                ticks.append(value)
        # Masked, clipped or flattened bounds can lie outside the outer ticks.
        if vmin < ticks[0]:
            if self._same_position(vmin, ticks[0]):
                ticks[0] = vmin
            else:
                ticks.insert(0, vmin)
        if vmax > ticks[-1]:
            if len(ticks) > 1 and self._same_position(vmax, ticks[-1]):
                ticks[-1] = vmax
            else:
                ticks.append(vmax)
        return NiceSettings(
            nice_domain=(ticks[0], ticks[-1]),
            ticks=tuple(ticks),
            interval_size=None,
            interval_count=len(ticks) - 1,
            display_decimals=display_decimals(ticks, max_decimals=self.max_display_decimals),
        )

    def _same_position(self, a: float, b: float) -> bool:
        return math.isclose(self.transform(a), self.transform(b), abs_tol=1e-12)


def _clean(value: float) -> float:
    # Strip float noise left by power(); 2.0**3 stays 8.0, 10**-1 stays 0.1.
    return float(f"{value:.12g}")
