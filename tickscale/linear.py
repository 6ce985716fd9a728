from __future__ import annotations

from dataclasses import dataclass, field, replace
import numbers
from typing import Any, Callable, ClassVar

from tickscale.adapters.extents import numeric_extents
from tickscale.config import DEFAULT_INTERVAL_COUNT, DEFAULT_RANGE, MAX_DISPLAY_DECIMALS, ScaleDefaults
from tickscale.errors import DomainNotSetError, InvalidDomainError, ScaleConfigError
from tickscale.nice import NiceSettings, compute_nice_settings, format_tick
from tickscale.scale import Scale, ScaleKind, coerce_range, rescale, validate_range


@dataclass(frozen=True)
class ContinuousLinearScale(Scale):
    """Affine mapping of a numeric domain onto a pixel range.

    The domain is rounded out so that ticks land on round numbers: a data
    domain of 0.0 -> 8.7 with the default ten ticks becomes 0 -> 9 with a tick
    on every integer. ``interval_count`` is the target number of ticks; the
    effective count after rounding is ``effective_interval_count``.

    Typical setup::

        y_scale = ContinuousLinearScale.new().with_domain(0.0, 8.7).set_range(300.0, 0.0)
        to_px = y_scale.domain_to_range_fn()
        points = [to_px(v) for v in values]
    """

    kind: ClassVar[ScaleKind] = ScaleKind.LINEAR

    domain: tuple[float, float] | None = None
    range: tuple[float, float] = DEFAULT_RANGE
    interval_count: int = DEFAULT_INTERVAL_COUNT
    custom_tick_formatter: Callable[[Any], str] | None = None
    max_display_decimals: int = MAX_DISPLAY_DECIMALS
    settings: NiceSettings | None = field(init=False, default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "range", coerce_range(self.range, DEFAULT_RANGE))
        _validate_interval_count(self.interval_count)
        if self.domain is None:
            return
        lo, hi = self.domain
        settings = compute_nice_settings(
            lo,
            hi,
            None,
            self.interval_count - 1,
            max_decimals=self.max_display_decimals,
        )
        object.__setattr__(self, "domain", (min(float(lo), float(hi)), max(float(lo), float(hi))))
        object.__setattr__(self, "settings", settings)

    @classmethod
    def new(cls, *, defaults: ScaleDefaults | None = None, **kwargs: Any) -> "ContinuousLinearScale":
        if defaults is not None:
            kwargs.setdefault("range", defaults.range)
            kwargs.setdefault("interval_count", defaults.interval_count)
            kwargs.setdefault("max_display_decimals", defaults.max_display_decimals)
        return cls(**kwargs)

    def with_domain(self, *args: Any) -> "ContinuousLinearScale":
        """Set the domain from a ``(min, max)`` pair of arguments or from raw values.

        Raw values may contain ``None`` and non-numeric entries; they are ignored.
        """
        if len(args) == 2:
            lo, hi = args
        elif len(args) == 1:
            extents = numeric_extents(args[0])
            if extents is None:
                raise InvalidDomainError("domain data contains no numeric values")
            lo, hi = extents
        else:
            raise TypeError("with_domain() takes (min, max) or a collection of values")
        return replace(self, domain=(lo, hi))

    def with_interval_count(self, interval_count: int) -> "ContinuousLinearScale":
        return replace(self, interval_count=interval_count)

    def with_tick_formatter(self, formatter: Callable[[Any], str] | None) -> "ContinuousLinearScale":
        return replace(self, custom_tick_formatter=formatter)

    def set_range(self, start: float, finish: float) -> "ContinuousLinearScale":
        return replace(self, range=validate_range(start, finish))

    def get_range(self) -> tuple[float, float]:
        return self.range

    @property
    def nice_domain(self) -> tuple[float, float] | None:
        return None if self.settings is None else self.settings.nice_domain

    @property
    def interval_size(self) -> float | None:
        return None if self.settings is None else self.settings.interval_size

    @property
    def effective_interval_count(self) -> int | None:
        return None if self.settings is None else self.settings.interval_count

    @property
    def display_decimals(self) -> int | None:
        return None if self.settings is None else self.settings.display_decimals

    def domain_to_range_fn(self) -> Callable[[float], float]:
        d_min, d_max = self._require_settings().nice_domain
        r_min, r_max = self.range
        d_width = d_max - d_min
        r_width = r_max - r_min

        def transform(value: float) -> float:
            return rescale(value, d_min, d_width, r_min, r_width)

        return transform

    def range_to_domain(self, position: float) -> float:
        d_min, d_max = self._require_settings().nice_domain
        r_min, r_max = self.range
        return rescale(position, r_min, r_max - r_min, d_min, d_max - d_min)

    def ticks_domain(self) -> list[float]:
        return list(self._require_settings().ticks)

    def get_formatted_tick(self, value: Any) -> str:
        if self.custom_tick_formatter is not None:
            return self.custom_tick_formatter(value)
        return format_tick(value, self.display_decimals)

    def _require_settings(self) -> NiceSettings:
        if self.settings is None:
            raise DomainNotSetError("linear scale has no domain; call with_domain() first")
        return self.settings


def _validate_interval_count(interval_count: Any) -> None:
    if isinstance(interval_count, bool) or not isinstance(interval_count, numbers.Integral) or interval_count < 2:
        raise ScaleConfigError(f"interval_count must be an integer >= 2, got {interval_count!r}")
