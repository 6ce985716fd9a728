from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal, InvalidOperation
import logging
import math
import numbers
from typing import Iterable, Sequence

import numpy as np

from tickscale.config import MAX_DISPLAY_DECIMALS
from tickscale.errors import InvalidDomainError, InvalidTicksError, ScaleConfigError


LOGGER = logging.getLogger(__name__)

# Nice step mantissas; 10 rolls over into the next power of ten.
STEP_MANTISSAS = (1, 2, 5, 10)


@dataclass(frozen=True)
class NiceSettings:
    nice_domain: tuple[float, float]
    ticks: tuple[float, ...]
    interval_size: float | None
    interval_count: int
    display_decimals: int


def widen_degenerate(vmin: float, vmax: float) -> tuple[float, float]:
    """Give a zero-width domain a usable width by stretching it to zero."""
    if vmin != vmax:
        return (vmin, vmax)
    LOGGER.debug("widening degenerate domain (%r, %r)", vmin, vmax)
    if vmax > 0:
        return (0.0, vmax)
    if vmax < 0:
        return (vmax, 0.0)
    return (0.0, 1.0)


def compute_nice_settings(
    vmin: float,
    vmax: float,
    tick_positions: Sequence[float] | None = None,
    interval_count: int = 10,
    *,
    max_decimals: int = MAX_DISPLAY_DECIMALS,
) -> NiceSettings:
    """Round a raw domain out to a nice domain and produce its ticks.

    With ``tick_positions`` the domain is passed through unchanged and only the
    candidate ticks that fall inside it are kept.
    """
    vmin, vmax = _ordered_bounds(vmin, vmax)
    if not isinstance(interval_count, numbers.Integral) or isinstance(interval_count, bool) or interval_count < 1:
        raise ScaleConfigError(f"interval_count must be an integer >= 1, got {interval_count!r}")
    vmin, vmax = widen_degenerate(vmin, vmax)

    if tick_positions is not None:
        return _fixed_tick_settings(vmin, vmax, tick_positions, max_decimals=max_decimals)

    step = nice_step(vmax - vmin, int(interval_count))
    settings = settings_for_step(vmin, vmax, step, max_decimals=max_decimals)
    # An unaligned domain can straddle one extra step; widen until it fits.
    # Spans across zero need two intervals, hence the floor of 2.
    while settings.interval_count > max(int(interval_count), 2):
        step = next_nice_step(step)
        settings = settings_for_step(vmin, vmax, step, max_decimals=max_decimals)
    return settings


def nice_step(width: float, interval_count: int) -> Decimal:
    """Smallest 1/2/5 x 10^n step that splits ``width`` into at most ``interval_count`` parts."""
    if width <= 0 or not math.isfinite(width):
        raise InvalidDomainError(f"domain width must be finite and > 0, got {width!r}")
    raw = width / interval_count
    exponent = math.floor(math.log10(raw))
    frac = raw / (10.0**exponent)
    # log10 can land one off for values right at a power of ten.
    if frac >= 10.0 * (1 - 1e-12):
        exponent += 1
        frac /= 10.0
    elif frac < 1.0 * (1 - 1e-12):
        exponent -= 1
        frac *= 10.0

    for mantissa in STEP_MANTISSAS:
        if mantissa >= frac * (1 - 1e-9):
            if mantissa == 10:
                return Decimal(1).scaleb(exponent + 1)
            return Decimal(mantissa).scaleb(exponent)
    return Decimal(1).scaleb(exponent + 1)


def next_nice_step(step: Decimal) -> Decimal:
    """The 1/2/5 step following ``step``: 0.2 -> 0.5 -> 1 -> 2."""
    _, digits, exponent = step.normalize().as_tuple()
    mantissa = digits[0]
    if mantissa == 1:
        return Decimal(2).scaleb(exponent)
    if mantissa == 2:
        return Decimal(5).scaleb(exponent)
    return Decimal(1).scaleb(exponent + 1)


def settings_for_step(
    vmin: float,
    vmax: float,
    step: Decimal,
    *,
    max_decimals: int = MAX_DISPLAY_DECIMALS,
) -> NiceSettings:
    """Expand ``(vmin, vmax)`` to multiples of ``step`` and emit every multiple between."""
    lo = _to_decimal(vmin) / step
    hi = _to_decimal(vmax) / step
    k_min = int(lo.to_integral_value(rounding=ROUND_FLOOR))
    k_max = int(hi.to_integral_value(rounding=ROUND_CEILING))
    if k_max <= k_min:
        k_max = k_min + 1

    ticks = tuple(float((k_min + i) * step) for i in range(k_max - k_min + 1))
    return NiceSettings(
        nice_domain=(ticks[0], ticks[-1]),
        ticks=ticks,
        interval_size=float(step),
        interval_count=k_max - k_min,
        display_decimals=display_decimals(ticks, max_decimals=max_decimals),
    )


def display_decimals(ticks: Iterable[float], *, max_decimals: int = MAX_DISPLAY_DECIMALS) -> int:
    """Fewest decimals that render every tick exactly and keep neighbours distinct."""
    values = [float(v) for v in ticks]
    if not values:
        return 0
    finite = [v for v in values if math.isfinite(v)]
    magnitude = max((abs(v) for v in finite), default=0.0)
    atol = max(magnitude * 1e-9, 1e-15)
    for decimals in range(max_decimals + 1):
        if not all(abs(round(v, decimals) - v) <= atol for v in finite):
            continue
        labels = [format_number(v, decimals) for v in values]
        if all(a != b for a, b in zip(labels, labels[1:])):
            return decimals
    return max_decimals


def format_number(value: float, decimals: int) -> str:
    if not math.isfinite(value):
        return str(value)
    d = _to_decimal(value)
    quant = Decimal(1).scaleb(-decimals)
    try:
        out = format(d.quantize(quant), "f")
    except InvalidOperation:
        out = f"{value:.{decimals}f}"
    if out.startswith("-") and out.strip("-0.") == "":
        out = out[1:]
    return out


def format_tick(value: object, decimals: int | None) -> str:
    """Render a numeric tick; integers print as-is, floats at ``decimals`` places."""
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return str(int(value))
    if not isinstance(value, numbers.Real):
        return str(value)
    return format_number(float(value), 0 if decimals is None else decimals)


def _fixed_tick_settings(
    vmin: float,
    vmax: float,
    tick_positions: Sequence[float],
    *,
    max_decimals: int,
) -> NiceSettings:
    candidates = list(tick_positions)
    for tick in candidates:
        if isinstance(tick, bool) or not isinstance(tick, numbers.Real) or math.isnan(float(tick)):
            raise InvalidTicksError(f"tick positions must be real numbers, got {tick!r}")
    selected = sorted((t for t in candidates if vmin <= t <= vmax), key=float)
    return NiceSettings(
        nice_domain=(float(vmin), float(vmax)),
        ticks=tuple(selected),
        interval_size=None,
        interval_count=max(len(selected) - 1, 0),
        display_decimals=display_decimals(selected, max_decimals=max_decimals),
    )


def _ordered_bounds(vmin: object, vmax: object) -> tuple[float, float]:
    for bound in (vmin, vmax):
        if isinstance(bound, bool) or not isinstance(bound, numbers.Real):
            raise InvalidDomainError(f"numeric domain bounds required, got {bound!r}")
        if not np.isfinite(float(bound)):
            raise InvalidDomainError(f"domain bounds must be finite, got {bound!r}")
    lo = float(vmin)  # type: ignore[arg-type]
    hi = float(vmax)  # type: ignore[arg-type]
    return (lo, hi) if lo <= hi else (hi, lo)


def _to_decimal(value: float) -> Decimal:
    # repr round-trips, so 0.1 stays 0.1 rather than its binary expansion.
    return Decimal(repr(float(value)))
