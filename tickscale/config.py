from __future__ import annotations

from dataclasses import asdict, dataclass
import math
from typing import Any, Mapping

from tickscale.errors import ScaleConfigError


DEFAULT_INTERVAL_COUNT = 10
DEFAULT_TIME_INTERVAL_COUNT = 11
DEFAULT_ORDINAL_PADDING = 0.1
DEFAULT_LOG_BASE = "base_2"
DEFAULT_NEGATIVE_NUMBERS = "clip"
DEFAULT_RANGE = (0.0, 1.0)
MAX_DISPLAY_DECIMALS = 12

_LOG_BASES = ("base_2", "base_e", "base_10")
_NEGATIVE_NUMBERS = ("clip", "mask", "sym")


@dataclass(frozen=True)
class ScaleDefaults:
    """Construction defaults shared by every scale kind."""

    interval_count: int = DEFAULT_INTERVAL_COUNT
    time_interval_count: int = DEFAULT_TIME_INTERVAL_COUNT
    ordinal_padding: float = DEFAULT_ORDINAL_PADDING
    log_base: str = DEFAULT_LOG_BASE
    negative_numbers: str = DEFAULT_NEGATIVE_NUMBERS
    max_display_decimals: int = MAX_DISPLAY_DECIMALS
    range: tuple[float, float] = DEFAULT_RANGE


DEFAULT_SCALE_DEFAULTS = ScaleDefaults()


def validate_scale_defaults(overrides: Mapping[str, Any] | None = None) -> ScaleDefaults:
    """Validate and merge overrides against the built-in defaults."""

    raw: dict[str, Any] = asdict(DEFAULT_SCALE_DEFAULTS)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ScaleConfigError(f"unknown scale default: {key}")
            raw[key] = value

    for key in ("interval_count", "time_interval_count"):
        if not _is_int(raw[key]) or raw[key] < 2:
            raise ScaleConfigError(f"`{key}` must be an integer >= 2")

    if not _is_int(raw["max_display_decimals"]) or not 0 <= raw["max_display_decimals"] <= 20:
        raise ScaleConfigError("`max_display_decimals` must be an integer in [0, 20]")

    padding = raw["ordinal_padding"]
    if not _is_real(padding) or not 0.0 <= float(padding) < 1.0:
        raise ScaleConfigError("`ordinal_padding` must be a number in [0, 1)")

    if raw["log_base"] not in _LOG_BASES:
        raise ScaleConfigError(f"`log_base` must be one of {_LOG_BASES}")
    if raw["negative_numbers"] not in _NEGATIVE_NUMBERS:
        raise ScaleConfigError(f"`negative_numbers` must be one of {_NEGATIVE_NUMBERS}")

    rng = raw["range"]
    if not isinstance(rng, (tuple, list)) or len(rng) != 2 or not all(_is_real(v) for v in rng):
        raise ScaleConfigError("`range` must be a pair of numbers")

    return ScaleDefaults(
        interval_count=int(raw["interval_count"]),
        time_interval_count=int(raw["time_interval_count"]),
        ordinal_padding=float(padding),
        log_base=str(raw["log_base"]),
        negative_numbers=str(raw["negative_numbers"]),
        max_display_decimals=int(raw["max_display_decimals"]),
        range=(float(rng[0]), float(rng[1])),
    )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(float(value))
