from tickscale.config import DEFAULT_SCALE_DEFAULTS, ScaleDefaults, validate_scale_defaults
from tickscale.errors import (
    DomainNotSetError,
    InvalidDomainError,
    InvalidRangeError,
    InvalidTicksError,
    ScaleConfigError,
    ScaleError,
    UnsupportedModeError,
)
from tickscale.linear import ContinuousLinearScale
from tickscale.log import ContinuousLogScale, LogBase, LogTransform, NegativeNumbers, log_value
from tickscale.nice import NiceSettings, compute_nice_settings
from tickscale.ordinal import OrdinalScale
from tickscale.scale import (
    AxisTick,
    Scale,
    ScaleKind,
    axis_ticks,
    domain_to_range,
    domain_to_range_fn,
    get_formatted_tick,
    get_range,
    range_to_domain,
    set_range,
    ticks_domain,
    ticks_range,
)
from tickscale.timescale import TickInterval, TimeScale, TimeUnit

__all__ = [
    "AxisTick",
    "ContinuousLinearScale",
    "ContinuousLogScale",
    "DEFAULT_SCALE_DEFAULTS",
    "DomainNotSetError",
    "InvalidDomainError",
    "InvalidRangeError",
    "InvalidTicksError",
    "LogBase",
    "LogTransform",
    "NegativeNumbers",
    "NiceSettings",
    "OrdinalScale",
    "Scale",
    "ScaleConfigError",
    "ScaleDefaults",
    "ScaleError",
    "ScaleKind",
    "TickInterval",
    "TimeScale",
    "TimeUnit",
    "UnsupportedModeError",
    "axis_ticks",
    "compute_nice_settings",
    "domain_to_range",
    "domain_to_range_fn",
    "get_formatted_tick",
    "get_range",
    "log_value",
    "range_to_domain",
    "set_range",
    "ticks_domain",
    "ticks_range",
    "validate_scale_defaults",
]
