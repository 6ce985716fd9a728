from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import math
import numbers
from typing import Any, Callable, Sequence

from tickscale.errors import InvalidRangeError


class ScaleKind(Enum):
    LINEAR = "linear"
    LOG = "log"
    ORDINAL = "ordinal"
    TIME = "time"


@dataclass(frozen=True)
class AxisTick:
    value: Any
    position: float
    label: str


class Scale(ABC):
    """Common contract shared by every scale kind.

    Scales are immutable; every reconfiguration returns a new scale. A function
    returned by :meth:`domain_to_range_fn` captures the domain and range of the
    scale it came from and must be re-derived after ``set_range``.
    """

    kind: ScaleKind

    @abstractmethod
    def set_range(self, start: float, finish: float) -> "Scale":
        ...

    @abstractmethod
    def get_range(self) -> tuple[float, float]:
        ...

    @abstractmethod
    def domain_to_range_fn(self) -> Callable[[Any], Any]:
        ...

    def domain_to_range(self, value: Any) -> Any:
        return self.domain_to_range_fn()(value)

    @abstractmethod
    def range_to_domain(self, position: float) -> Any:
        ...

    @abstractmethod
    def ticks_domain(self) -> list[Any]:
        ...

    def ticks_range(self) -> list[Any]:
        transform = self.domain_to_range_fn()
        return [transform(tick) for tick in self.ticks_domain()]

    @abstractmethod
    def get_formatted_tick(self, value: Any) -> str:
        ...


def set_range(scale: Scale, start: float, finish: float) -> Scale:
    return scale.set_range(start, finish)


def get_range(scale: Scale) -> tuple[float, float]:
    return scale.get_range()


def domain_to_range(scale: Scale, value: Any) -> Any:
    return scale.domain_to_range(value)


def domain_to_range_fn(scale: Scale) -> Callable[[Any], Any]:
    return scale.domain_to_range_fn()


def range_to_domain(scale: Scale, position: float) -> Any:
    return scale.range_to_domain(position)


def ticks_domain(scale: Scale) -> list[Any]:
    return scale.ticks_domain()


def ticks_range(scale: Scale) -> list[Any]:
    return scale.ticks_range()


def get_formatted_tick(scale: Scale, value: Any) -> str:
    return scale.get_formatted_tick(value)


def axis_ticks(scale: Scale) -> list[AxisTick]:
    """Tick values, pixel positions and labels in one pass, for axis renderers."""
    transform = scale.domain_to_range_fn()
    return [
        AxisTick(value=tick, position=transform(tick), label=scale.get_formatted_tick(tick))
        for tick in scale.ticks_domain()
    ]


def validate_range(start: Any, finish: Any) -> tuple[float, float]:
    """Pixel ranges are always real numbers; ``start > finish`` is allowed."""
    for bound in (start, finish):
        if isinstance(bound, bool) or not isinstance(bound, numbers.Real):
            raise InvalidRangeError(f"range bounds must be numbers, got {bound!r}")
        if not math.isfinite(float(bound)):
            raise InvalidRangeError(f"range bounds must be finite, got {bound!r}")
    return (float(start), float(finish))


def coerce_range(value: Sequence[Any] | None, default: tuple[float, float]) -> tuple[float, float]:
    if value is None:
        return default
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or len(value) != 2:
        raise InvalidRangeError(f"a range is a (start, finish) pair, got {value!r}")
    return validate_range(value[0], value[1])


def rescale(value: float, domain_min: float, domain_width: float, range_min: float, range_width: float) -> float:
    """Affine map of ``value``; a zero-width domain maps to the range midpoint."""
    if domain_width == 0:
        return range_min + range_width / 2.0
    return range_min + (value - domain_min) * range_width / domain_width
