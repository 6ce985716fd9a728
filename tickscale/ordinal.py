from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field, replace
import math
import numbers
from typing import Any, Callable, ClassVar, Iterable

from tickscale.config import DEFAULT_ORDINAL_PADDING, DEFAULT_RANGE, ScaleDefaults
from tickscale.errors import ScaleConfigError
from tickscale.scale import Scale, ScaleKind, coerce_range, validate_range


@dataclass(frozen=True)
class OrdinalScale(Scale):
    """Maps discrete categories to equal-width bands across the range.

    The range is split into one slot per category and adjacent bands are
    separated by a gap of ``padding * slot``. The first band starts on the
    range start and the last band ends on the range end. Categories keep the
    order of first appearance, which is the display order.
    """

    kind: ClassVar[ScaleKind] = ScaleKind.ORDINAL

    domain: tuple[Any, ...] = ()
    range: tuple[float, float] = DEFAULT_RANGE
    padding: float = DEFAULT_ORDINAL_PADDING
    index: dict[Any, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        categories = _unique(self.domain)
        object.__setattr__(self, "domain", categories)
        object.__setattr__(self, "index", {value: i for i, value in enumerate(categories)})
        object.__setattr__(self, "range", coerce_range(self.range, DEFAULT_RANGE))
        object.__setattr__(self, "padding", _validate_padding(self.padding))

    @classmethod
    def new(cls, categories: Iterable[Any], *, defaults: ScaleDefaults | None = None, **kwargs: Any) -> "OrdinalScale":
        if defaults is not None:
            kwargs.setdefault("range", defaults.range)
            kwargs.setdefault("padding", defaults.ordinal_padding)
        return cls(domain=tuple(categories), **kwargs)

    def with_domain(self, categories: Iterable[Any]) -> "OrdinalScale":
        return replace(self, domain=tuple(categories))

    def with_padding(self, padding: float) -> "OrdinalScale":
        return replace(self, padding=padding)

    def set_range(self, start: float, finish: float) -> "OrdinalScale":
        return replace(self, range=validate_range(start, finish))

    def get_range(self) -> tuple[float, float]:
        return self.range

    def index_of(self, value: Any) -> int | None:
        if not isinstance(value, Hashable):
            return None
        return self.index.get(value)

    def band_layout(self) -> tuple[float, float]:
        """Signed band width and gap; both are negative on an inverted range."""
        count = len(self.domain)
        if count == 0:
            return (0.0, 0.0)
        r_min, r_max = self.range
        width = r_max - r_min
        gap = self.padding * width / count
        band = (width - (count - 1) * gap) / count
        return (band, gap)

    def get_band(self, value: Any) -> tuple[float, float] | None:
        """Pixel span of ``value``'s band, or ``None`` for an unknown category."""
        index = self.index_of(value)
        if index is None:
            return None
        band, gap = self.band_layout()
        start = self.range[0] + index * (band + gap)
        return (start, start + band)

    def domain_to_range_fn(self) -> Callable[[Any], float | None]:
        r_min = self.range[0]
        band, gap = self.band_layout()
        index_of = self.index_of

        def band_centre(value: Any) -> float | None:
            index = index_of(value)
            if index is None:
                return None
            return r_min + index * (band + gap) + band / 2.0

        return band_centre

    def range_to_domain(self, position: float) -> Any | None:
        """Category whose band contains ``position``; ``None`` in gaps or outside the range."""
        band, gap = self.band_layout()
        if band == 0:
            return None
        offset = (position - self.range[0]) / (band + gap)
        index = math.floor(offset)
        if index < 0 or index >= len(self.domain):
            return None
        if (offset - index) * (band + gap) / band > 1.0:
            return None
        return self.domain[index]

    def ticks_domain(self) -> list[Any]:
        return list(self.domain)

    def get_formatted_tick(self, value: Any) -> str:
        return str(value)


def _unique(values: Iterable[Any]) -> tuple[Any, ...]:
    seen: set[Any] = set()
    out: list[Any] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        out.append(value)
    return tuple(out)


def _validate_padding(padding: Any) -> float:
    if isinstance(padding, bool) or not isinstance(padding, numbers.Real) or not 0.0 <= float(padding) < 1.0:
        raise ScaleConfigError(f"padding must be a number in [0, 1), got {padding!r}")
    return float(padding)
