from tickscale.adapters.extents import (
    ExtentsProvider,
    TableExtents,
    coerce_numeric,
    combined_extents,
    get_domain,
    numeric_extents,
)

__all__ = [
    "ExtentsProvider",
    "TableExtents",
    "coerce_numeric",
    "combined_extents",
    "get_domain",
    "numeric_extents",
]
