from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
import numbers
from typing import Any, Protocol

import numpy as np

from tickscale.errors import InvalidDomainError


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


class ExtentsProvider(Protocol):
    def column_extents(self, column: str) -> tuple[Any, Any]:
        ...


def coerce_numeric(values: Any, *, label: str = "values") -> np.ndarray:
    """Flatten a 1-D collection to float64; missing and non-numeric entries become NaN."""
    if torch is not None and isinstance(values, torch.Tensor):
        tensor = values.detach()
        if tensor.ndim != 1:
            raise InvalidDomainError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(values, pd.Series):
        return _coerce_ndarray(values.to_numpy())

    if isinstance(values, np.ndarray):
        if values.ndim != 1:
            raise InvalidDomainError(f"{label} must be 1-D")
        return _coerce_ndarray(values)

    if isinstance(values, (str, bytes, bytearray)) or not hasattr(values, "__iter__"):
        raise InvalidDomainError(f"unsupported {label} input type: {type(values)!r}")
    return _coerce_ndarray(np.asarray(list(values), dtype=object))


def numeric_extents(values: Any, *, label: str = "values") -> tuple[float, float] | None:
    """Min and max of the finite numbers in ``values``, or ``None`` if there are none."""
    arr = coerce_numeric(values, label=label)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return None
    return (float(np.min(finite)), float(np.max(finite)))


def combined_extents(provider: ExtentsProvider, columns: str | Sequence[str]) -> tuple[Any, Any]:
    """Min of the column minimums and max of the column maximums."""
    names = [columns] if isinstance(columns, str) else list(columns)
    if not names:
        raise InvalidDomainError("at least one column is required")
    ranges = [provider.column_extents(name) for name in names]
    present = [r for r in ranges if r is not None and r[0] is not None and r[1] is not None]
    if not present:
        raise InvalidDomainError(f"columns {names!r} contain no numeric values")
    return (min(r[0] for r in present), max(r[1] for r in present))


def get_domain(
    domain: tuple[Any, Any] | None = None,
    provider: ExtentsProvider | None = None,
    columns: str | Sequence[str] | None = None,
) -> tuple[Any, Any]:
    """Explicit domain first, then combined column extents, else ``(0, 1)``."""
    if domain is not None:
        if isinstance(domain, (str, bytes)) or not isinstance(domain, Sequence) or len(domain) != 2:
            raise InvalidDomainError(f"a domain is a (min, max) pair, got {domain!r}")
        return (domain[0], domain[1])
    if provider is not None and columns is not None:
        return combined_extents(provider, columns)
    return (0, 1)


class TableExtents:
    """Column extents over row data.

    Rows may be mappings keyed by column name, or sequences paired with
    ``columns``. A pandas DataFrame is accepted as-is when pandas is installed.
    """

    def __init__(self, rows: Any, columns: Sequence[str] | None = None) -> None:
        self._frame = rows if pd is not None and isinstance(rows, pd.DataFrame) else None
        self._rows = [] if self._frame is not None else list(rows)
        self._columns = list(columns) if columns is not None else None

    def column_values(self, column: str) -> list[Any]:
        if self._frame is not None:
            if column not in self._frame.columns:
                raise InvalidDomainError(f"column not found: {column}")
            return self._frame[column].tolist()
        index = None
        if self._columns is not None:
            if column not in self._columns:
                raise InvalidDomainError(f"column not found: {column}")
            index = self._columns.index(column)
        values = []
        for row in self._rows:
            if isinstance(row, Mapping):
                values.append(row.get(column))
            elif index is not None:
                values.append(row[index] if index < len(row) else None)
            else:
                raise InvalidDomainError("column names are required for sequence rows")
        return values

    def column_extents(self, column: str) -> tuple[float, float] | None:
        return numeric_extents(self.column_values(column), label=column)


def _coerce_ndarray(arr: np.ndarray) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f"}:
        return arr.astype(np.float64, copy=False)

    out = np.full(arr.shape[0], np.nan, dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None or isinstance(raw, bool):
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
        elif isinstance(raw, numbers.Real):
            out[i] = float(raw)
    return out
