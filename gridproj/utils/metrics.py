from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

import numpy as np


@dataclass(frozen=True, slots=True)
class CellOccupancySummary:
    n: int
    n_cells: int
    max_per_cell: int
    mean_per_cell: float
    span_by_axis: list[int]


def summarize_cells(coords: Iterable[tuple[int, ...]]) -> CellOccupancySummary:
    """How a batch of grid coordinates spreads over cells.

    span_by_axis[i] is max - min + 1 of the i-th coordinate.
    """
    coords = list(coords)
    if not coords:
        return CellOccupancySummary(n=0, n_cells=0, max_per_cell=0, mean_per_cell=0.0, span_by_axis=[])

    counts = Counter(coords)
    arr = np.asarray(coords, dtype=np.int64)
    if arr.ndim != 2:
        raise ValueError("coords must all have the same dimension")
    span = (arr.max(axis=0) - arr.min(axis=0) + 1).tolist()
    occ = np.fromiter(counts.values(), dtype=np.int64)
    return CellOccupancySummary(
        n=int(arr.shape[0]),
        n_cells=int(len(counts)),
        max_per_cell=int(occ.max()),
        mean_per_cell=float(np.mean(occ)),
        span_by_axis=[int(s) for s in span],
    )
