from __future__ import annotations

from typing import Protocol, Sequence

import numpy as np


class StateSampler(Protocol):
    """Source of uniformly distributed states; only borrowed during calibration."""

    def sample_uniform(self) -> np.ndarray: ...


class BoxStateSpace:
    """Axis-aligned box [low, high] in R^n with a seeded uniform sampler."""

    def __init__(
        self,
        low: Sequence[float] | np.ndarray,
        high: Sequence[float] | np.ndarray,
        *,
        name: str = "box",
        seed: int = 0,
    ):
        lo = np.asarray(low, dtype=np.float64)
        hi = np.asarray(high, dtype=np.float64)
        if lo.ndim != 1 or hi.ndim != 1:
            raise ValueError("low and high must be 1D")
        if lo.shape != hi.shape:
            raise ValueError("low and high must have same length")
        if lo.size == 0:
            raise ValueError("box must have at least one dimension")
        if np.any(lo > hi):
            raise ValueError("low must be <= high")

        self.low = lo
        self.high = hi
        self.name = str(name)
        self._rng = np.random.default_rng(int(seed))

    @property
    def dimension(self) -> int:
        return int(self.low.size)

    def sample_uniform(self) -> np.ndarray:
        return self._rng.uniform(self.low, self.high)
