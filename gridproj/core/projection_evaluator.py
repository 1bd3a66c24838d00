from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, TextIO

import numpy as np

from gridproj.core.errors import (
    CellDimensionMismatchError,
    InvalidCellDimensionError,
    InvalidDimensionError,
    NotConfiguredError,
    ProjectionConfigError,
)
from gridproj.core.projections import ProjectionStrategy
from gridproj.core.state_space import StateSampler

logger = logging.getLogger(__name__)

_EPS = float(np.finfo(np.float64).eps)


@dataclass(slots=True)
class EvaluatorConfig:
    # Number of uniform samples used to estimate the projected extent.
    extent_samples: int = 100
    # How many cells should span the observed extent on each axis.
    dimension_splits: float = 20.0

    def __post_init__(self) -> None:
        if int(self.extent_samples) <= 0:
            raise ValueError("extent_samples must be > 0")
        splits = float(self.dimension_splits)
        if not (math.isfinite(splits) and splits > 0.0):
            raise ValueError("dimension_splits must be finite and > 0")


class ProjectionEvaluator:
    """Projects states and discretizes the projections into grid cells.

    Cell dimensions are either given explicitly or inferred by `setup()` from
    the spread of projected uniform samples.

    Lifecycle:
    - unconfigured: no valid cell dimensions yet
    - configured: after a successful `set_cell_dimensions()` or `setup()`;
      only then `compute_coordinates()` is available
    """

    def __init__(
        self,
        strategy: ProjectionStrategy,
        sampler: StateSampler | None = None,
        config: EvaluatorConfig | None = None,
        cell_dimensions: Sequence[float] | np.ndarray | None = None,
    ):
        self.strategy = strategy
        self.sampler = sampler
        self.config = config or EvaluatorConfig()
        self._cell_dimensions = np.zeros(0, dtype=np.float64)
        self._configured = False
        if cell_dimensions is not None:
            self.set_cell_dimensions(cell_dimensions)

    def dimension(self) -> int:
        return int(self.strategy.dimension())

    def project(self, state: np.ndarray) -> np.ndarray:
        return np.asarray(self.strategy.project(state), dtype=np.float64).reshape(-1)

    @property
    def cell_dimensions(self) -> np.ndarray:
        return self._cell_dimensions.copy()

    @property
    def is_configured(self) -> bool:
        return self._configured

    def set_cell_dimensions(self, cell_dimensions: Sequence[float] | np.ndarray) -> None:
        self._configured = False
        self._cell_dimensions = np.asarray(cell_dimensions, dtype=np.float64).reshape(-1).copy()
        self.check_cell_dimensions()
        self._configured = True

    def check_cell_dimensions(self) -> None:
        dim = self.dimension()
        if dim <= 0:
            raise InvalidDimensionError("dimension of projection needs to be larger than 0")
        if self._cell_dimensions.size != dim:
            raise CellDimensionMismatchError(
                "number of dimensions in projection space does not match number of cell dimensions"
                f" ({dim} != {self._cell_dimensions.size})"
            )
        bad = np.flatnonzero(~(np.isfinite(self._cell_dimensions) & (self._cell_dimensions > 0.0)))
        if bad.size:
            raise InvalidCellDimensionError(
                f"cell dimension {int(bad[0])} must be finite and > 0, got {float(self._cell_dimensions[bad[0]])}"
            )

    def infer_cell_dimensions(self) -> None:
        dim = self.dimension()
        if dim <= 0:
            return
        if self.sampler is None:
            raise ProjectionConfigError("a state sampler is required to infer cell dimensions")

        low = np.full(dim, np.inf)
        high = np.full(dim, -np.inf)
        for _ in range(int(self.config.extent_samples)):
            p = self.project(self.sampler.sample_uniform())
            np.minimum(low, p, out=low)
            np.maximum(high, p, out=high)

        with np.errstate(invalid="ignore"):
            cells = (high - low) / float(self.config.dimension_splits)
        name = getattr(self.sampler, "name", type(self.sampler).__name__)
        for j in np.flatnonzero(~np.isfinite(cells) | (cells < _EPS)):
            logger.warning(
                "Inferred cell size for dimension %d of a projection for space %s is %g. "
                "Setting arbitrary value of 1 instead.",
                int(j),
                name,
                float(cells[j]),
            )
            cells[j] = 1.0
        self._cell_dimensions = cells

    def setup(self) -> None:
        if self._cell_dimensions.size == 0 and self.dimension() > 0:
            self.infer_cell_dimensions()
        self.check_cell_dimensions()
        self._configured = True

    def compute_coordinates(self, projection: np.ndarray) -> tuple[int, ...]:
        """Grid cell index of a projected point: floor(projection / cell) per axis."""
        if not self._configured:
            raise NotConfiguredError("cell dimensions are not set up; call setup() first")
        p = np.asarray(projection, dtype=np.float64).reshape(-1)
        if p.shape[0] != self._cell_dimensions.size:
            raise CellDimensionMismatchError("projection dim does not match cell dimensions")
        return tuple(int(c) for c in np.floor(p / self._cell_dimensions))

    def compute_state_coordinates(self, state: np.ndarray) -> tuple[int, ...]:
        return self.compute_coordinates(self.project(state))

    def print_settings(self, out: TextIO) -> None:
        out.write(f"Projection of dimension {self.dimension()}\n")
        cells = " ".join(f"{float(c):g}" for c in self._cell_dimensions)
        out.write(f"Cell dimensions: [{cells}]\n")

    def print_projection(self, projection: np.ndarray, out: TextIO) -> None:
        d = self.dimension()
        if d > 0:
            p = np.asarray(projection, dtype=np.float64).reshape(-1)
            out.write(" ".join(f"{float(v):g}" for v in p[:d]))
            out.write("\n")
        else:
            out.write("NULL\n")
