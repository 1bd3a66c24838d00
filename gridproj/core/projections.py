from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

import numpy as np

from gridproj.core.errors import InvalidDimensionError
from gridproj.core.random_projection import ProjectionMatrix, compute_random_matrix


@runtime_checkable
class ProjectionStrategy(Protocol):
    """Anything that maps a state to a point in R^dimension()."""

    def dimension(self) -> int: ...

    def project(self, state: np.ndarray) -> np.ndarray: ...


class LinearProjection:
    """Projection through a fixed [to_dim, from_dim] matrix."""

    def __init__(self, matrix: np.ndarray | ProjectionMatrix):
        if isinstance(matrix, ProjectionMatrix):
            self.matrix = matrix
        else:
            self.matrix = ProjectionMatrix(np.asarray(matrix, dtype=np.float64))

    def dimension(self) -> int:
        return self.matrix.to_dim

    def project(self, state: np.ndarray) -> np.ndarray:
        return self.matrix.project(state)


class RandomLinearProjection(LinearProjection):
    """Linear projection backed by a random, mostly orthonormal matrix.

    Pass a seeded `rng` to get the same matrix across runs.
    """

    def __init__(
        self,
        from_dim: int,
        to_dim: int,
        scale: Sequence[float] | np.ndarray | None = None,
        *,
        rng: np.random.Generator | None = None,
    ):
        super().__init__(compute_random_matrix(from_dim, to_dim, scale, rng=rng))


class OrthogonalProjection:
    """Keeps the listed components of the state, in order."""

    def __init__(self, components: Sequence[int]):
        idx = np.asarray(list(components), dtype=np.intp).reshape(-1)
        if np.any(idx < 0):
            raise InvalidDimensionError("component indices must be >= 0")
        self.components = idx

    def dimension(self) -> int:
        return int(self.components.size)

    def project(self, state: np.ndarray) -> np.ndarray:
        x = np.asarray(state, dtype=np.float64).reshape(-1)
        return x[self.components]
