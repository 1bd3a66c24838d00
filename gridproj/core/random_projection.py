from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, TextIO

import numpy as np

from gridproj.core.errors import DegenerateScaleError, InvalidDimensionError

_EPS = float(np.finfo(np.float64).eps)


def compute_random_matrix(
    from_dim: int,
    to_dim: int,
    scale: Sequence[float] | np.ndarray | None = None,
    *,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Random projection matrix of shape [to_dim, from_dim].

    Entries are drawn from N(0, 1), then rows 1..to_dim-1 are orthogonalized
    against all previous rows (Gram-Schmidt) and normalized. Row 0 keeps its
    raw Gaussian draw.

    If `scale` has exactly `from_dim` entries, row i is divided by scale[i].
    Any other length is ignored.
    """
    from_dim = int(from_dim)
    to_dim = int(to_dim)
    if from_dim < 0 or to_dim < 0:
        raise InvalidDimensionError("dimensions must be >= 0")

    if rng is None:
        rng = np.random.default_rng()

    M = rng.standard_normal((to_dim, from_dim))

    for i in range(1, to_dim):
        row = M[i]
        raw_norm = np.sqrt(float(row @ row))
        for j in range(i):
            prev = M[j]
            # subtract projection onto the previous row (in place)
            row -= float(row @ prev) * prev
        norm = np.sqrt(float(row @ row))
        if not (norm > np.sqrt(_EPS) * raw_norm):
            raise InvalidDimensionError(
                f"row {i} collapsed during orthogonalization; to_dim={to_dim} is too large for from_dim={from_dim}"
            )
        row /= norm

    if scale is not None:
        s = np.asarray(scale, dtype=np.float64).reshape(-1)
        if s.size == from_dim and s.size > 0:
            bad = np.flatnonzero(np.abs(s) < _EPS)
            if bad.size:
                raise DegenerateScaleError(f"scaling factor {int(bad[0])} must be non-zero")
            # scale is indexed by row, so it has to cover every row
            if to_dim > from_dim:
                raise InvalidDimensionError("to_dim must be <= from_dim when scaling")
            M /= s[:to_dim, None]

    return M


@dataclass(slots=True)
class ProjectionMatrix:
    """Linear map from R^from_dim to R^to_dim stored row-wise."""

    mat: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))

    def __post_init__(self) -> None:
        mat = np.asarray(self.mat, dtype=np.float64)
        if mat.ndim != 2:
            raise ValueError("matrix must be 2D [to_dim, from_dim]")
        self.mat = mat

    @property
    def from_dim(self) -> int:
        return int(self.mat.shape[1])

    @property
    def to_dim(self) -> int:
        return int(self.mat.shape[0])

    def compute_random(
        self,
        from_dim: int,
        to_dim: int,
        scale: Sequence[float] | np.ndarray | None = None,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.mat = compute_random_matrix(from_dim, to_dim, scale, rng=rng)

    def project(self, source: np.ndarray) -> np.ndarray:
        x = np.asarray(source, dtype=np.float64).reshape(-1)
        if x.shape[0] != self.from_dim:
            raise ValueError("source dim mismatch")
        return self.mat @ x

    def print(self, out: TextIO) -> None:
        for row in self.mat:
            out.write(" ".join(f"{float(v):g}" for v in row))
            out.write("\n")
