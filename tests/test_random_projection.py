from __future__ import annotations

import io

import numpy as np
import pytest

from gridproj.core.errors import DegenerateScaleError, InvalidDimensionError
from gridproj.core.random_projection import ProjectionMatrix, compute_random_matrix


def test_rows_after_first_are_orthonormal():
    M = compute_random_matrix(12, 5, rng=np.random.default_rng(0))
    assert M.shape == (5, 12)

    for i in range(1, 5):
        assert abs(float(M[i] @ M[i]) - 1.0) < 1e-9
        for j in range(1, i):
            assert abs(float(M[i] @ M[j])) < 1e-9


def test_first_row_is_raw_gaussian_draw():
    M = compute_random_matrix(12, 5, rng=np.random.default_rng(3))
    raw = np.random.default_rng(3).standard_normal((5, 12))
    np.testing.assert_array_equal(M[0], raw[0])


def test_same_seed_same_matrix():
    a = compute_random_matrix(8, 3, rng=np.random.default_rng(42))
    b = compute_random_matrix(8, 3, rng=np.random.default_rng(42))
    np.testing.assert_array_equal(a, b)


def test_scale_divides_row_by_row_index():
    base = compute_random_matrix(4, 3, rng=np.random.default_rng(1))
    scale = [2.0, 4.0, 0.5, 100.0]
    scaled = compute_random_matrix(4, 3, scale, rng=np.random.default_rng(1))
    for i in range(3):
        np.testing.assert_allclose(scaled[i], base[i] / scale[i])


def test_scale_of_other_length_is_ignored():
    base = compute_random_matrix(4, 2, rng=np.random.default_rng(1))
    same = compute_random_matrix(4, 2, [0.0, 0.0], rng=np.random.default_rng(1))
    np.testing.assert_array_equal(base, same)


def test_degenerate_scale_fails():
    with pytest.raises(DegenerateScaleError):
        compute_random_matrix(4, 2, [1e-20, 1.0, 1.0, 1.0], rng=np.random.default_rng(0))
    with pytest.raises(ValueError):
        compute_random_matrix(4, 2, [1.0, -1e-20, 1.0, 1.0], rng=np.random.default_rng(0))


def test_scale_with_more_rows_than_columns_fails():
    with pytest.raises(InvalidDimensionError):
        compute_random_matrix(2, 3, [1.0, 1.0], rng=np.random.default_rng(0))


def test_project_is_linear():
    rng = np.random.default_rng(7)
    pm = ProjectionMatrix()
    pm.compute_random(10, 3, rng=rng)
    assert (pm.from_dim, pm.to_dim) == (10, 3)

    x = rng.standard_normal(10)
    y = rng.standard_normal(10)
    a, b = 1.7, -0.3
    np.testing.assert_allclose(pm.project(a * x + b * y), a * pm.project(x) + b * pm.project(y), atol=1e-12)


def test_project_rows_are_dot_products():
    pm = ProjectionMatrix(np.array([[1.0, 2.0, 0.0], [0.0, -1.0, 3.0]]))
    np.testing.assert_allclose(pm.project([1.0, 1.0, 1.0]), [3.0, 2.0])
    with pytest.raises(ValueError):
        pm.project([1.0, 1.0])


def test_print_one_row_per_line():
    pm = ProjectionMatrix(np.array([[1.0, 2.0], [0.5, -1.0]]))
    buf = io.StringIO()
    pm.print(buf)
    lines = buf.getvalue().splitlines()
    assert len(lines) == 2
    assert [float(v) for v in lines[1].split()] == [0.5, -1.0]


def test_degenerate_scale_beyond_used_rows_fails():
    with pytest.raises(DegenerateScaleError):
        compute_random_matrix(4, 2, [1.0, 1.0, 1e-20, 1.0], rng=np.random.default_rng(0))


def test_too_many_rows_for_source_dim_fails():
    # third row has nothing left after removing the first two directions of R^1
    with pytest.raises(InvalidDimensionError):
        compute_random_matrix(1, 3, rng=np.random.default_rng(0))
    with pytest.raises(InvalidDimensionError):
        compute_random_matrix(2, 5, rng=np.random.default_rng(0))


def test_print_uses_short_float_format():
    pm = ProjectionMatrix(np.array([[1.0, 0.25]]))
    buf = io.StringIO()
    pm.print(buf)
    assert buf.getvalue() == "1 0.25\n"
