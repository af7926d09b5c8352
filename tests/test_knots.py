import numpy as np
import pytest

from revolve.geometry.curves import (
    bspline_basis, bspline_basis_values, evaluate_bspline, de_casteljau, last_nonempty_span,
)
from revolve.geometry.knots import open_uniform_knot_vector, knot_domain


def test_integer_knot_vector():
    knots = open_uniform_knot_vector(5, 2)
    assert knots.tolist() == [0, 0, 0, 1, 2, 3, 3, 3]
    assert knot_domain(knots, 5, 2) == (0.0, 3.0)


def test_normalized_knot_vector():
    knots = open_uniform_knot_vector(5, 2, normalized=True)
    np.testing.assert_allclose(knots, [0, 0, 0, 1 / 3, 2 / 3, 1, 1, 1])
    assert knot_domain(knots, 5, 2) == (0.0, 1.0)


@pytest.mark.parametrize("n, degree", [(2, 1), (4, 3), (7, 3), (6, 5), (10, 2)])
def test_knot_vector_shape_and_clamping(n, degree):
    knots = open_uniform_knot_vector(n, degree)
    assert len(knots) == n + degree + 1
    assert np.all(np.diff(knots) >= 0)
    assert np.all(knots[:degree + 1] == knots[0])
    assert np.all(knots[-(degree + 1):] == knots[-1])


def test_knot_vector_rejects_insufficient_points():
    with pytest.raises(ValueError):
        open_uniform_knot_vector(3, 3)
    with pytest.raises(ValueError):
        open_uniform_knot_vector(3, 0)


@pytest.mark.parametrize("normalized", [False, True])
@pytest.mark.parametrize("n, degree", [(2, 1), (4, 2), (5, 3), (8, 3), (6, 4)])
def test_partition_of_unity(n, degree, normalized):
    knots = open_uniform_knot_vector(n, degree, normalized=normalized)
    t_min, t_max = knot_domain(knots, n, degree)
    for t in np.linspace(t_min, t_max, 37):
        total = sum(bspline_basis(i, degree, t, knots) for i in range(n))
        assert total == pytest.approx(1.0, abs=1e-6)


def test_basis_at_domain_end_is_last_point_only():
    knots = open_uniform_knot_vector(6, 3)
    t_max = knot_domain(knots, 6, 3)[1]
    values = [bspline_basis(i, 3, t_max, knots) for i in range(6)]
    assert values[-1] == pytest.approx(1.0)
    assert sum(values[:-1]) == pytest.approx(0.0)


def test_zero_length_spans_contribute_nothing():
    knots = [1.0, 1.0, 1.0, 1.0]
    assert bspline_basis(0, 2, 1.0, knots) == 0.0


def test_bspline_endpoints_interpolate():
    pts = [(0, 0), (1, 2), (3, 3), (4, 1), (6, 0)]
    knots = open_uniform_knot_vector(len(pts), 3)
    t_min, t_max = knot_domain(knots, len(pts), 3)
    np.testing.assert_allclose(evaluate_bspline(pts, 3, t_min, knots), pts[0], atol=1e-12)
    np.testing.assert_allclose(evaluate_bspline(pts, 3, t_max, knots), pts[-1], atol=1e-12)


def test_single_span_bspline_is_bezier():
    # n = degree + 1 with clamped knots reduces to the Bernstein basis
    pts = [(0, 0), (1, 3), (4, 3), (5, 0)]
    knots = open_uniform_knot_vector(4, 3)
    for t in np.linspace(0.0, 1.0, 11):
        np.testing.assert_allclose(evaluate_bspline(pts, 3, t, knots),
                                   de_casteljau(pts, t), atol=1e-12)


def test_last_nonempty_span():
    assert last_nonempty_span([0, 0, 1, 1]) == 1
    assert last_nonempty_span([0, 0, 0, 1, 2, 3, 3, 3]) == 4
    assert last_nonempty_span([2.0, 2.0, 2.0]) == -1


@pytest.mark.parametrize("n, degree", [(2, 1), (5, 2), (7, 3), (12, 6)])
def test_basis_table_matches_recursion(n, degree):
    knots = open_uniform_knot_vector(n, degree)
    t_min, t_max = knot_domain(knots, n, degree)
    for t in np.linspace(t_min, t_max, 23):
        table = bspline_basis_values(degree, t, knots)
        recursive = [bspline_basis(i, degree, t, knots) for i in range(n)]
        assert len(table) == n
        np.testing.assert_allclose(table, recursive, atol=1e-12)
