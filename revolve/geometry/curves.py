"""Curve evaluation: De Casteljau (plain and rational), Bernstein and Cox-de Boor."""

from typing import Optional

import numpy as np
from scipy.special import comb

from revolve.geometry.control_points import as_points, as_weights


def de_casteljau(points, t: float) -> np.ndarray:
    """Evaluate a Bezier curve at ``t`` by repeated linear interpolation.

    points: array of shape (N, D), N >= 1. Works for any dimension D, so
    homogeneous (x*w, y*w, w) rows go through the same recursion.
    t is not range-checked; values outside [0, 1] extrapolate.
    """
    pts = np.asarray(points, dtype=float)
    if len(pts) == 0:
        raise ValueError("De Casteljau needs at least one control point")
    if len(pts) == 1:
        return pts[0].copy()
    return de_casteljau((1 - t) * pts[:-1] + t * pts[1:], t)


def rational_de_casteljau(points, weights, t: float) -> np.ndarray:
    """Rational Bezier point via De Casteljau in homogeneous coordinates.

    A zero interpolated weight gives inf/nan coordinates; keeping weights
    positive is up to whoever builds the control points.
    """
    pts = np.asarray(points, dtype=float)[:, :2]
    w = np.asarray(weights, dtype=float)
    homogeneous = np.column_stack([pts * w[:, None], w])
    hx, hy, hw = de_casteljau(homogeneous, t)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.array([hx, hy]) / hw


def bernstein_bezier(points, t: float) -> np.ndarray:
    """Closed-form Bezier evaluation with Bernstein polynomials."""
    pts = np.asarray(points, dtype=float)
    n = len(pts) - 1
    i = np.arange(n + 1)
    coeffs = comb(n, i) * t ** i * (1 - t) ** (n - i)
    return coeffs @ pts


def evaluate_bezier(control_points, t: float) -> np.ndarray:
    """Non-rational Bezier point; weights on the control points are ignored."""
    return de_casteljau(as_points(control_points), t)


def evaluate_rational_bezier(control_points, t: float) -> np.ndarray:
    """Rational Bezier point using each control point's ``w``."""
    return rational_de_casteljau(as_points(control_points), as_weights(control_points), t)


def last_nonempty_span(knots) -> int:
    """Index of the last non-empty knot interval, -1 if every knot is equal."""
    for i in range(len(knots) - 2, -1, -1):
        if knots[i] < knots[i + 1]:
            return i
    return -1


def _in_span(i: int, t: float, knots, last_span: int) -> bool:
    if i == last_span:
        return knots[i] <= t <= knots[i + 1]
    return knots[i] <= t < knots[i + 1]


def bspline_basis(i: int, k: int, t: float, knots, last_span: Optional[int] = None) -> float:
    """Cox-de Boor basis function N_{i,k}(t).

    The last non-empty interval is closed on the right so that the curve
    evaluates at t = max knot. Terms with a zero denominator count as 0.
    ``last_span`` may be passed in when the caller already knows it.
    """
    if last_span is None:
        last_span = last_nonempty_span(knots)
    if k == 0:
        return 1.0 if _in_span(i, t, knots, last_span) else 0.0

    c1 = 0.0
    denom = knots[i + k] - knots[i]
    if denom != 0:
        c1 = (t - knots[i]) / denom * bspline_basis(i, k - 1, t, knots, last_span)

    c2 = 0.0
    denom = knots[i + k + 1] - knots[i + 1]
    if denom != 0:
        c2 = (knots[i + k + 1] - t) / denom * bspline_basis(i + 1, k - 1, t, knots, last_span)

    return float(c1 + c2)


def bspline_basis_values(degree: int, t: float, knots,
                         last_span: Optional[int] = None) -> np.ndarray:
    """All N_{i,degree}(t) at once, built degree by degree from the N_{i,0}.

    Same recurrence and zero-denominator rule as :func:`bspline_basis`, but
    each lower-degree value is computed once. Returns len(knots) - degree - 1
    values.
    """
    knots = np.asarray(knots, dtype=float)
    if last_span is None:
        last_span = last_nonempty_span(knots)
    m = len(knots)
    basis = np.array([1.0 if _in_span(i, t, knots, last_span) else 0.0
                      for i in range(m - 1)])

    for k in range(1, degree + 1):
        higher = np.zeros(m - 1 - k)
        for i in range(m - 1 - k):
            c1 = 0.0
            denom = knots[i + k] - knots[i]
            if denom != 0:
                c1 = (t - knots[i]) / denom * basis[i]
            c2 = 0.0
            denom = knots[i + k + 1] - knots[i + 1]
            if denom != 0:
                c2 = (knots[i + k + 1] - t) / denom * basis[i + 1]
            higher[i] = c1 + c2
        basis = higher
    return basis


def bspline_point(control_points, degree: int, t: float, knots,
                  last_span: Optional[int] = None) -> tuple:
    """B-Spline point at ``t`` together with the sum of the basis values.

    Returns (point of shape (2,), basis_sum).
    """
    pts = as_points(control_points)
    values = bspline_basis_values(degree, t, knots, last_span)
    point = np.zeros(2)
    basis_sum = 0.0
    for j in range(len(pts)):
        basis = values[j]
        if basis == 0.0:
            continue
        basis_sum += basis
        point += basis * pts[j]
    return point, float(basis_sum)


def evaluate_bspline(control_points, degree: int, t: float, knots) -> np.ndarray:
    """Non-rational B-Spline point: sum of N_{j,degree}(t) * P_j."""
    point, _ = bspline_point(control_points, degree, t, knots)
    return point
