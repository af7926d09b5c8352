"""Open uniform (clamped) knot vectors for B-Spline curves."""

import numpy as np


def open_uniform_knot_vector(n_control_points: int, degree: int,
                             normalized: bool = False) -> np.ndarray:
    """Build a clamped knot vector of length ``n + degree + 1``.

    The first and last ``degree + 1`` knots repeat so the curve starts and
    ends on its first and last control points. Interior knots are evenly
    spaced.

    normalized=False: integer domain [0, n - degree]
    normalized=True:  same vector scaled into [0, 1]
    """
    n = int(n_control_points)
    degree = int(degree)
    if degree < 1:
        raise ValueError(f"degree must be >= 1, got {degree}")
    if n < degree + 1:
        raise ValueError(f"{n} control points cannot carry a degree {degree} B-Spline")

    m = n + degree + 1
    knots = np.empty(m)
    for i in range(m):
        if i <= degree:
            knots[i] = 0.0
        elif i >= n:
            knots[i] = n - degree
        else:
            knots[i] = i - degree

    if normalized:
        knots /= n - degree
    return knots


def knot_domain(knots, n_control_points: int, degree: int) -> tuple[float, float]:
    """Valid parameter range ``(knots[degree], knots[n])`` of the curve."""
    return float(knots[degree]), float(knots[n_control_points])
