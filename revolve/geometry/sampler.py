"""Curve sampling: turns an evaluator into an ordered (N, 2) polyline."""

import logging
import math
from typing import Callable, Optional

import numpy as np

from revolve.config import STEP_EPSILON, BASIS_SUM_THRESHOLD
from revolve.geometry.control_points import as_points, as_weights
from revolve.geometry.curves import (
    de_casteljau, rational_de_casteljau, bspline_point, last_nonempty_span,
)
from revolve.geometry.knots import open_uniform_knot_vector, knot_domain

logger = logging.getLogger(__name__)

Evaluator = Callable[[float], Optional[np.ndarray]]


def empty_curve() -> np.ndarray:
    return np.empty((0, 2))


def _collect(evaluator: Evaluator, params) -> np.ndarray:
    points = []
    for t in params:
        pt = evaluator(t)
        if pt is not None:
            points.append(pt)
    if not points:
        return empty_curve()
    return np.array(points, dtype=float)


def sample_resolution(evaluator: Evaluator, t_min: float, t_max: float,
                      resolution: int) -> np.ndarray:
    """Sample at ``t_min + (i / N) * (t_max - t_min)`` for i in [0, N].

    The evaluator may return None to drop a sample.
    """
    if resolution < 1:
        raise ValueError(f"resolution must be >= 1, got {resolution}")
    params = (t_min + (i / resolution) * (t_max - t_min) for i in range(resolution + 1))
    return _collect(evaluator, params)


def sample_step(evaluator: Evaluator, t_min: float, t_max: float,
                step: float) -> np.ndarray:
    """Sample at ``t_min, t_min + step, ...`` while t <= t_max + epsilon.

    The last parameter is clamped to t_max so the epsilon never evaluates
    outside the domain.
    """
    if not step > 0:
        raise ValueError(f"step must be > 0, got {step}")

    def params():
        k = 0
        t = t_min
        while t <= t_max + STEP_EPSILON:
            yield min(t, t_max)
            k += 1
            t = t_min + k * step

    return _collect(evaluator, params())


def sample(evaluator: Evaluator, domain: tuple[float, float],
           resolution: Optional[int] = None, step: Optional[float] = None) -> np.ndarray:
    """Sample ``evaluator`` over ``domain`` by resolution or by step (not both)."""
    if (resolution is None) == (step is None):
        raise ValueError("give exactly one of resolution or step")
    t_min, t_max = domain
    if resolution is not None:
        return sample_resolution(evaluator, t_min, t_max, resolution)
    return sample_step(evaluator, t_min, t_max, step)


def bezier_curve(control_points, resolution: Optional[int] = None,
                 step: Optional[float] = None, rational: bool = False) -> np.ndarray:
    """Sampled Bezier curve over t in [0, 1]; empty for fewer than 2 points."""
    if len(control_points) < 2:
        return empty_curve()
    pts = as_points(control_points)
    if rational:
        weights = as_weights(control_points)
        evaluator = lambda t: rational_de_casteljau(pts, weights, t)
    else:
        evaluator = lambda t: de_casteljau(pts, t)
    curve = sample(evaluator, (0.0, 1.0), resolution=resolution, step=step)
    logger.debug("Bezier curve: %d control points -> %d samples", len(pts), len(curve))
    return curve


def bspline_curve(control_points, degree: int = 3, resolution: Optional[int] = None,
                  step: Optional[float] = None) -> np.ndarray:
    """Sampled open uniform B-Spline; empty for fewer than degree + 1 points.

    Resolution sampling runs over the integer knot domain, step sampling over
    the normalized [0, 1] domain. Samples with a negligible basis sum or a
    non-finite point are dropped.
    """
    n = len(control_points)
    if degree < 1 or n < degree + 1:
        return empty_curve()
    pts = as_points(control_points)
    knots = open_uniform_knot_vector(n, degree, normalized=step is not None)
    domain = knot_domain(knots, n, degree)
    last_span = last_nonempty_span(knots)

    def evaluator(t):
        point, basis_sum = bspline_point(pts, degree, t, knots, last_span)
        if basis_sum <= BASIS_SUM_THRESHOLD:
            return None
        if not (math.isfinite(point[0]) and math.isfinite(point[1])):
            return None
        return point

    curve = sample(evaluator, domain, resolution=resolution, step=step)
    logger.debug("B-Spline curve: %d control points, degree %d -> %d samples",
                 n, degree, len(curve))
    return curve


def generate_curve(control_points, curve_type: str = "bezier", degree: int = 3,
                   resolution: Optional[int] = 50, step: Optional[float] = None,
                   rational: bool = False) -> np.ndarray:
    """Unified front door for both curve types.

    Unknown types and fewer than two control points give an empty curve.
    """
    if len(control_points) < 2:
        return empty_curve()
    if step is not None:
        resolution = None
    if curve_type == "bezier":
        return bezier_curve(control_points, resolution=resolution, step=step, rational=rational)
    elif curve_type == "bspline":
        return bspline_curve(control_points, degree, resolution=resolution, step=step)
    return empty_curve()
