"""Control point type shared by the Bezier and B-Spline evaluators."""

import math
from dataclasses import dataclass

import numpy as np

from revolve.config import MIN_WEIGHT


@dataclass
class ControlPoint:
    x: float
    y: float
    w: float = 1.0  # rational weight, ignored by B-Splines

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "w": self.w}

    @classmethod
    def from_dict(cls, d: dict) -> "ControlPoint":
        """Construct from ``{x, y}`` or ``{x, y, w}``, clamping the weight."""
        return cls(float(d["x"]), float(d["y"]), clamp_weight(d.get("w", 1.0)))


def clamp_weight(w: float) -> float:
    """Keep a weight strictly positive so homogeneous w never reaches 0."""
    w = float(w)
    if not math.isfinite(w):
        return 1.0
    return max(MIN_WEIGHT, w)


def as_points(control_points) -> np.ndarray:
    """Return (N, 2) coordinates for ControlPoints, dicts or (x, y) pairs."""
    if len(control_points) == 0:
        return np.empty((0, 2))
    first = control_points[0]
    if isinstance(first, ControlPoint):
        return np.array([[p.x, p.y] for p in control_points], dtype=float)
    if isinstance(first, dict):
        return np.array([[p["x"], p["y"]] for p in control_points], dtype=float)
    return np.asarray(control_points, dtype=float)[:, :2]


def as_weights(control_points) -> np.ndarray:
    """Return the (N,) weights; points without one weigh 1."""
    weights = []
    for p in control_points:
        if isinstance(p, ControlPoint):
            weights.append(p.w)
        elif isinstance(p, dict):
            weights.append(p.get("w", 1.0))
        elif len(p) > 2:
            weights.append(p[2])
        else:
            weights.append(1.0)
    return np.array(weights, dtype=float)
