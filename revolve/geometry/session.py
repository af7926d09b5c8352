"""Editor session: control points, selection and settings for one client."""

import logging
import math
from typing import Optional

import numpy as np

from revolve.config import (
    CURVE_TYPES, AXES, EXPORT_FORMATS, HIT_RADIUS,
    CurveDefaults, RevolutionDefaults, CanvasDefaults,
)
from revolve.geometry.control_points import ControlPoint, clamp_weight
from revolve.geometry.mesh_export import to_obj, to_stl, scene_snapshot_json, curve_snapshot_json
from revolve.geometry.profile import normalize_profile
from revolve.geometry.revolution import Mesh, revolve_profile
from revolve.geometry.sampler import generate_curve, empty_curve

logger = logging.getLogger(__name__)


class EditorSession:
    """Owns the editable control polygon and the derived curve and mesh.

    Every edit regenerates the curve wholesale; the mesh is only rebuilt by
    :meth:`generate_surface`. Geometry functions stay stateless, this class
    is the only place that holds state between calls.
    """

    def __init__(self, width: float = CanvasDefaults.width,
                 height: float = CanvasDefaults.height):
        curve = CurveDefaults()
        rev = RevolutionDefaults()
        self.width = width
        self.height = height
        self.control_points: list[ControlPoint] = []
        self.selected_index: Optional[int] = None

        self.curve_type = curve.curve_type
        self.degree = curve.degree
        self.resolution = curve.resolution
        self.step: Optional[float] = None  # None = sample by resolution
        self.rational = curve.rational

        self.axis = rev.axis
        self.angle = rev.angle
        self.subdivisions = rev.subdivisions

        self.curve = empty_curve()
        self.mesh = Mesh.empty()

    # -- control points -------------------------------------------------

    def add_point(self, x: float, y: float, w: float = 1.0) -> int:
        """Append a control point and return its index."""
        self.control_points.append(ControlPoint(float(x), float(y), clamp_weight(w)))
        self.regenerate_curve()
        return len(self.control_points) - 1

    def hit_test(self, x: float, y: float, radius: float = HIT_RADIUS) -> Optional[int]:
        """Index of the first control point closer than ``radius``, else None."""
        for i, p in enumerate(self.control_points):
            if math.hypot(p.x - x, p.y - y) < radius:
                return i
        return None

    def press(self, x: float, y: float) -> int:
        """Select the point under (x, y), or add a new one there."""
        hit = self.hit_test(x, y)
        if hit is not None:
            self.selected_index = hit
            return hit
        return self.add_point(x, y)

    def release(self):
        self.selected_index = None

    def select(self, index: Optional[int]):
        if index is not None:
            self._check_index(index)
        self.selected_index = index

    def move_selected(self, x: float, y: float) -> bool:
        """Drag the selected point, clamped to the canvas frame."""
        if self.selected_index is None:
            return False
        p = self.control_points[self.selected_index]
        p.x = min(max(float(x), 0.0), self.width)
        p.y = min(max(float(y), 0.0), self.height)
        self.regenerate_curve()
        return True

    def update_point(self, index: int, x: float, y: float, w: float = 1.0) -> bool:
        """Numeric edit of one point. Non-finite input leaves it untouched."""
        self._check_index(index)
        if not all(math.isfinite(v) for v in (x, y, w)):
            return False
        p = self.control_points[index]
        p.x, p.y, p.w = float(x), float(y), clamp_weight(w)
        self.regenerate_curve()
        return True

    def remove_point(self, index: int):
        self._check_index(index)
        self.control_points.pop(index)
        self.selected_index = None
        self.regenerate_curve()

    def clear(self):
        self.control_points = []
        self.selected_index = None
        self.regenerate_curve()

    def _check_index(self, index: int):
        if not 0 <= index < len(self.control_points):
            raise IndexError(f"No control point at index {index}")

    # -- settings ---------------------------------------------------------

    def set_curve_params(self, curve_type: Optional[str] = None, degree: Optional[int] = None,
                         resolution: Optional[int] = None, step: Optional[float] = None,
                         rational: Optional[bool] = None):
        if curve_type is not None:
            if curve_type not in CURVE_TYPES:
                raise ValueError(f"Unknown curve type: {curve_type}")
            self.curve_type = curve_type
        if degree is not None:
            self.degree = int(degree)
        if resolution is not None:
            self.resolution = int(resolution)
            self.step = None
        if step is not None:
            self.step = float(step)
        if rational is not None:
            self.rational = bool(rational)
        self.regenerate_curve()

    def set_revolution_params(self, axis: Optional[str] = None, angle: Optional[float] = None,
                              subdivisions: Optional[int] = None):
        if axis is not None:
            if axis not in AXES:
                raise ValueError(f"Unknown axis: {axis}")
            self.axis = axis
        if angle is not None:
            self.angle = float(angle)
        if subdivisions is not None:
            self.subdivisions = int(subdivisions)

    def set_frame(self, width: float, height: float):
        self.width = float(width)
        self.height = float(height)

    # -- derived geometry -------------------------------------------------

    def regenerate_curve(self) -> np.ndarray:
        self.curve = generate_curve(
            self.control_points, self.curve_type, self.degree,
            resolution=self.resolution, step=self.step, rational=self.rational,
        )
        return self.curve

    def generate_surface(self) -> Optional[Mesh]:
        """Revolve the current curve. Returns None (mesh unchanged) without a curve."""
        if len(self.curve) < 2:
            logger.warning("Surface requested with %d curve points", len(self.curve))
            return None
        profile = normalize_profile(self.curve, self.width, self.height)
        self.mesh = revolve_profile(profile, self.axis, self.angle, self.subdivisions)
        return self.mesh

    def stats(self) -> dict:
        return {
            "vertices": self.mesh.vertex_count,
            "faces": self.mesh.face_count,
            "points": len(self.control_points),
        }

    # -- export -------------------------------------------------------------

    def export(self, fmt: str) -> Optional[str]:
        """OBJ, STL or JSON text for the current surface; None if there is none."""
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unknown export format: {fmt}")
        if self.mesh.is_empty:
            return None
        if fmt == "obj":
            return to_obj(self.mesh)
        if fmt == "stl":
            return to_stl(self.mesh)
        return scene_snapshot_json(
            self.control_points, self.curve_type, self.degree,
            self.axis, self.angle, self.subdivisions, self.mesh,
        )

    def export_curve(self) -> str:
        step = self.step if self.step is not None else 1.0 / self.resolution
        if self.curve_type == "bspline":
            degree = self.degree
        else:
            degree = max(len(self.control_points) - 1, 0)
        return curve_snapshot_json(self.curve_type, step, degree, self.control_points)

    def curve_payload(self) -> dict:
        return {
            "control_points": [p.to_dict() for p in self.control_points],
            "selected_index": self.selected_index,
            "curve": self.curve.tolist(),
            "revolution": {"axis": self.axis, "angle": self.angle, "subdivisions": self.subdivisions},
            "stats": self.stats(),
        }
