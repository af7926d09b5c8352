"""Surface of revolution: sweep a 2D profile around an axis into an indexed mesh."""

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from revolve.config import AXES

logger = logging.getLogger(__name__)


@dataclass
class Mesh:
    """Indexed triangle mesh. ``normals`` is parallel to ``vertices``."""
    vertices: np.ndarray = field(default_factory=lambda: np.empty((0, 3)))
    normals: np.ndarray = field(default_factory=lambda: np.empty((0, 3)))
    faces: np.ndarray = field(default_factory=lambda: np.empty((0, 3), dtype=np.int64))

    @classmethod
    def empty(cls) -> "Mesh":
        return cls()

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0


def revolve_profile(profile, axis: str = "y", angle: float = 360.0,
                    subdivisions: int = 32) -> Mesh:
    """Sweep ``profile`` around ``axis`` by ``angle`` degrees.

    profile: array of shape (P, 2) with columns [x, y]
    Builds subdivisions + 1 rings of P vertices each. A full 360 degree sweep
    leaves the first and last ring coincident; the seam is not welded.
    Profiles with fewer than 2 points give an empty mesh.
    """
    if axis not in AXES:
        raise ValueError(f"axis must be one of {AXES}, got {axis!r}")
    if subdivisions < 1:
        raise ValueError(f"subdivisions must be >= 1, got {subdivisions}")
    if not angle > 0:
        raise ValueError(f"angle must be > 0, got {angle}")

    profile = np.asarray(profile, dtype=float).reshape(-1, 2)
    n_profile = len(profile)
    if n_profile < 2:
        return Mesh.empty()

    angle_step = math.radians(angle) / subdivisions
    thetas = np.arange(subdivisions + 1) * angle_step
    cos_t = np.cos(thetas)[:, None]
    sin_t = np.sin(thetas)[:, None]

    px = profile[:, 0][None, :]
    py = profile[:, 1][None, :]
    ring_shape = (subdivisions + 1, n_profile)

    if axis == "y":
        x, y, z = px * cos_t, np.broadcast_to(py, ring_shape), px * sin_t
    elif axis == "x":
        x, y, z = np.broadcast_to(px, ring_shape), py * cos_t, py * sin_t
    else:
        x, y, z = px * cos_t, px * sin_t, np.broadcast_to(py, ring_shape)

    # Ring-major: vertex index = ring * P + profile index
    vertices = np.stack([x, y, z], axis=-1).reshape(-1, 3)

    faces = np.empty((2 * subdivisions * (n_profile - 1), 3), dtype=np.int64)
    idx = 0
    for i in range(subdivisions):
        for j in range(n_profile - 1):
            a = i * n_profile + j
            b = a + n_profile
            c = a + 1
            d = b + 1
            faces[idx] = [a, b, c]
            faces[idx + 1] = [b, d, c]
            idx += 2

    normals = compute_vertex_normals(vertices, faces)
    logger.debug("Revolved %d profile points around %s by %.1f deg: %d vertices, %d faces",
                 n_profile, axis, angle, len(vertices), len(faces))
    return Mesh(vertices=vertices, normals=normals, faces=faces)


def compute_vertex_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Area-weighted vertex normals.

    Each face adds its unnormalized normal (v1 - v0) x (v2 - v0) to its three
    vertices; the sums are then normalized. Vertices no face touches keep a
    zero normal.
    """
    vertices = np.asarray(vertices, dtype=float)
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    normals = np.zeros_like(vertices)
    if len(faces) == 0:
        return normals

    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    face_normals = np.cross(v1 - v0, v2 - v0)

    for k in range(3):
        np.add.at(normals, faces[:, k], face_normals)

    lengths = np.linalg.norm(normals, axis=1)
    non_zero = lengths > 0
    normals[non_zero] /= lengths[non_zero][:, None]
    return normals
