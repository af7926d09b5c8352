"""Mesh serialization: OBJ and ASCII STL text, JSON snapshots and Three.js buffers."""

import json
import logging

import numpy as np
from stl import mesh as stl_mesh

from revolve.config import DECIMALS, STL_SOLID_NAME
from revolve.geometry.control_points import ControlPoint
from revolve.geometry.revolution import Mesh

logger = logging.getLogger(__name__)


def _fmt(value: float) -> str:
    return f"{value:.{DECIMALS}f}"


def _xyz(v) -> str:
    return f"{_fmt(v[0])} {_fmt(v[1])} {_fmt(v[2])}"


# ---------------------------------------------------------------------------
#  OBJ
# ---------------------------------------------------------------------------

def to_obj(mesh: Mesh) -> str:
    """Wavefront OBJ with ``v``, ``vn`` and ``f v//vn`` records (1-based).

    Vertex and normal indices are identical since the arrays are parallel.
    """
    lines = [
        "# Surface of Revolution",
        f"# Vertices: {mesh.vertex_count}",
        f"# Faces: {mesh.face_count}",
        "",
    ]
    lines.extend(f"v {_xyz(v)}" for v in mesh.vertices)
    lines.append("")
    lines.extend(f"vn {_xyz(n)}" for n in mesh.normals)
    lines.append("")
    for a, b, c in mesh.faces + 1:
        lines.append(f"f {a}//{a} {b}//{b} {c}//{c}")
    logger.debug("OBJ export: %d vertices, %d faces", mesh.vertex_count, mesh.face_count)
    return "\n".join(lines) + "\n"


def read_obj_counts(text: str) -> dict:
    """Count vertex, normal and face records in OBJ text."""
    counts = {"vertices": 0, "normals": 0, "faces": 0}
    keys = {"v": "vertices", "vn": "normals", "f": "faces"}
    for line in text.splitlines():
        parts = line.split(maxsplit=1)
        if parts and parts[0] in keys:
            counts[keys[parts[0]]] += 1
    return counts


# ---------------------------------------------------------------------------
#  STL (ASCII)
# ---------------------------------------------------------------------------

def facet_normals(mesh: Mesh) -> np.ndarray:
    """Unit facet normal per face, recomputed from the vertex positions.

    Degenerate (zero area) faces get a zero normal.
    """
    if mesh.face_count == 0:
        return np.empty((0, 3))
    stl_obj = stl_mesh.Mesh(np.zeros(mesh.face_count, dtype=stl_mesh.Mesh.dtype))
    stl_obj.vectors = mesh.vertices[mesh.faces].astype(np.float32)
    stl_obj.update_normals()
    return stl_obj.get_unit_normals().astype(float)


def to_stl(mesh: Mesh, name: str = STL_SOLID_NAME) -> str:
    """ASCII STL. Facet normals come from the faces, not the vertex normals."""
    normals = facet_normals(mesh)
    lines = [f"solid {name}"]
    for face, normal in zip(mesh.faces, normals):
        lines.append(f"  facet normal {_xyz(normal)}")
        lines.append("    outer loop")
        for idx in face:
            lines.append(f"      vertex {_xyz(mesh.vertices[idx])}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {name}")
    logger.debug("STL export: %d facets", mesh.face_count)
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
#  JSON
# ---------------------------------------------------------------------------

def _point_dict(p) -> dict:
    if isinstance(p, ControlPoint):
        return p.to_dict()
    if isinstance(p, dict):
        return {"x": p["x"], "y": p["y"], "w": p.get("w", 1.0)}
    return {"x": float(p[0]), "y": float(p[1]), "w": float(p[2]) if len(p) > 2 else 1.0}


def scene_snapshot(control_points, curve_type: str, degree: int, axis: str,
                   angle: float, subdivisions: int, mesh: Mesh) -> dict:
    """Plain-data snapshot of the editor state and the generated surface."""
    return {
        "controlPoints": [_point_dict(p) for p in control_points],
        "curveType": curve_type,
        "degree": int(degree),
        "revolutionAxis": axis,
        "revolutionAngle": angle,
        "subdivisions": int(subdivisions),
        "vertices": [{"x": float(x), "y": float(y), "z": float(z)} for x, y, z in mesh.vertices],
        "normals": [{"x": float(x), "y": float(y), "z": float(z)} for x, y, z in mesh.normals],
        "faces": mesh.faces.tolist(),
    }


def scene_snapshot_json(*args, **kwargs) -> str:
    """:func:`scene_snapshot` pretty-printed with two-space indentation."""
    return json.dumps(scene_snapshot(*args, **kwargs), indent=2)


def curve_snapshot_json(mode: str, step: float, degree: int, control_points) -> str:
    """Curve editor export: ``{mode, step, degree, points}``."""
    return json.dumps({
        "mode": mode,
        "step": step,
        "degree": int(degree),
        "points": [_point_dict(p) for p in control_points],
    }, indent=2)


def mesh_to_frontend(mesh: Mesh) -> dict:
    """Flat buffers for a Three.js BufferGeometry (position, normal, index)."""
    return {
        "positions": mesh.vertices.ravel().tolist(),
        "normals": mesh.normals.ravel().tolist(),
        "indices": mesh.faces.ravel().tolist(),
        "vertex_count": mesh.vertex_count,
        "face_count": mesh.face_count,
        "index_count": int(mesh.faces.size),
    }
