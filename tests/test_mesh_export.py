import json

import numpy as np
import pytest
import stl
from stl import mesh as stl_mesh

from revolve.geometry.control_points import ControlPoint
from revolve.geometry.mesh_export import (
    curve_snapshot_json,
    facet_normals,
    mesh_to_frontend,
    read_obj_counts,
    scene_snapshot,
    scene_snapshot_json,
    to_obj,
    to_stl,
)
from revolve.geometry.revolution import Mesh, revolve_profile


@pytest.fixture
def cylinder():
    return revolve_profile([(1.0, 0.0), (1.0, 1.0)], axis="y", angle=360, subdivisions=4)


def _floats(line, skip):
    return [float(v) for v in line.split()[skip:]]


def test_obj_header_and_sections(cylinder):
    lines = to_obj(cylinder).splitlines()
    assert lines[:4] == ["# Surface of Revolution", "# Vertices: 10", "# Faces: 8", ""]
    assert lines[4] == "v 1.000000 0.000000 0.000000"
    assert lines[5] == "v 1.000000 1.000000 0.000000"
    assert lines[14] == ""
    assert lines[15].startswith("vn ")
    assert lines[25] == ""
    assert lines[26] == "f 1//1 3//3 2//2"
    assert lines[27] == "f 3//3 4//4 2//2"


def test_obj_uses_six_decimals(cylinder):
    for line in to_obj(cylinder).splitlines():
        if line.startswith(("v ", "vn ")):
            for token in line.split()[1:]:
                assert len(token.split(".")[1]) == 6


def test_obj_record_counts(cylinder):
    text = to_obj(cylinder)
    assert text.endswith("\n")
    assert read_obj_counts(text) == {"vertices": 10, "normals": 10, "faces": 8}


def test_obj_face_indices_are_one_based(cylinder):
    faces = [line for line in to_obj(cylinder).splitlines() if line.startswith("f ")]
    indices = [int(tok.split("//")[0]) for line in faces for tok in line.split()[1:]]
    assert min(indices) == 1
    assert max(indices) == cylinder.vertex_count


def test_empty_mesh_obj():
    assert read_obj_counts(to_obj(Mesh.empty())) == {"vertices": 0, "normals": 0, "faces": 0}


def test_stl_structure(cylinder):
    lines = to_stl(cylinder).splitlines()
    assert lines[0] == "solid RevolutionSurface"
    assert lines[-1] == "endsolid RevolutionSurface"
    assert sum(1 for line in lines if line.startswith("  facet normal ")) == 8
    assert sum(1 for line in lines if line.startswith("      vertex ")) == 24
    assert lines[2] == "    outer loop"
    assert lines[6] == "    endloop"
    assert lines[7] == "  endfacet"


def test_stl_first_facet(cylinder):
    lines = to_stl(cylinder).splitlines()
    np.testing.assert_allclose(_floats(lines[1], 2), [-0.707107, 0.0, -0.707107], atol=1e-6)
    np.testing.assert_allclose(_floats(lines[3], 1), [1, 0, 0], atol=1e-6)
    np.testing.assert_allclose(_floats(lines[4], 1), [0, 0, 1], atol=1e-6)
    np.testing.assert_allclose(_floats(lines[5], 1), [1, 1, 0], atol=1e-6)


def test_stl_custom_solid_name(cylinder):
    text = to_stl(cylinder, name="vase")
    assert text.startswith("solid vase\n")
    assert text.endswith("endsolid vase\n")


def test_facet_normals_are_unit(cylinder):
    normals = facet_normals(cylinder)
    assert normals.shape == (8, 3)
    np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-6)


def test_degenerate_facet_gets_zero_normal():
    vertices = np.array([[0, 0, 0], [1, 0, 0], [2, 0, 0]], dtype=float)
    mesh = Mesh(vertices=vertices, normals=np.zeros((3, 3)), faces=np.array([[0, 1, 2]]))
    np.testing.assert_array_equal(facet_normals(mesh), np.zeros((1, 3)))
    assert "  facet normal 0.000000 0.000000 0.000000" in to_stl(mesh).splitlines()


def test_stl_reloads_with_numpy_stl(cylinder, tmp_path):
    path = tmp_path / "surface.stl"
    path.write_text(to_stl(cylinder))
    loaded = stl_mesh.Mesh.from_file(str(path), mode=stl.Mode.ASCII, speedups=False)
    assert len(loaded.vectors) == cylinder.face_count
    np.testing.assert_allclose(loaded.vectors, cylinder.vertices[cylinder.faces], atol=1e-5)


def test_scene_snapshot_keys(cylinder):
    pts = [ControlPoint(600, 600), ControlPoint(600, 0, 2.0)]
    snap = scene_snapshot(pts, "bezier", 1, "y", 360.0, 4, cylinder)
    assert set(snap) == {
        "controlPoints", "curveType", "degree", "revolutionAxis",
        "revolutionAngle", "subdivisions", "vertices", "normals", "faces",
    }
    assert snap["controlPoints"][1] == {"x": 600, "y": 0, "w": 2.0}
    assert len(snap["vertices"]) == 10
    assert snap["vertices"][0] == {"x": 1.0, "y": 0.0, "z": 0.0}
    assert snap["faces"][0] == [0, 2, 1]


def test_scene_snapshot_json_is_indented(cylinder):
    text = scene_snapshot_json([(0, 0), (1, 1)], "bspline", 3, "x", 180.0, 4, cylinder)
    assert text.startswith('{\n  "controlPoints"')
    data = json.loads(text)
    assert data["controlPoints"][0] == {"x": 0.0, "y": 0.0, "w": 1.0}
    assert data["revolutionAxis"] == "x"


def test_curve_snapshot_json():
    data = json.loads(curve_snapshot_json("bezier", 0.02, 2, [{"x": 1, "y": 2}]))
    assert data == {"mode": "bezier", "step": 0.02, "degree": 2,
                    "points": [{"x": 1, "y": 2, "w": 1.0}]}


def test_frontend_buffers(cylinder):
    buffers = mesh_to_frontend(cylinder)
    assert len(buffers["positions"]) == 30
    assert len(buffers["normals"]) == 30
    assert buffers["indices"][:6] == [0, 2, 1, 2, 3, 1]
    assert buffers["vertex_count"] == 10
    assert buffers["face_count"] == 8
    assert buffers["index_count"] == 24
