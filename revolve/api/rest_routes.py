"""REST API endpoints for curves, knot vectors, surfaces and exports."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from revolve.api.schemas import CurveRequest, KnotRequest, SurfaceRequest
from revolve.config import EXPORT_FORMATS, CanvasDefaults
from revolve.geometry.control_points import ControlPoint
from revolve.geometry.knots import open_uniform_knot_vector, knot_domain
from revolve.geometry.mesh_export import mesh_to_frontend
from revolve.geometry.sampler import generate_curve
from revolve.geometry.session import EditorSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

EXPORT_MEDIA_TYPES = {
    "obj": "text/plain",
    "stl": "text/plain",
    "json": "application/json",
}


def session_from_request(request: SurfaceRequest) -> EditorSession:
    """Build a throwaway editor session holding the request's state."""
    session = EditorSession(width=request.frame.width, height=request.frame.height)
    session.control_points = [ControlPoint(p.x, p.y, p.w) for p in request.control_points]
    session.set_revolution_params(
        axis=request.revolution.axis,
        angle=request.revolution.angle,
        subdivisions=request.revolution.subdivisions,
    )
    session.set_curve_params(
        curve_type=request.curve.type,
        degree=request.curve.degree,
        resolution=request.curve.resolution,
        step=request.curve.step,
        rational=request.curve.rational,
    )
    return session


def _surface_or_400(request: SurfaceRequest) -> EditorSession:
    session = session_from_request(request)
    if session.generate_surface() is None:
        logger.warning("Surface rejected: %d control points gave %d curve points",
                       len(request.control_points), len(session.curve))
        raise HTTPException(status_code=400,
                            detail="Add control points to generate a surface")
    return session


@router.get("/presets")
async def get_presets():
    """Return seed control polygons in canvas pixel coordinates."""
    w, h = CanvasDefaults.width, CanvasDefaults.height
    return {
        "presets": [
            {
                "id": "wave",
                "name": "Wave (curve editor seed)",
                "frame": {"width": w, "height": h},
                "curve": {"type": "bezier", "degree": 3},
                "control_points": [
                    {"x": w * 0.2, "y": h * 0.6, "w": 1.0},
                    {"x": w * 0.4, "y": h * 0.2, "w": 1.0},
                    {"x": w * 0.6, "y": h * 0.8, "w": 1.0},
                    {"x": w * 0.8, "y": h * 0.3, "w": 1.0},
                ],
            },
            {
                "id": "vase",
                "name": "Vase",
                "frame": {"width": w, "height": h},
                "curve": {"type": "bspline", "degree": 3},
                "control_points": [
                    {"x": w * 0.50, "y": h * 0.95, "w": 1.0},
                    {"x": w * 0.70, "y": h * 0.90, "w": 1.0},
                    {"x": w * 0.80, "y": h * 0.60, "w": 1.0},
                    {"x": w * 0.62, "y": h * 0.35, "w": 1.0},
                    {"x": w * 0.60, "y": h * 0.15, "w": 1.0},
                    {"x": w * 0.72, "y": h * 0.05, "w": 1.0},
                ],
            },
        ]
    }


@router.post("/knots")
async def build_knots(request: KnotRequest):
    """Open uniform knot vector and its valid parameter domain."""
    if request.n_control_points < request.degree + 1:
        raise HTTPException(
            status_code=400,
            detail=f"Degree {request.degree} needs at least {request.degree + 1} control points",
        )
    knots = open_uniform_knot_vector(request.n_control_points, request.degree,
                                     normalized=request.normalized)
    t_min, t_max = knot_domain(knots, request.n_control_points, request.degree)
    return {"knots": knots.tolist(), "domain": [t_min, t_max]}


@router.post("/curve")
async def sample_curve(request: CurveRequest):
    """Sample a Bezier or B-Spline curve. Too few points give an empty list."""
    params = request.curve
    points = [p.model_dump() for p in request.control_points]
    curve = generate_curve(points, params.type, params.degree,
                           resolution=params.resolution, step=params.step,
                           rational=params.rational)
    return {"points": curve.tolist(), "count": len(curve)}


@router.post("/surface")
async def generate_surface(request: SurfaceRequest):
    """Sample the curve and revolve it into mesh buffers for the frontend."""
    session = _surface_or_400(request)
    return {
        "curve": session.curve.tolist(),
        "mesh": mesh_to_frontend(session.mesh),
        "stats": session.stats(),
    }


@router.post("/export/{fmt}")
async def export_surface(fmt: str, request: SurfaceRequest):
    """Generate the surface and return it as an OBJ, STL or JSON download."""
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unknown export format: {fmt}")
    session = _surface_or_400(request)
    content = session.export(fmt)
    logger.info("Exported %s: %d vertices, %d faces", fmt,
                session.mesh.vertex_count, session.mesh.face_count)

    filename = f"surface.{fmt}"
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/health")
async def health_check():
    return {"status": "ok"}
