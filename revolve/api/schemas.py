"""Pydantic models for API request/response validation."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from revolve.config import (
    MAX_DEGREE, MAX_RESOLUTION, MAX_SUBDIVISIONS, MIN_STEP, MAX_STEP,
    CurveDefaults, RevolutionDefaults, CanvasDefaults,
)
from revolve.geometry.control_points import clamp_weight


class FiniteModel(BaseModel):
    """Base for request models: inf and NaN fail validation."""
    model_config = ConfigDict(allow_inf_nan=False)


class ControlPointModel(FiniteModel):
    x: float
    y: float
    w: float = 1.0

    @field_validator("w")
    @classmethod
    def positive_weight(cls, v: float) -> float:
        return clamp_weight(v)


class CurveParams(FiniteModel):
    type: Literal["bezier", "bspline"] = CurveDefaults.curve_type
    degree: int = Field(CurveDefaults.degree, ge=1, le=MAX_DEGREE)
    resolution: int = Field(CurveDefaults.resolution, ge=1, le=MAX_RESOLUTION)
    # Optional fixed step; when set it replaces resolution sampling
    step: Optional[float] = Field(None, ge=MIN_STEP, le=MAX_STEP)
    rational: bool = False


class RevolutionParams(FiniteModel):
    axis: Literal["x", "y", "z"] = RevolutionDefaults.axis
    angle: float = Field(RevolutionDefaults.angle, gt=0.0, le=360.0)
    subdivisions: int = Field(RevolutionDefaults.subdivisions, ge=1, le=MAX_SUBDIVISIONS)


class CanvasFrame(FiniteModel):
    width: float = Field(CanvasDefaults.width, gt=0.0)
    height: float = Field(CanvasDefaults.height, gt=0.0)


class KnotRequest(FiniteModel):
    n_control_points: int = Field(4, ge=2, le=200)
    degree: int = Field(3, ge=1, le=MAX_DEGREE)
    normalized: bool = False


class CurveRequest(FiniteModel):
    control_points: list[ControlPointModel] = Field(default_factory=list)
    curve: CurveParams = Field(default_factory=CurveParams)


class SurfaceRequest(FiniteModel):
    control_points: list[ControlPointModel] = Field(default_factory=list)
    curve: CurveParams = Field(default_factory=CurveParams)
    revolution: RevolutionParams = Field(default_factory=RevolutionParams)
    frame: CanvasFrame = Field(default_factory=CanvasFrame)


class UpdatePoint(FiniteModel):
    index: int = Field(ge=0)
    x: float
    y: float
    w: float = 1.0


class UpdateCurveParams(FiniteModel):
    type: Optional[Literal["bezier", "bspline"]] = None
    degree: Optional[int] = Field(None, ge=1, le=MAX_DEGREE)
    resolution: Optional[int] = Field(None, ge=1, le=MAX_RESOLUTION)
    step: Optional[float] = Field(None, ge=MIN_STEP, le=MAX_STEP)
    rational: Optional[bool] = None


class UpdateRevolutionParams(FiniteModel):
    axis: Optional[Literal["x", "y", "z"]] = None
    angle: Optional[float] = Field(None, gt=0.0, le=360.0)
    subdivisions: Optional[int] = Field(None, ge=1, le=MAX_SUBDIVISIONS)
