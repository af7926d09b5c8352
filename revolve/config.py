"""Global configuration and constants for the revolution studio."""

import logging
import os
from dataclasses import dataclass


# Numerical constants
MIN_WEIGHT = 0.001  # smallest rational weight accepted from the editor
STEP_EPSILON = 1e-9  # slack so step sampling reaches the domain end
BASIS_SUM_THRESHOLD = 1e-6  # B-Spline samples with a smaller basis total are dropped
PROFILE_EXTENT = 2.0  # profiles are mapped into [-PROFILE_EXTENT, PROFILE_EXTENT]
HIT_RADIUS = 8.0  # px, control point pick radius on the canvas
DECIMALS = 6  # fixed precision for OBJ / STL text

# Limits exposed to the editor
MAX_DEGREE = 10
MAX_RESOLUTION = 500
MAX_SUBDIVISIONS = 512
MIN_STEP = 0.001
MAX_STEP = 0.5

CURVE_TYPES = ("bezier", "bspline")
AXES = ("x", "y", "z")
EXPORT_FORMATS = ("obj", "stl", "json")

STL_SOLID_NAME = "RevolutionSurface"


@dataclass
class CurveDefaults:
    curve_type: str = "bezier"
    degree: int = 3
    resolution: int = 50
    step: float = 0.01
    rational: bool = False


@dataclass
class RevolutionDefaults:
    axis: str = "y"
    angle: float = 360.0  # degrees
    subdivisions: int = 32


@dataclass
class CanvasDefaults:
    width: float = 800.0  # px
    height: float = 600.0  # px


SERVER_HOST = os.environ.get("REVOLVE_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("REVOLVE_PORT", "8000"))
LOG_LEVEL = getattr(logging, os.environ.get("REVOLVE_LOG_LEVEL", "INFO").upper(), logging.INFO)
LOG_FILE = os.environ.get("REVOLVE_LOG_FILE") or None
FRONTEND_DIR = os.environ.get("REVOLVE_FRONTEND_DIR") or os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "frontend")
