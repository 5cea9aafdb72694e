"""
bezierspline - editable composite cubic Bezier splines.

A spline is a chain of cubic Bezier segments sharing anchors, with
per-anchor tangent continuity modes (free, aligned, mirrored), optional
loop closure, and derived queries: point/velocity/direction sampling,
cached bounding box, nearest point search and a convex containment test.

Basic Usage:
    from bezierspline import BezierSpline, TangentMode

    spline = BezierSpline()
    spline.add_segment()
    spline.set_control_point_mode(3, TangentMode.MIRRORED)
    point = spline.get_point(0.5)

For more control:
    from bezierspline.config import SplineConfig, ConfigManager
    from bezierspline.transforms import AffineTransform
    from bezierspline.logging import setup_logging, get_logger
"""

from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Core API
# =============================================================================

from bezierspline.types import (
    BoundingBox,
    TangentMode,
    as_vector3,
)

from bezierspline.curve_math import (
    bezier_point,
    bezier_first_derivative,
)

from bezierspline.store import ControlPointStore

from bezierspline.evaluator import CurveEvaluator

from bezierspline.bounds import (
    BoundingBoxCache,
    compute_bounding_box,
)

from bezierspline.search import (
    nearest_parameter,
    nearest_point,
    is_point_inside,
)

from bezierspline.spline import BezierSpline

from bezierspline.transforms import (
    CoordinateTransform,
    IdentityTransform,
    AffineTransform,
    FunctionTransform,
)

from bezierspline.config import (
    SplineConfig,
    ConfigManager,
    create_default_config,
    load_config,
    get_config,
    init_config,
)

# =============================================================================
# Logging
# =============================================================================

from bezierspline.logging import (
    LOG_DEBUG,
    LOG_INFO,
    LOG_WARN,
    LOG_ERROR,
    get_logger,
    setup_logging,
    profile_scope,
    timed,
)

# =============================================================================
# Exceptions
# =============================================================================

from bezierspline.exceptions import (
    BezierSplineError,
    SplineStructureError,
    IndexOutOfRangeError,
    InvalidStructureError,
    GeometryError,
    DegenerateTangentError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
)

__all__ = [
    "__version__",
    # Types
    "BoundingBox",
    "TangentMode",
    "as_vector3",
    # Curve math
    "bezier_point",
    "bezier_first_derivative",
    # Components
    "ControlPointStore",
    "CurveEvaluator",
    "BoundingBoxCache",
    "compute_bounding_box",
    "nearest_parameter",
    "nearest_point",
    "is_point_inside",
    "BezierSpline",
    # Transforms
    "CoordinateTransform",
    "IdentityTransform",
    "AffineTransform",
    "FunctionTransform",
    # Config
    "SplineConfig",
    "ConfigManager",
    "create_default_config",
    "load_config",
    "get_config",
    "init_config",
    # Logging
    "LOG_DEBUG",
    "LOG_INFO",
    "LOG_WARN",
    "LOG_ERROR",
    "get_logger",
    "setup_logging",
    "profile_scope",
    "timed",
    # Exceptions
    "BezierSplineError",
    "SplineStructureError",
    "IndexOutOfRangeError",
    "InvalidStructureError",
    "GeometryError",
    "DegenerateTangentError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
]
