"""
bezierspline exception hierarchy.

Every error raised by the package derives from BezierSplineError so callers
can catch the whole family with one except clause. The structural and
geometric errors additionally subclass the closest builtin (IndexError,
ValueError) so plain Python idioms keep working.
"""

from typing import Any, Optional


class BezierSplineError(Exception):
    """Base exception for all bezierspline errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Structure Errors
# =============================================================================


class SplineStructureError(BezierSplineError):
    """Base class for control point / mode structure errors."""

    pass


class IndexOutOfRangeError(SplineStructureError, IndexError):
    """A point, anchor or mode index lies outside its valid bound."""

    def __init__(self, kind: str, index: Any, size: int):
        super().__init__(
            f"{kind} index {index} out of range [0, {size})",
            details={"kind": kind, "index": index, "size": size},
        )


class InvalidStructureError(SplineStructureError):
    """An operation or input would break the point/mode layout."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid spline structure: {reason}",
            details={"reason": reason},
        )


# =============================================================================
# Geometry Errors
# =============================================================================


class GeometryError(BezierSplineError):
    """Base class for numerical geometry errors."""

    pass


class DegenerateTangentError(GeometryError, ValueError):
    """Direction requested where the curve velocity is exactly zero."""

    def __init__(self, t: float):
        super().__init__(
            f"Curve velocity is zero at t={t}; direction is undefined",
            details={"t": t},
        )


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(BezierSplineError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )
