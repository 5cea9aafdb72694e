"""
Cubic Bezier evaluation for a single segment.

Pure functions of four control points and a local parameter t in [0, 1].
"""

import numpy as np


def bezier_point(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, p3: np.ndarray, t: float) -> np.ndarray:
    """Position on the cubic through p0..p3 (Bernstein form)."""
    t = min(max(t, 0.0), 1.0)
    u = 1.0 - t
    return (u * u * u) * p0 + (3.0 * u * u * t) * p1 + (3.0 * u * t * t) * p2 + (t * t * t) * p3


def bezier_first_derivative(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, p3: np.ndarray, t: float) -> np.ndarray:
    """
    Derivative of the cubic with respect to t.

    Three times the quadratic Bernstein blend of the control point deltas.
    """
    t = min(max(t, 0.0), 1.0)
    u = 1.0 - t
    return (3.0 * u * u) * (p1 - p0) + (6.0 * u * t) * (p2 - p1) + (3.0 * t * t) * (p3 - p2)
