"""
Parametric evaluation over the whole chain of segments.

A global parameter t in [0, 1] is spread evenly across the segments: the
integer part of t * curve_count picks the segment, the fraction is the local
parameter. Results are mapped to world space through the injected transform.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from bezierspline.curve_math import bezier_first_derivative, bezier_point
from bezierspline.exceptions import DegenerateTangentError, IndexOutOfRangeError
from bezierspline.store import ControlPointStore
from bezierspline.transforms import CoordinateTransform, IdentityTransform


def _check_parameter(t: float) -> float:
    t = float(t)
    if not np.isfinite(t):
        raise ValueError(f"curve parameter must be finite, got {t}")
    return t


class CurveEvaluator:
    """
    Position, velocity and direction queries on a ControlPointStore.

    Args:
        store: Control points to read. Always read live, never copied.
        transform: Local to world mapping (identity when None).
        velocity_mode: "origin_subtract" maps derivatives as
            to_world(d) - world_origin(); "vector" uses transform_vector(d).
    """

    def __init__(
        self,
        store: ControlPointStore,
        transform: Optional[CoordinateTransform] = None,
        velocity_mode: str = "origin_subtract",
    ):
        self.store = store
        self.transform = transform if transform is not None else IdentityTransform()
        self.velocity_mode = velocity_mode

    def locate(self, t: float) -> Tuple[int, float]:
        """Map global ``t`` to (first point index of the segment, local t)."""
        t = _check_parameter(t)
        store = self.store
        if t >= 1.0:
            return store.control_point_count - 4, 1.0
        t = min(max(t, 0.0), 1.0) * store.curve_count
        segment = int(t)
        return segment * 3, t - segment

    def anchor_parameter(self, ordinal: int) -> float:
        """Global parameter at which anchor ``ordinal`` (0..curve_count) lies."""
        count = self.store.curve_count
        if not 0 <= ordinal <= count:
            raise IndexOutOfRangeError("spline point", ordinal, count + 1)
        return ordinal / count

    def anchor_at(self, t: float) -> int:
        """Ordinal of the anchor closest in parameter to global ``t``."""
        t = min(max(_check_parameter(t), 0.0), 1.0)
        return int(t * self.store.curve_count + 0.5)

    def _segment(self, i: int) -> List[np.ndarray]:
        pts = self.store._points
        return [pts[i], pts[i + 1], pts[i + 2], pts[i + 3]]

    def local_position(self, t: float) -> np.ndarray:
        i, local_t = self.locate(t)
        return bezier_point(*self._segment(i), local_t)

    def position(self, t: float) -> np.ndarray:
        """World position at global parameter ``t``."""
        return self.transform.to_world(self.local_position(t))

    def velocity(self, t: float) -> np.ndarray:
        """World-space first derivative at global parameter ``t``."""
        i, local_t = self.locate(t)
        derivative = bezier_first_derivative(*self._segment(i), local_t)
        if self.velocity_mode == "vector":
            return self.transform.transform_vector(derivative)
        return self.transform.to_world(derivative) - self.transform.world_origin()

    def direction(self, t: float) -> np.ndarray:
        """
        Unit tangent at ``t``.

        Raises:
            DegenerateTangentError: The velocity is exactly zero.
        """
        velocity = self.velocity(t)
        length = np.linalg.norm(velocity)
        if length == 0.0:
            raise DegenerateTangentError(float(t))
        return velocity / length

    def sample(self, count: int) -> np.ndarray:
        """``count`` world positions at evenly spaced t over [0, 1], inclusive."""
        if count < 2:
            raise ValueError(f"sample count must be >= 2, got {count}")
        return np.array([self.position(i / (count - 1)) for i in range(count)])
