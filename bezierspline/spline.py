"""
BezierSpline: the editable composite cubic Bezier curve.

Owns a ControlPointStore, evaluates it through an injected coordinate
transform, and caches its bounding box. All edits go through this object so
the cache can be dropped when the geometry changes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from bezierspline.bounds import BoundingBoxCache
from bezierspline.config import SplineConfig
from bezierspline.evaluator import CurveEvaluator
from bezierspline.logging import LOG_WARN, timed
from bezierspline.search import is_point_inside, nearest_parameter
from bezierspline.store import ControlPointStore
from bezierspline.transforms import CoordinateTransform, IdentityTransform
from bezierspline.types import BoundingBox, TangentMode, VectorLike


class BezierSpline:
    """
    Composite cubic Bezier spline with tangent-mode constraints.

    Args:
        store: Control point data (default: the one-segment default curve).
        transform: Local to world mapping (default: identity).
        config: Policy settings (default: SplineConfig()).

    Example:
        spline = BezierSpline()
        spline.add_segment()
        spline.set_control_point_mode(3, "mirrored")
        p = spline.get_point(0.25)
    """

    def __init__(
        self,
        store: Optional[ControlPointStore] = None,
        transform: Optional[CoordinateTransform] = None,
        config: Optional[SplineConfig] = None,
    ):
        self.config = config or SplineConfig()
        self.config.validate()
        self.store = store if store is not None else ControlPointStore()
        self._evaluator = CurveEvaluator(
            self.store,
            transform if transform is not None else IdentityTransform(),
            velocity_mode=self.config.evaluation.velocity_mode,
        )
        self._bounds = BoundingBoxCache(
            self._evaluator,
            steps_per_curve=self.config.bounds.steps_per_curve,
            min_size=self.config.bounds.min_size,
        )

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        transform: Optional[CoordinateTransform] = None,
        config: Optional[SplineConfig] = None,
    ) -> "BezierSpline":
        return cls(ControlPointStore.from_dict(data), transform=transform, config=config)

    def to_dict(self) -> Dict[str, Any]:
        return self.store.to_dict()

    # -------------------------------------------------------------------------
    # Transform and cache
    # -------------------------------------------------------------------------

    @property
    def transform(self) -> CoordinateTransform:
        return self._evaluator.transform

    @transform.setter
    def transform(self, value: Optional[CoordinateTransform]) -> None:
        self._evaluator.transform = value if value is not None else IdentityTransform()
        self.invalidate_bounds()

    def invalidate_bounds(self) -> None:
        """Drop the cached bounding box; the next query recomputes it."""
        self._bounds.invalidate()

    def _edited(self) -> None:
        if self.config.bounds.auto_invalidate:
            self._bounds.invalidate()

    # -------------------------------------------------------------------------
    # Structure queries
    # -------------------------------------------------------------------------

    @property
    def curve_count(self) -> int:
        return self.store.curve_count

    @property
    def control_point_count(self) -> int:
        return self.store.control_point_count

    @property
    def spline_point_count(self) -> int:
        return self.store.spline_point_count

    @property
    def loop(self) -> bool:
        return self.store.loop

    @loop.setter
    def loop(self, value: bool) -> None:
        self.set_loop(value)

    def get_control_point(self, index: int) -> np.ndarray:
        return self.store.get_control_point(index)

    def get_control_point_mode(self, index: int) -> TangentMode:
        return self.store.get_control_point_mode(index)

    def get_spline_point(self, ordinal: int) -> np.ndarray:
        return self.store.get_spline_point(ordinal)

    # -------------------------------------------------------------------------
    # Mutators
    # -------------------------------------------------------------------------

    def set_control_point(self, index: int, point: VectorLike) -> None:
        self.store.set_control_point(index, point)
        self._edited()

    def set_spline_point(self, ordinal: int, point: VectorLike) -> None:
        self.store.set_spline_point(ordinal, point)
        self._edited()

    def set_control_point_mode(self, index: int, mode: Union[str, TangentMode]) -> None:
        self.store.set_control_point_mode(index, mode)
        self._edited()

    def set_loop(self, value: bool) -> None:
        self.store.set_loop(value)
        self._edited()

    def add_segment(self) -> None:
        """Append a segment, stepping along the configured axis."""
        step = np.zeros(3)
        step[self.config.editing.axis_index] = self.config.editing.segment_step
        self.store.add_segment(step)
        self._edited()

    def remove_segment(self, selected_index: int) -> None:
        self.store.remove_segment(selected_index)
        self._edited()

    def reset(self) -> None:
        self.store.reset()
        self._edited()

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def get_point(self, t: float) -> np.ndarray:
        return self._evaluator.position(t)

    def get_velocity(self, t: float) -> np.ndarray:
        return self._evaluator.velocity(t)

    def get_direction(self, t: float) -> np.ndarray:
        return self._evaluator.direction(t)

    def locate(self, t: float) -> Tuple[int, float]:
        return self._evaluator.locate(t)

    def sample(self, count: int) -> np.ndarray:
        return self._evaluator.sample(count)

    def get_anchor_parameter(self, ordinal: int) -> float:
        return self._evaluator.anchor_parameter(ordinal)

    def get_anchor_at(self, t: float) -> int:
        return self._evaluator.anchor_at(t)

    # -------------------------------------------------------------------------
    # Derived queries
    # -------------------------------------------------------------------------

    def get_bounding_box(self) -> BoundingBox:
        return self._bounds.get()

    def _search_schedule(self) -> Dict[str, float]:
        search = self.config.search
        return {
            "initial_step": search.initial_step,
            "min_step": search.min_step,
            "refine_factor": search.refine_factor,
        }

    @timed
    def get_nearest_parameter(self, point: VectorLike) -> float:
        t, _ = nearest_parameter(self._evaluator, point, **self._search_schedule())
        return t

    def get_nearest_point(self, point: VectorLike) -> np.ndarray:
        return self._evaluator.position(self.get_nearest_parameter(point))

    def is_point_inside(self, point: VectorLike) -> bool:
        """Radial containment test; only meaningful for convex closed curves."""
        if not self.loop:
            LOG_WARN("spline: is_point_inside on an open spline; only meaningful for convex closed curves")
        return is_point_inside(self._evaluator, self.get_bounding_box(), point, **self._search_schedule())

    def __repr__(self) -> str:
        return f"BezierSpline(curve_count={self.curve_count}, loop={self.loop}, transform={self.transform!r})"
