"""
Cached axis-aligned bounds of the sampled curve.

The box is seeded with a small cube around the start point so a degenerate
curve still has volume, then grown over steps_per_curve * curve_count
evenly spaced samples in (0, 1]. The cached value is kept until
invalidate() is called.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from bezierspline.evaluator import CurveEvaluator
from bezierspline.logging import LOG_DEBUG, profile_scope
from bezierspline.types import BoundingBox


def compute_bounding_box(evaluator: CurveEvaluator, steps_per_curve: int = 10, min_size: float = 0.1) -> BoundingBox:
    """Sample the curve and return its world-space bounding box."""
    box = BoundingBox.from_center_size(evaluator.position(0.0), np.full(3, min_size))
    steps = steps_per_curve * evaluator.store.curve_count
    for i in range(1, steps + 1):
        box.encapsulate(evaluator.position(i / steps))
    return box


class BoundingBoxCache:
    """Lazily computed bounding box of a CurveEvaluator."""

    def __init__(self, evaluator: CurveEvaluator, steps_per_curve: int = 10, min_size: float = 0.1):
        self.evaluator = evaluator
        self.steps_per_curve = steps_per_curve
        self.min_size = min_size
        self._cached: Optional[BoundingBox] = None

    @property
    def is_cached(self) -> bool:
        return self._cached is not None

    def get(self) -> BoundingBox:
        """Cached box, computed on first use. Returns a copy."""
        if self._cached is None:
            with profile_scope("bounds: sampling"):
                self._cached = compute_bounding_box(self.evaluator, self.steps_per_curve, self.min_size)
            LOG_DEBUG(
                f"bounds: computed center={self._cached.center.tolist()} "
                f"extents={self._cached.extents.tolist()}"
            )
        return self._cached.copy()

    def invalidate(self) -> None:
        self._cached = None
