"""
Nearest point search and the convex containment heuristic.

The search is a coarse-to-fine grid over the global parameter: scan the
current bracket at a fixed step, keep the closest sample, shrink the bracket
to half a step around it, divide the step and scan again until the step
drops below the minimum. It is deterministic but only locally optimal on
curves that double back on themselves.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from bezierspline.evaluator import CurveEvaluator
from bezierspline.types import BoundingBox, VectorLike, as_vector3


def nearest_parameter(
    evaluator: CurveEvaluator,
    target: VectorLike,
    initial_step: float = 0.1,
    min_step: float = 0.001,
    refine_factor: float = 8.0,
) -> Tuple[float, float]:
    """
    Global parameter of the sampled point closest to ``target``.

    Returns:
        (t, distance) of the best sample.

    Raises:
        ValueError: The schedule would not terminate (initial_step not a
            positive finite number, min_step <= 0 or refine_factor <= 1).
    """
    if not (np.isfinite(initial_step) and initial_step > 0):
        raise ValueError(f"initial_step must be positive and finite, got {initial_step}")
    if not min_step > 0:
        raise ValueError(f"min_step must be > 0, got {min_step}")
    if not refine_factor > 1:
        raise ValueError(f"refine_factor must be > 1, got {refine_factor}")

    target = as_vector3(target)
    best_t = 0.0
    best_dist = float(np.linalg.norm(target - evaluator.position(best_t)))
    min_t, max_t = 0.0, 1.0
    new_min_t, new_max_t = min_t, max_t

    step = initial_step
    while step > min_step:
        half_step = step / 2.0
        t = min_t
        while t <= max_t:
            dist = float(np.linalg.norm(target - evaluator.position(t)))
            if dist < best_dist:
                best_dist = dist
                best_t = t
                new_min_t = t - half_step
                new_max_t = t + half_step
            t += step
        min_t, max_t = new_min_t, new_max_t
        step /= refine_factor

    return best_t, best_dist


def nearest_point(evaluator: CurveEvaluator, target: VectorLike, **schedule: float) -> np.ndarray:
    """World point on the curve nearest to ``target`` (see nearest_parameter)."""
    t, _ = nearest_parameter(evaluator, target, **schedule)
    return evaluator.position(t)


def is_point_inside(evaluator: CurveEvaluator, bounds: BoundingBox, point: VectorLike, **schedule: float) -> bool:
    """
    Radial containment heuristic, meaningful for convex closed curves only.

    ``point`` is inside when it is closer to the bounds center than the
    nearest curve point is.
    """
    point = as_vector3(point)
    center = bounds.center
    on_curve = nearest_point(evaluator, point, **schedule)
    return bool(np.linalg.norm(point - center) < np.linalg.norm(on_curve - center))
