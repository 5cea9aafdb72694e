"""
Core data types for bezierspline.

- Vector3 coercion helpers
- TangentMode: per-anchor continuity policy
- BoundingBox: axis-aligned box stored as center + half extents
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

import numpy as np

Vector3 = np.ndarray
VectorLike = Union[np.ndarray, Sequence[float]]


def as_vector3(value: VectorLike) -> np.ndarray:
    """Return ``value`` as a fresh float array of shape (3,)."""
    arr = np.array(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"expected a 3D vector, got shape {arr.shape}")
    return arr


# =============================================================================
# Tangent Modes
# =============================================================================


class TangentMode(Enum):
    """
    Continuity policy applied to the two handles around an anchor.

    FREE: handles move independently.
    ALIGNED: handles are collinear and opposite; distances are independent.
    MIRRORED: handles are reflections of each other through the anchor.
    """
    FREE = "free"
    ALIGNED = "aligned"
    MIRRORED = "mirrored"

    @classmethod
    def parse(cls, value: Union[str, "TangentMode"]) -> "TangentMode":
        """Accept a TangentMode, its value or its name (any case)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for mode in cls:
            if text in (mode.value, mode.name.lower()):
                return mode
        raise ValueError(f"Unknown tangent mode: {value!r}")


# =============================================================================
# Bounding Volume
# =============================================================================


@dataclass
class BoundingBox:
    """
    Axis-aligned bounding box.

    Attributes:
        center: Box center (3,)
        extents: Half of the box size along each axis (3,)
    """
    center: np.ndarray
    extents: np.ndarray

    def __post_init__(self):
        self.center = as_vector3(self.center)
        self.extents = np.abs(as_vector3(self.extents))

    @classmethod
    def from_center_size(cls, center: VectorLike, size: VectorLike) -> "BoundingBox":
        return cls(center=as_vector3(center), extents=as_vector3(size) * 0.5)

    @classmethod
    def from_min_max(cls, lo: VectorLike, hi: VectorLike) -> "BoundingBox":
        lo = as_vector3(lo)
        hi = as_vector3(hi)
        return cls(center=(lo + hi) * 0.5, extents=(hi - lo) * 0.5)

    @property
    def size(self) -> np.ndarray:
        return self.extents * 2.0

    @property
    def min(self) -> np.ndarray:
        return self.center - self.extents

    @property
    def max(self) -> np.ndarray:
        return self.center + self.extents

    def encapsulate(self, point: VectorLike) -> None:
        """Grow the box in place so that it contains ``point``."""
        point = as_vector3(point)
        lo = np.minimum(self.min, point)
        hi = np.maximum(self.max, point)
        self.center = (lo + hi) * 0.5
        self.extents = (hi - lo) * 0.5

    def contains(self, point: VectorLike) -> bool:
        """Inclusive containment test."""
        point = as_vector3(point)
        return bool(np.all(point >= self.min) and np.all(point <= self.max))

    def copy(self) -> "BoundingBox":
        return BoundingBox(center=self.center.copy(), extents=self.extents.copy())
