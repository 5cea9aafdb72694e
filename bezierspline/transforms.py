"""
Local to world coordinate mapping.

A spline stores its control points in a local space. The owning context
supplies the mapping into its parent space through the CoordinateTransform
protocol; the curve code never depends on a particular scene graph.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np
from scipy.spatial.transform import Rotation

from bezierspline.types import VectorLike, as_vector3


@runtime_checkable
class CoordinateTransform(Protocol):
    """Capability for mapping local curve space into world space."""

    def to_world(self, point: VectorLike) -> np.ndarray:
        """Map a local point to world space."""
        ...

    def world_origin(self) -> np.ndarray:
        """World position of the local origin."""
        ...

    def transform_vector(self, vector: VectorLike) -> np.ndarray:
        """Map a local direction (ignores translation)."""
        ...


class IdentityTransform:
    """Local space is world space."""

    def to_world(self, point: VectorLike) -> np.ndarray:
        return as_vector3(point)

    def world_origin(self) -> np.ndarray:
        return np.zeros(3)

    def transform_vector(self, vector: VectorLike) -> np.ndarray:
        return as_vector3(vector)

    def __repr__(self) -> str:
        return "IdentityTransform()"


class AffineTransform:
    """
    Affine transform held as a 4x4 homogeneous matrix.

    Attributes:
        matrix: (4, 4) array; the last row must be [0, 0, 0, 1].
    """

    def __init__(self, matrix: Optional[np.ndarray] = None):
        if matrix is None:
            matrix = np.eye(4)
        matrix = np.array(matrix, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"matrix must be 4x4, got {matrix.shape}")
        if not np.allclose(matrix[3], [0.0, 0.0, 0.0, 1.0]):
            raise ValueError("matrix is not affine (last row must be [0, 0, 0, 1])")
        self.matrix = matrix

    @classmethod
    def from_trs(
        cls,
        translation: VectorLike = (0.0, 0.0, 0.0),
        rotation: Optional[VectorLike] = None,
        scale: VectorLike = (1.0, 1.0, 1.0),
    ) -> "AffineTransform":
        """
        Build from translation, rotation and scale, applied as T * R * S.

        Args:
            translation: World position of the local origin.
            rotation: Quaternion in (x, y, z, w) order, or None for identity.
            scale: Per-axis scale.
        """
        linear = np.diag(as_vector3(scale))
        if rotation is not None:
            linear = Rotation.from_quat(np.asarray(rotation, dtype=float)).as_matrix() @ linear
        matrix = np.eye(4)
        matrix[:3, :3] = linear
        matrix[:3, 3] = as_vector3(translation)
        return cls(matrix)

    def to_world(self, point: VectorLike) -> np.ndarray:
        return self.matrix[:3, :3] @ as_vector3(point) + self.matrix[:3, 3]

    def world_origin(self) -> np.ndarray:
        return self.matrix[:3, 3].copy()

    def transform_vector(self, vector: VectorLike) -> np.ndarray:
        return self.matrix[:3, :3] @ as_vector3(vector)

    def __repr__(self) -> str:
        return f"AffineTransform(matrix={self.matrix.tolist()})"


class FunctionTransform:
    """
    Wrap a plain point mapping function.

    The origin is taken from ``to_world((0, 0, 0))`` unless given, and vectors
    are mapped as the difference of two mapped points.
    """

    def __init__(self, func: Callable[[np.ndarray], VectorLike], origin: Optional[VectorLike] = None):
        self._func = func
        self._origin = as_vector3(origin) if origin is not None else None

    def to_world(self, point: VectorLike) -> np.ndarray:
        return as_vector3(self._func(as_vector3(point)))

    def world_origin(self) -> np.ndarray:
        if self._origin is not None:
            return self._origin.copy()
        return self.to_world(np.zeros(3))

    def transform_vector(self, vector: VectorLike) -> np.ndarray:
        return self.to_world(vector) - self.to_world(np.zeros(3))
