"""
Control point storage for a composite cubic Bezier spline.

Points are kept in one ordered list. Index i is an anchor (on-curve point)
when i % 3 == 0; every other index is a handle of the nearest anchor.
There is one TangentMode per anchor and a loop flag identifying the first
and last anchors.

Invariants after every public mutation:
- len(points) == 3 * curve_count + 1, curve_count >= 1
- len(modes) == curve_count + 1
- loop implies points[0] == points[-1] and modes[0] == modes[-1]
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from bezierspline.exceptions import IndexOutOfRangeError, InvalidStructureError
from bezierspline.logging import LOG_DEBUG
from bezierspline.segments import add_segment, remove_segment
from bezierspline.tangents import enforce_mode, mode_index_for
from bezierspline.types import TangentMode, VectorLike, as_vector3


DEFAULT_POINTS = (
    (1.0, 0.0, 0.0),
    (2.0, 0.0, 0.0),
    (3.0, 0.0, 0.0),
    (4.0, 0.0, 0.0),
)


class ControlPointStore:
    """
    Ordered control points, per-anchor tangent modes and the loop flag.

    Created empty-handed it holds the default single segment
    (1,0,0) .. (4,0,0) with two FREE anchors, open.
    """

    def __init__(
        self,
        points: Optional[Sequence[VectorLike]] = None,
        modes: Optional[Sequence[Union[str, TangentMode]]] = None,
        loop: bool = False,
    ):
        self._points: List[np.ndarray] = []
        self._modes: List[TangentMode] = []
        self._loop = False

        if points is None:
            if modes is not None or loop:
                raise InvalidStructureError("modes/loop given without points")
            self.reset()
            return

        self._points = [as_vector3(p) for p in points]
        if modes is None:
            modes = [TangentMode.FREE] * ((len(self._points) - 1) // 3 + 1)
        self._modes = [TangentMode.parse(m) for m in modes]
        self._loop = bool(loop)
        self.validate()

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Restore the default one-segment open curve."""
        self._points = [as_vector3(p) for p in DEFAULT_POINTS]
        self._modes = [TangentMode.FREE, TangentMode.FREE]
        self._loop = False

    def validate(self) -> None:
        """Raise InvalidStructureError unless all structural invariants hold."""
        n = len(self._points)
        if n < 4 or (n - 1) % 3 != 0:
            raise InvalidStructureError(f"point count {n} is not 3 * curve_count + 1 with curve_count >= 1")
        expected_modes = (n - 1) // 3 + 1
        if len(self._modes) != expected_modes:
            raise InvalidStructureError(f"expected {expected_modes} modes for {n} points, got {len(self._modes)}")
        if self._loop:
            if not np.array_equal(self._points[0], self._points[-1]):
                raise InvalidStructureError("loop is set but first and last anchors differ")
            if self._modes[0] is not self._modes[-1]:
                raise InvalidStructureError("loop is set but first and last modes differ")

    @property
    def curve_count(self) -> int:
        return (len(self._points) - 1) // 3

    @property
    def control_point_count(self) -> int:
        return len(self._points)

    @property
    def spline_point_count(self) -> int:
        """Number of anchors, curve_count + 1."""
        return len(self._modes)

    @property
    def points(self) -> np.ndarray:
        """Copy of all control points as an (n, 3) array."""
        return np.array(self._points)

    @property
    def modes(self) -> Tuple[TangentMode, ...]:
        return tuple(self._modes)

    @property
    def loop(self) -> bool:
        return self._loop

    @loop.setter
    def loop(self, value: bool) -> None:
        self.set_loop(value)

    def _check_point_index(self, index: int) -> int:
        index = int(index)
        if not 0 <= index < len(self._points):
            raise IndexOutOfRangeError("control point", index, len(self._points))
        return index

    # -------------------------------------------------------------------------
    # Control points
    # -------------------------------------------------------------------------

    def get_control_point(self, index: int) -> np.ndarray:
        index = self._check_point_index(index)
        return self._points[index].copy()

    def set_control_point(self, index: int, point: VectorLike) -> None:
        """
        Move a control point.

        Moving an anchor drags its handles by the same delta before the
        tangent mode is re-applied. In a loop, writing either seam anchor
        writes both.
        """
        index = self._check_point_index(index)
        point = as_vector3(point)
        points = self._points
        last = len(points) - 1

        if index % 3 == 0:
            delta = point - points[index]
            if self._loop:
                if index == 0:
                    points[1] = points[1] + delta
                    points[last - 1] = points[last - 1] + delta
                    points[last] = point.copy()
                elif index == last:
                    points[0] = point.copy()
                    points[1] = points[1] + delta
                    points[index - 1] = points[index - 1] + delta
                else:
                    points[index - 1] = points[index - 1] + delta
                    points[index + 1] = points[index + 1] + delta
            else:
                if index > 0:
                    points[index - 1] = points[index - 1] + delta
                if index + 1 < len(points):
                    points[index + 1] = points[index + 1] + delta

        points[index] = point
        enforce_mode(points, self._modes, self._loop, index)

    # -------------------------------------------------------------------------
    # Anchors by ordinal
    # -------------------------------------------------------------------------

    def _anchor_point_index(self, ordinal: int) -> int:
        ordinal = int(ordinal)
        if not 0 <= ordinal < len(self._modes):
            raise IndexOutOfRangeError("spline point", ordinal, len(self._modes))
        if ordinal == len(self._modes) - 1:
            return len(self._points) - 1
        return 3 * ordinal

    def get_spline_point(self, ordinal: int) -> np.ndarray:
        """Anchor number ``ordinal`` in 0..curve_count."""
        return self._points[self._anchor_point_index(ordinal)].copy()

    def set_spline_point(self, ordinal: int, point: VectorLike) -> None:
        self.set_control_point(self._anchor_point_index(ordinal), point)

    # -------------------------------------------------------------------------
    # Tangent modes
    # -------------------------------------------------------------------------

    def get_control_point_mode(self, index: int) -> TangentMode:
        index = self._check_point_index(index)
        return self._modes[mode_index_for(index)]

    def set_control_point_mode(self, index: int, mode: Union[str, TangentMode]) -> None:
        """Set the mode of the anchor owning point ``index`` and re-enforce it."""
        index = self._check_point_index(index)
        mode = TangentMode.parse(mode)
        mode_index = mode_index_for(index)
        self._modes[mode_index] = mode
        if self._loop:
            if mode_index == 0:
                self._modes[-1] = mode
            elif mode_index == len(self._modes) - 1:
                self._modes[0] = mode
        LOG_DEBUG(f"store: anchor {mode_index} mode -> {mode.value}")
        enforce_mode(self._points, self._modes, self._loop, index)

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def set_loop(self, value: bool) -> None:
        """Toggle closure. Turning it on snaps the last anchor onto the first."""
        self._loop = bool(value)
        if self._loop:
            self._modes[-1] = self._modes[0]
            self.set_control_point(0, self._points[0])
        LOG_DEBUG(f"store: loop -> {self._loop}")

    # -------------------------------------------------------------------------
    # Segments
    # -------------------------------------------------------------------------

    def add_segment(self, step: Optional[VectorLike] = None) -> None:
        """Append a segment after the last anchor; see segments.add_segment."""
        add_segment(self, step)

    def remove_segment(self, selected_index: int) -> None:
        """Remove the segment selected by a point index; see segments.remove_segment."""
        remove_segment(self, selected_index)

    # -------------------------------------------------------------------------
    # Plain data
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Points, modes and loop flag as plain Python data."""
        return {
            "points": [[float(c) for c in p] for p in self._points],
            "modes": [m.value for m in self._modes],
            "loop": self._loop,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ControlPointStore":
        """Rebuild a store from ``to_dict`` output, validating the layout."""
        if "points" not in data:
            raise InvalidStructureError("missing 'points'")
        try:
            points = [as_vector3(p) for p in data["points"]]
            modes = data.get("modes")
            if modes is not None:
                modes = [TangentMode.parse(m) for m in modes]
        except (TypeError, ValueError) as e:
            raise InvalidStructureError(str(e)) from e
        return cls(points=points, modes=modes, loop=bool(data.get("loop", False)))

    def copy(self) -> "ControlPointStore":
        return ControlPointStore.from_dict(self.to_dict())

    def __repr__(self) -> str:
        return (
            f"ControlPointStore(curve_count={self.curve_count}, "
            f"loop={self._loop}, modes={[m.value for m in self._modes]})"
        )
