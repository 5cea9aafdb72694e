"""
Whole-segment insertion and removal.

A segment is three points (two handles and the next anchor) plus one mode
slot, so both operations keep len(points) == 3 * len(modes) - 2.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from bezierspline.exceptions import IndexOutOfRangeError, InvalidStructureError
from bezierspline.logging import LOG_DEBUG
from bezierspline.tangents import enforce_mode, mode_index_for
from bezierspline.types import VectorLike, as_vector3

if TYPE_CHECKING:
    from bezierspline.store import ControlPointStore

DEFAULT_SEGMENT_STEP = (1.0, 0.0, 0.0)


def add_segment(store: "ControlPointStore", step: Optional[VectorLike] = None) -> None:
    """
    Append one segment after the last point.

    The two handles and the new anchor are placed one ``step`` apart
    starting from the current last point. The new anchor inherits the mode
    of the previous last anchor. In a loop the new last anchor is snapped
    back onto the first one.
    """
    step = as_vector3(DEFAULT_SEGMENT_STEP if step is None else step)
    points = store._points
    modes = store._modes

    point = points[-1].copy()
    for _ in range(3):
        point = point + step
        points.append(point.copy())

    modes.append(modes[-1])
    enforce_mode(points, modes, store._loop, len(points) - 4)

    if store._loop:
        points[-1] = points[0].copy()
        modes[-1] = modes[0]
        enforce_mode(points, modes, store._loop, 0)

    LOG_DEBUG(f"segments: added segment, curve_count={store.curve_count}")


def remove_segment(store: "ControlPointStore", selected_index: int) -> None:
    """
    Remove the segment chosen by ``selected_index``.

    - index <= 1: the leading segment (first anchor, its handle and the
      next handle go; the second anchor becomes the first)
    - index >= len(points) - 2: the trailing segment
    - otherwise: the interior anchor owning the index, with both handles

    Raises:
        IndexOutOfRangeError: ``selected_index`` is not a point index.
        InvalidStructureError: only one segment is left.
    """
    points = store._points
    modes = store._modes
    count = len(points)
    selected_index = int(selected_index)
    if not 0 <= selected_index < count:
        raise IndexOutOfRangeError("control point", selected_index, count)
    if store.curve_count <= 1:
        raise InvalidStructureError("cannot remove the only remaining segment")

    if selected_index <= 1:
        del points[:3]
        del modes[0]
    elif selected_index >= count - 2:
        del points[-3:]
        del modes[-1]
    else:
        mode_index = mode_index_for(selected_index)
        store._points = [p for i, p in enumerate(points) if mode_index_for(i) != mode_index]
        del modes[mode_index]

    if store._loop:
        # Re-close onto the (possibly new) first anchor.
        store._modes[-1] = store._modes[0]
        store.set_control_point(0, store._points[0])

    LOG_DEBUG(f"segments: removed segment at index {selected_index}, curve_count={store.curve_count}")