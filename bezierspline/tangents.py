"""
Tangent continuity enforcement.

After a control point is written, the handle opposite to the edited side of
the owning anchor is recomputed so the anchor's TangentMode holds. Works in
place on the store's point and mode lists.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from bezierspline.types import TangentMode


def mode_index_for(index: int) -> int:
    """Mode slot owning point ``index`` (anchors and both of their handles)."""
    return (index + 1) // 3


def handle_pair(index: int, count: int, loop: bool) -> Optional[Tuple[int, int, int]]:
    """
    Resolve (middle, fixed, enforced) indices for an edit at ``index``.

    The fixed handle is on the edited side (or the incoming side when the
    anchor itself was written); the enforced handle is across the anchor.
    Indices wrap around the seam when the curve is a loop. Returns None for
    the boundary anchors of an open curve, which have a single handle.
    """
    mode_index = mode_index_for(index)
    last_mode = (count - 1) // 3
    if not loop and (mode_index == 0 or mode_index == last_mode):
        return None

    middle = mode_index * 3
    if index <= middle:
        fixed = middle - 1
        if fixed < 0:
            fixed = count - 2
        enforced = middle + 1
        if enforced >= count:
            enforced = 1
    else:
        fixed = middle + 1
        if fixed >= count:
            fixed = 1
        enforced = middle - 1
        if enforced < 0:
            enforced = count - 2
    return middle, fixed, enforced


def enforce_mode(points: List[np.ndarray], modes: List[TangentMode], loop: bool, index: int) -> None:
    """Rewrite the enforced handle of the anchor owning ``index``."""
    mode = modes[mode_index_for(index)]
    if mode is TangentMode.FREE:
        return

    pair = handle_pair(index, len(points), loop)
    if pair is None:
        return
    middle, fixed, enforced = pair

    anchor = points[middle]
    tangent = anchor - points[fixed]
    if mode is TangentMode.ALIGNED:
        length = np.linalg.norm(tangent)
        if length > 0.0:
            tangent = tangent / length * np.linalg.norm(anchor - points[enforced])
        else:
            tangent = np.zeros(3)
    points[enforced] = anchor + tangent
