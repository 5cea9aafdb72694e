"""
Tests for the control point store and tangent mode enforcement.
"""

from __future__ import annotations

import numpy as np
import pytest

from bezierspline.exceptions import IndexOutOfRangeError, InvalidStructureError
from bezierspline.store import ControlPointStore
from bezierspline.tangents import enforce_mode, handle_pair, mode_index_for
from bezierspline.types import TangentMode


def check_invariants(store: ControlPointStore) -> None:
    n = store.control_point_count
    assert (n - 1) % 3 == 0
    assert store.curve_count >= 1
    assert store.spline_point_count == store.curve_count + 1
    if store.loop:
        np.testing.assert_array_equal(store.get_control_point(0), store.get_control_point(n - 1))
        assert store.modes[0] is store.modes[-1]


class TestDefaults:
    """Tests for the default curve."""

    def test_default_shape(self, default_store):
        """Default store is one open segment with two free anchors."""
        assert default_store.curve_count == 1
        assert default_store.control_point_count == 4
        assert default_store.modes == (TangentMode.FREE, TangentMode.FREE)
        assert default_store.loop is False

    def test_default_points(self, default_store):
        """Default points run from (1,0,0) to (4,0,0)."""
        expected = [[1, 0, 0], [2, 0, 0], [3, 0, 0], [4, 0, 0]]
        np.testing.assert_array_equal(default_store.points, expected)

    def test_reset_restores_default(self, three_segment_store):
        """reset discards edits and loop."""
        three_segment_store.set_loop(True)
        three_segment_store.reset()
        assert three_segment_store.curve_count == 1
        assert three_segment_store.loop is False
        np.testing.assert_array_equal(three_segment_store.get_control_point(3), [4, 0, 0])

    def test_points_property_is_a_copy(self, default_store):
        """Editing the returned array does not touch the store."""
        pts = default_store.points
        pts[0] = [9, 9, 9]
        np.testing.assert_array_equal(default_store.get_control_point(0), [1, 0, 0])


class TestControlPoints:
    """Tests for get/set control point."""

    def test_get_out_of_range(self, default_store):
        """Indices outside [0, n) are rejected."""
        with pytest.raises(IndexOutOfRangeError):
            default_store.get_control_point(4)
        with pytest.raises(IndexOutOfRangeError):
            default_store.get_control_point(-1)

    def test_set_out_of_range(self, default_store):
        """Out of range writes are rejected before any change."""
        with pytest.raises(IndexOutOfRangeError):
            default_store.set_control_point(7, (0, 0, 0))
        np.testing.assert_array_equal(default_store.points[:, 0], [1, 2, 3, 4])

    def test_move_handle_only_moves_handle(self, default_store):
        """Moving a handle of a free anchor changes nothing else."""
        default_store.set_control_point(1, (2, 1, 0))
        np.testing.assert_array_equal(default_store.get_control_point(1), [2, 1, 0])
        np.testing.assert_array_equal(default_store.get_control_point(0), [1, 0, 0])
        np.testing.assert_array_equal(default_store.get_control_point(2), [3, 0, 0])

    def test_anchor_drags_handles(self, two_segment_store):
        """Moving an interior anchor translates both its handles."""
        two_segment_store.set_control_point(3, (4, 1, 0))
        np.testing.assert_allclose(two_segment_store.get_control_point(2), [3, 1, 0])
        np.testing.assert_allclose(two_segment_store.get_control_point(4), [5, 1, 0])

    def test_boundary_anchor_drags_single_handle(self, default_store):
        """Open boundary anchors have one handle to drag."""
        default_store.set_control_point(0, (1, 0, 2))
        np.testing.assert_allclose(default_store.get_control_point(1), [2, 0, 2])
        np.testing.assert_allclose(default_store.get_control_point(2), [3, 0, 0])
        default_store.set_control_point(3, (4, 5, 0))
        np.testing.assert_allclose(default_store.get_control_point(2), [3, 5, 0])

    def test_returned_point_is_a_copy(self, default_store):
        """Mutating a returned vector does not mutate the store."""
        p = default_store.get_control_point(0)
        p += 10
        np.testing.assert_array_equal(default_store.get_control_point(0), [1, 0, 0])

    def test_rejects_non_3d(self, default_store):
        """Points must be three dimensional."""
        with pytest.raises(ValueError):
            default_store.set_control_point(0, (1, 2))


class TestSplinePoints:
    """Tests for anchor ordinal access."""

    def test_ordinals_map_to_anchors(self, three_segment_store):
        """Ordinal k is point 3k; the last ordinal is the last point."""
        assert three_segment_store.spline_point_count == 4
        for k in range(4):
            np.testing.assert_array_equal(three_segment_store.get_spline_point(k), [1 + 3 * k, 0, 0])

    def test_ordinal_out_of_range(self, default_store):
        """Ordinals outside [0, curve_count] are rejected."""
        with pytest.raises(IndexOutOfRangeError):
            default_store.get_spline_point(2)

    def test_set_spline_point_moves_anchor(self, two_segment_store):
        """set_spline_point routes to the anchor index."""
        two_segment_store.set_spline_point(1, (4, 2, 0))
        np.testing.assert_allclose(two_segment_store.get_control_point(3), [4, 2, 0])
        np.testing.assert_allclose(two_segment_store.get_control_point(4), [5, 2, 0])

    def test_round_trip_leaves_structure_unchanged(self, three_segment_store):
        """Writing back a read anchor changes nothing."""
        store = three_segment_store
        store.set_control_point(2, (3, 1, 0))
        store.set_control_point_mode(3, TangentMode.MIRRORED)
        store.set_control_point(7, (8, 2, 1))
        store.set_control_point_mode(6, TangentMode.ALIGNED)
        before = store.points
        for k in range(store.spline_point_count):
            store.set_spline_point(k, store.get_spline_point(k))
        np.testing.assert_allclose(store.points, before, atol=1e-12)


class TestTangentModes:
    """Tests for mode get/set and enforcement."""

    def test_mode_index_mapping(self):
        """Handles map to the mode slot of their nearest anchor."""
        assert [mode_index_for(i) for i in range(7)] == [0, 0, 1, 1, 1, 2, 2]

    def test_get_mode_for_handles(self, two_segment_store):
        """Both handles report their anchor's mode."""
        two_segment_store.set_control_point_mode(3, TangentMode.ALIGNED)
        assert two_segment_store.get_control_point_mode(2) is TangentMode.ALIGNED
        assert two_segment_store.get_control_point_mode(4) is TangentMode.ALIGNED
        assert two_segment_store.get_control_point_mode(1) is TangentMode.FREE

    def test_mode_accepts_strings(self, two_segment_store):
        """Modes may be given by name."""
        two_segment_store.set_control_point_mode(3, "Mirrored")
        assert two_segment_store.get_control_point_mode(3) is TangentMode.MIRRORED

    def test_unknown_mode(self, two_segment_store):
        """Unknown mode names are rejected."""
        with pytest.raises(ValueError):
            two_segment_store.set_control_point_mode(3, "smooth")

    def test_mirrored_symmetry(self, two_segment_store):
        """Mirrored handles are equidistant and opposite."""
        store = two_segment_store
        store.set_control_point(2, (3, 1, 0))
        store.set_control_point_mode(3, TangentMode.MIRRORED)
        anchor = store.get_control_point(3)
        a = store.get_control_point(2) - anchor
        b = store.get_control_point(4) - anchor
        np.testing.assert_allclose(a, -b)
        np.testing.assert_allclose(store.get_control_point(4), [5, -1, 0])

    def test_mirrored_follows_edited_side(self, two_segment_store):
        """Editing the outgoing handle rewrites the incoming one."""
        store = two_segment_store
        store.set_control_point_mode(3, TangentMode.MIRRORED)
        store.set_control_point(4, (4, 3, 0))
        np.testing.assert_allclose(store.get_control_point(2), [4, -3, 0])

    def test_aligned_keeps_enforced_distance(self, two_segment_store):
        """Aligned changes only the direction of the opposite handle."""
        store = two_segment_store
        store.set_control_point(2, (3, 1, 0))
        store.set_control_point_mode(2, TangentMode.ALIGNED)
        anchor = store.get_control_point(3)
        h = store.get_control_point(4) - anchor
        assert np.linalg.norm(h) == pytest.approx(1.0)
        np.testing.assert_allclose(h, [np.sqrt(0.5), -np.sqrt(0.5), 0])

        store.set_control_point(4, (6, -2, 0))
        incoming = store.get_control_point(2) - anchor
        assert np.linalg.norm(incoming) == pytest.approx(np.sqrt(2.0))
        np.testing.assert_allclose(store.get_control_point(2), [3, 1, 0])

    def test_aligned_directions_opposite(self, two_segment_store):
        """Aligned handles are collinear with the anchor, pointing apart."""
        store = two_segment_store
        store.set_control_point_mode(3, TangentMode.ALIGNED)
        store.set_control_point(4, (5, 2, 1))
        anchor = store.get_control_point(3)
        a = store.get_control_point(2) - anchor
        b = store.get_control_point(4) - anchor
        cos = np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b))
        assert cos == pytest.approx(-1.0)

    def test_open_boundary_not_enforced(self, two_segment_store):
        """Mirrored on an open end anchor has nothing to constrain."""
        store = two_segment_store
        store.set_control_point_mode(0, TangentMode.MIRRORED)
        store.set_control_point(1, (2, 5, 0))
        np.testing.assert_allclose(store.get_control_point(1), [2, 5, 0])
        assert handle_pair(1, store.control_point_count, loop=False) is None

    def test_enforcement_idempotent(self, three_segment_store):
        """Enforcing twice gives the same handles as enforcing once."""
        store = three_segment_store
        store.set_control_point(5, (6, 2, 1))
        store.set_control_point(7, (8, -1, 3))
        for mode in (TangentMode.ALIGNED, TangentMode.MIRRORED):
            store.set_control_point_mode(3, mode)
            store.set_control_point_mode(6, mode)
            points = list(store.points)
            modes = list(store.modes)
            for index in (2, 3, 4, 5, 6, 7):
                enforce_mode(points, modes, False, index)
                once = np.array(points)
                enforce_mode(points, modes, False, index)
                np.testing.assert_allclose(np.array(points), once, atol=1e-12)

    def test_aligned_zero_length_fixed_handle(self, two_segment_store):
        """A fixed handle sitting on the anchor collapses the enforced one."""
        store = two_segment_store
        store.set_control_point_mode(3, TangentMode.ALIGNED)
        store.set_control_point(2, (4, 0, 0))
        np.testing.assert_allclose(store.get_control_point(4), [4, 0, 0])


class TestLoop:
    """Tests for loop closure."""

    def test_enable_loop_closes(self, two_segment_store):
        """Turning loop on snaps the last anchor and mode to the first."""
        store = two_segment_store
        store.set_control_point_mode(0, TangentMode.ALIGNED)
        store.set_loop(True)
        check_invariants(store)
        np.testing.assert_array_equal(store.get_control_point(6), [1, 0, 0])
        assert store.modes[-1] is TangentMode.ALIGNED

    def test_loop_property(self, two_segment_store):
        """The loop property setter goes through set_loop."""
        two_segment_store.loop = True
        assert two_segment_store.loop is True
        check_invariants(two_segment_store)

    def test_move_first_anchor_in_loop(self, two_segment_store):
        """Writing anchor 0 writes the last anchor and drags both seam handles."""
        store = two_segment_store
        store.set_loop(True)
        store.set_control_point(0, (0, 1, 0))
        check_invariants(store)
        np.testing.assert_allclose(store.get_control_point(1), [1, 1, 0])
        np.testing.assert_allclose(store.get_control_point(5), [5, 1, 0])
        np.testing.assert_allclose(store.get_control_point(6), [0, 1, 0])

    def test_move_last_anchor_in_loop(self, two_segment_store):
        """Writing the last anchor writes anchor 0."""
        store = two_segment_store
        store.set_loop(True)
        store.set_control_point(6, (2, 2, 0))
        check_invariants(store)
        np.testing.assert_allclose(store.get_control_point(0), [2, 2, 0])
        np.testing.assert_allclose(store.get_control_point(1), [3, 2, 0])
        np.testing.assert_allclose(store.get_control_point(5), [7, 2, 0])

    def test_seam_mode_propagates(self, two_segment_store):
        """Setting the last anchor's mode sets the first's too, and enforces across the seam."""
        store = two_segment_store
        store.set_loop(True)
        store.set_control_point_mode(6, TangentMode.MIRRORED)
        check_invariants(store)
        assert store.modes[0] is TangentMode.MIRRORED
        np.testing.assert_allclose(store.get_control_point(1), [-4, 0, 0])
        anchor = store.get_control_point(0)
        np.testing.assert_allclose(store.get_control_point(1) - anchor, anchor - store.get_control_point(5))

    def test_seam_handle_edit_enforces_other_side(self, two_segment_store):
        """Editing handle 1 in a mirrored loop rewrites the last handle."""
        store = two_segment_store
        store.set_loop(True)
        store.set_control_point_mode(0, TangentMode.MIRRORED)
        store.set_control_point(1, (1, 2, 0))
        np.testing.assert_allclose(store.get_control_point(5), [1, -2, 0])
        check_invariants(store)


class TestPlainData:
    """Tests for to_dict / from_dict."""

    def test_round_trip(self, three_segment_store):
        """Plain data rebuilds an identical store."""
        store = three_segment_store
        store.set_control_point_mode(3, TangentMode.MIRRORED)
        store.set_loop(True)
        rebuilt = ControlPointStore.from_dict(store.to_dict())
        np.testing.assert_array_equal(rebuilt.points, store.points)
        assert rebuilt.modes == store.modes
        assert rebuilt.loop is True

    def test_to_dict_is_plain(self, default_store):
        """Output holds only builtin types."""
        data = default_store.to_dict()
        assert data == {
            "points": [[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [3.0, 0.0, 0.0], [4.0, 0.0, 0.0]],
            "modes": ["free", "free"],
            "loop": False,
        }

    def test_modes_default_to_free(self):
        """Missing modes become FREE."""
        store = ControlPointStore.from_dict({"points": [[0, 0, 0]] * 7})
        assert store.modes == (TangentMode.FREE,) * 3

    @pytest.mark.parametrize("count", [0, 1, 3, 5, 6])
    def test_bad_point_count(self, count):
        """Point counts not of the form 3n + 1 (n >= 1) are rejected."""
        with pytest.raises(InvalidStructureError):
            ControlPointStore.from_dict({"points": [[0, 0, 0]] * count})

    def test_mode_count_mismatch(self):
        """Mode count must be curve_count + 1."""
        with pytest.raises(InvalidStructureError):
            ControlPointStore.from_dict({"points": [[0, 0, 0]] * 4, "modes": ["free"]})

    def test_open_loop_rejected(self):
        """A loop whose ends differ is rejected."""
        data = ControlPointStore().to_dict()
        data["loop"] = True
        with pytest.raises(InvalidStructureError):
            ControlPointStore.from_dict(data)

    def test_unknown_mode_rejected(self):
        """Unknown mode names surface as structure errors."""
        data = ControlPointStore().to_dict()
        data["modes"] = ["free", "bogus"]
        with pytest.raises(InvalidStructureError):
            ControlPointStore.from_dict(data)

    def test_missing_points(self):
        """points is mandatory."""
        with pytest.raises(InvalidStructureError):
            ControlPointStore.from_dict({"modes": []})

    def test_copy_is_independent(self, default_store):
        """copy() shares no state."""
        clone = default_store.copy()
        clone.set_control_point(0, (0, 0, 0))
        np.testing.assert_array_equal(default_store.get_control_point(0), [1, 0, 0])


class TestStructuralInvariants:
    """Random edit sequences keep every invariant."""

    def test_random_edits(self):
        rng = np.random.default_rng(7)
        store = ControlPointStore()
        modes = list(TangentMode)
        for _ in range(300):
            op = rng.integers(0, 6)
            if op == 0:
                store.add_segment()
            elif op == 1 and store.curve_count > 1:
                store.remove_segment(int(rng.integers(0, store.control_point_count)))
            elif op == 2:
                store.set_loop(bool(rng.integers(0, 2)))
            elif op == 3:
                index = int(rng.integers(0, store.control_point_count))
                store.set_control_point_mode(index, modes[int(rng.integers(0, 3))])
            else:
                index = int(rng.integers(0, store.control_point_count))
                store.set_control_point(index, rng.normal(size=3))
            check_invariants(store)


class TestMalformedData:
    """from_dict reports malformed input as a structure error."""

    @pytest.mark.parametrize(
        "data",
        [
            {"points": 5},
            {"points": None},
            {"points": [[0, 0, 0]] * 4, "modes": 3},
            {"points": [[0, 0, 0], 1, [0, 0, 0], [0, 0, 0]]},
            {"points": [["a", "b", "c"]] * 4},
        ],
    )
    def test_rejected(self, data):
        with pytest.raises(InvalidStructureError):
            ControlPointStore.from_dict(data)
