"""
Pytest configuration and fixtures for bezierspline tests.

This module provides shared fixtures for testing:
- Control point stores in their common shapes
- Splines (open, looped, transformed)
- Temporary configuration and curve files
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest


KAPPA = 0.5522847498307936


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def default_store():
    """The default one-segment curve (1,0,0) .. (4,0,0)."""
    from bezierspline import ControlPointStore

    return ControlPointStore()


@pytest.fixture
def two_segment_store(default_store):
    """Default curve with one appended segment: x = 1..7 on the x axis."""
    default_store.add_segment()
    return default_store


@pytest.fixture
def three_segment_store(two_segment_store):
    """Three segments: x = 1..10 on the x axis."""
    two_segment_store.add_segment()
    return two_segment_store


@pytest.fixture
def circle_data():
    """Plain data for a closed four-segment unit circle approximation."""
    k = KAPPA
    return {
        "points": [
            [1.0, 0.0, 0.0], [1.0, k, 0.0], [k, 1.0, 0.0],
            [0.0, 1.0, 0.0], [-k, 1.0, 0.0], [-1.0, k, 0.0],
            [-1.0, 0.0, 0.0], [-1.0, -k, 0.0], [-k, -1.0, 0.0],
            [0.0, -1.0, 0.0], [k, -1.0, 0.0], [1.0, -k, 0.0],
            [1.0, 0.0, 0.0],
        ],
        "modes": ["mirrored"] * 5,
        "loop": True,
    }


# =============================================================================
# Spline Fixtures
# =============================================================================


@pytest.fixture
def default_spline():
    """Default spline with identity transform."""
    from bezierspline import BezierSpline

    return BezierSpline()


@pytest.fixture
def circle_spline(circle_data):
    """Closed convex spline around the origin."""
    from bezierspline import BezierSpline

    return BezierSpline.from_dict(circle_data)


# =============================================================================
# Temporary Files Fixtures
# =============================================================================


@pytest.fixture
def temp_config_file(tmp_path) -> Path:
    """Create a temporary configuration file."""
    import yaml

    config = {
        "bounds": {
            "steps_per_curve": 20,
        },
        "search": {
            "min_step": 0.0005,
        },
    }

    config_path = tmp_path / "test_config.yml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)

    return config_path


@pytest.fixture
def temp_curve_file(tmp_path, circle_data) -> Path:
    """Create a temporary curve file holding the circle."""
    import yaml

    curve_path = tmp_path / "circle.yml"
    with open(curve_path, "w") as f:
        yaml.dump(circle_data, f)

    return curve_path

