"""
Tests for bezierspline logging helpers.
"""

import logging

import pytest

from bezierspline import BezierSpline
from bezierspline.logging import (
    LOG_DEBUG,
    LOG_ERROR,
    LOG_INFO,
    LOG_WARN,
    ROOT_LOGGER_NAME,
    get_logger,
    profile_scope,
    setup_logging,
    timed,
)


@pytest.fixture
def log_file(tmp_path):
    """Route bezierspline logs at DEBUG to a temporary file."""
    path = tmp_path / "bezierspline.log"
    setup_logging(level=logging.DEBUG, log_file=str(path), force=True)
    yield path
    setup_logging(force=True)


class TestLoggers:
    """Tests for logger naming and setup."""

    def test_named_logger(self):
        assert get_logger("spline").name == f"{ROOT_LOGGER_NAME}.spline"

    def test_root_logger(self):
        logger = get_logger()
        assert logger.name == ROOT_LOGGER_NAME
        assert logger.propagate is False

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("BEZIERSPLINE_LOG_LEVEL", "debug")
        try:
            assert setup_logging(force=True).level == logging.DEBUG
        finally:
            monkeypatch.delenv("BEZIERSPLINE_LOG_LEVEL")
            setup_logging(force=True)

    def test_force_replaces_handlers(self):
        first = setup_logging(force=True)
        count = len(first.handlers)
        second = setup_logging(force=True)
        assert len(second.handlers) == count

    def test_file_output(self, log_file):
        LOG_INFO("hello from the test")
        LOG_DEBUG("debug detail")
        text = log_file.read_text()
        assert "hello from the test" in text
        assert "debug detail" in text


class TestProfiling:
    """Tests for profile_scope and timed."""

    def test_profile_scope(self, log_file):
        with profile_scope("unit work"):
            pass
        assert "unit work took" in log_file.read_text()

    def test_timed_preserves_result(self, log_file):
        @timed
        def double(x):
            return 2 * x

        assert double(4) == 8
        assert double.__name__ == "double"
        assert "double took" in log_file.read_text()

    def test_spline_queries_log(self, log_file):
        spline = BezierSpline()
        spline.get_bounding_box()
        spline.get_nearest_parameter((2, 1, 0))
        spline.add_segment()
        text = log_file.read_text()
        assert "bounds: sampling took" in text
        assert "get_nearest_parameter took" in text
        assert "added segment" in text

    def test_open_spline_containment_warns(self, log_file):
        spline = BezierSpline()
        spline.is_point_inside((2, 0, 0))
        assert "[WARNING]" in log_file.read_text()
        assert "open spline" in log_file.read_text()

    def test_closed_spline_containment_is_quiet(self, log_file, circle_spline):
        circle_spline.is_point_inside((0, 0, 0))
        assert "open spline" not in log_file.read_text()


class TestLevelHelpers:
    """Tests for LOG_WARN and LOG_ERROR."""

    def test_levels_recorded(self, log_file):
        LOG_WARN("watch out")
        LOG_ERROR("went wrong")
        text = log_file.read_text()
        assert "[WARNING] bezierspline: watch out" in text
        assert "[ERROR] bezierspline: went wrong" in text
