"""Tests for structlog configuration."""

from __future__ import annotations

import io
import json

import pytest

from kubelanes.observability.logging import get_logger, setup_logging


class TestSetupLogging:
    def test_json_lines_with_component(self) -> None:
        buf = io.StringIO()
        setup_logging("info", stream=buf)
        get_logger("hierarchy.builder").info("hierarchy_built", lanes=3)
        line = json.loads(buf.getvalue())
        assert line["event"] == "hierarchy_built"
        assert line["component"] == "hierarchy.builder"
        assert line["level"] == "info"
        assert line["lanes"] == 3
        assert "ts" in line

    def test_level_filters(self) -> None:
        buf = io.StringIO()
        setup_logging("warning", stream=buf)
        logger = get_logger("engine")
        logger.info("ignored")
        logger.warning("namespace_build_timeout")
        assert buf.getvalue().count("\n") == 1
        assert "namespace_build_timeout" in buf.getvalue()

    def test_console_format(self) -> None:
        buf = io.StringIO()
        setup_logging("debug", fmt="console", stream=buf)
        get_logger("cli").debug("lanes_built", events=2)
        assert "lanes_built" in buf.getvalue()
        assert "events=2" in buf.getvalue()

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError, match="Invalid log format"):
            setup_logging("info", fmt="xml")
