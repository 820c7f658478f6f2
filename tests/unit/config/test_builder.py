"""Tests for ConfigBuilder and the source factories."""

from pathlib import Path

import pytest

from rtsp_inspector.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from rtsp_inspector.config.env import EnvReader


class TestConfigBuilder:
    """Tests for ConfigBuilder layering."""

    def test_defaults(self) -> None:
        config = ConfigBuilder().build()
        assert config.probe.timeout_seconds == 5.0
        assert config.logging.level == "warning"

    def test_later_source_wins(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(timeout_seconds=3.0, debug=True), "file")
        builder.apply(ConfigSource(timeout_seconds=1.0), "env")
        config = builder.build()

        assert config.probe.timeout_seconds == 1.0
        assert config.probe.debug is True
        assert builder.origin("timeout_seconds") == "env"
        assert builder.origin("debug") == "file"
        assert builder.origin("user_agent") == "default"

    def test_none_does_not_override(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(logging_level="debug"), "file")
        builder.apply(ConfigSource(logging_level=None), "cli")
        assert builder.build().logging.level == "debug"

    def test_integer_timeout_coerced(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(timeout_seconds=3), "file")
        assert builder.build().probe.timeout_seconds == 3.0

    def test_invalid_value_raises(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(timeout_seconds=-2.0), "cli")
        with pytest.raises(ValueError):
            builder.build()


class TestSourceFromFile:
    def test_reads_tables(self) -> None:
        source = source_from_file(
            {
                "probe": {"timeout_seconds": 2.5, "debug": True, "user_agent": "cam-probe"},
                "logging": {"level": "info", "file": "~/logs/probe.log", "format": "json"},
                "unknown": {"x": 1},
            }
        )
        assert source.timeout_seconds == 2.5
        assert source.debug is True
        assert source.user_agent == "cam-probe"
        assert source.logging_level == "info"
        assert source.logging_file == Path("~/logs/probe.log").expanduser()
        assert source.logging_format == "json"

    def test_empty(self) -> None:
        assert source_from_file({}) == ConfigSource()


class TestSourceFromEnv:
    def test_reads_variables(self) -> None:
        reader = EnvReader(
            env={
                "RTSP_INSPECTOR_TIMEOUT": "1.5",
                "RTSP_INSPECTOR_DEBUG": "yes",
                "RTSP_INSPECTOR_LOG_LEVEL": "error",
                "RTSP_INSPECTOR_LOG_FORMAT": "json",
            }
        )
        source = source_from_env(reader)
        assert source.timeout_seconds == 1.5
        assert source.debug is True
        assert source.logging_level == "error"
        assert source.logging_format == "json"
        assert source.user_agent is None
