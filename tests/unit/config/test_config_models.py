"""Tests for configuration models."""

import pytest

from rtsp_inspector.config.models import InspectorConfig, LoggingConfig, ProbeConfig
from rtsp_inspector.rtsp.client import DEFAULT_USER_AGENT


class TestProbeConfig:
    def test_defaults(self) -> None:
        config = ProbeConfig()
        assert config.timeout_seconds == 5.0
        assert config.debug is False
        assert config.user_agent == DEFAULT_USER_AGENT

    @pytest.mark.parametrize("timeout", [0, -1.0])
    def test_timeout_must_be_positive(self, timeout: float) -> None:
        with pytest.raises(ValueError, match="timeout_seconds"):
            ProbeConfig(timeout_seconds=timeout)

    def test_user_agent_not_empty(self) -> None:
        with pytest.raises(ValueError, match="user_agent"):
            ProbeConfig(user_agent=" ")


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "warning"
        assert config.format == "text"
        assert config.file is None

    def test_invalid_level(self) -> None:
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError, match="format"):
            LoggingConfig(format="xml")

    def test_level_case_insensitive(self) -> None:
        assert LoggingConfig(level="DEBUG").level == "DEBUG"


class TestInspectorConfig:
    def test_nested_defaults(self) -> None:
        config = InspectorConfig()
        assert isinstance(config.probe, ProbeConfig)
        assert isinstance(config.logging, LoggingConfig)
