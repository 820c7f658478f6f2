"""Configuration data models.

This module defines dataclasses for RTSP Inspector configuration options.
"""

from dataclasses import dataclass, field
from pathlib import Path

from rtsp_inspector.rtsp.client import DEFAULT_USER_AGENT

LOG_LEVELS = frozenset({"debug", "info", "warning", "error"})
LOG_FORMATS = frozenset({"text", "json"})


@dataclass
class ProbeConfig:
    """Configuration for probe behavior."""

    # Overall deadline per probe, covering preflight and handshake
    timeout_seconds: float = 5.0

    # Attach a trace of handshake stages and RTSP messages to reports
    debug: bool = False

    # User-Agent header sent with RTSP requests
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if not self.user_agent.strip():
            raise ValueError("user_agent must not be empty")


@dataclass
class LoggingConfig:
    """Where and how probe logs are written.

    The rotating file handler keeps a fixed number of fixed-size files; see
    rtsp_inspector.logging.config.
    """

    level: str = "warning"
    file: Path | None = None  # None logs to stderr
    format: str = "text"
    include_stderr: bool = False  # Only meaningful with a file

    def __post_init__(self) -> None:
        if self.level.lower() not in LOG_LEVELS:
            raise ValueError(
                f"level must be one of {sorted(LOG_LEVELS)}, got {self.level!r}"
            )
        if self.format.lower() not in LOG_FORMATS:
            raise ValueError(
                f"format must be one of {sorted(LOG_FORMATS)}, got {self.format!r}"
            )


@dataclass
class InspectorConfig:
    """Main configuration container for RTSP Inspector."""

    probe: ProbeConfig = field(default_factory=ProbeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
