"""Configuration builder with explicit layering.

Each configuration source (file, environment, CLI) is turned into a
ConfigSource; ConfigBuilder applies them in precedence order and builds the
final InspectorConfig.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from rtsp_inspector.config.env import EnvReader
from rtsp_inspector.config.models import InspectorConfig, LoggingConfig, ProbeConfig


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values mean "not specified in this source" and never override
    values from lower-precedence sources.
    """

    # Probe config
    timeout_seconds: float | None = None
    debug: bool | None = None
    user_agent: str | None = None

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None


class ConfigBuilder:
    """Builds InspectorConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config), source_name="file")
        builder.apply(source_from_env(reader), source_name="env")
        builder.apply(cli_source, source_name="cli")
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._origins: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply a configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
            source_name: Label recorded for each value this source sets.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._origins[field_obj.name] = source_name

    def origin(self, key: str) -> str:
        """Return which source set key, or "default"."""
        return self._origins.get(key, "default")

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> InspectorConfig:
        """Build the final InspectorConfig with defaults for unset values.

        Raises:
            ValueError: If a layered value fails model validation.
        """
        probe_defaults = ProbeConfig()
        probe = ProbeConfig(
            timeout_seconds=float(
                self._get("timeout_seconds", probe_defaults.timeout_seconds)
            ),
            debug=bool(self._get("debug", probe_defaults.debug)),
            user_agent=self._get("user_agent", probe_defaults.user_agent),
        )

        logging_defaults = LoggingConfig()
        logging_config = LoggingConfig(
            level=self._get("logging_level", logging_defaults.level),
            file=self._get("logging_file", logging_defaults.file),
            format=self._get("logging_format", logging_defaults.format),
            include_stderr=self._get(
                "logging_include_stderr", logging_defaults.include_stderr
            ),
        )

        return InspectorConfig(probe=probe, logging=logging_config)


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Reads the [probe] and [logging] tables; unknown keys are ignored.
    """
    probe = file_config.get("probe", {})
    logging_conf = file_config.get("logging", {})

    log_file_str = logging_conf.get("file")
    log_file = Path(log_file_str).expanduser() if log_file_str else None

    return ConfigSource(
        timeout_seconds=probe.get("timeout_seconds"),
        debug=probe.get("debug"),
        user_agent=probe.get("user_agent"),
        logging_level=logging_conf.get("level"),
        logging_file=log_file,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from RTSP_INSPECTOR_* environment variables."""
    return ConfigSource(
        timeout_seconds=reader.get_float("TIMEOUT"),
        debug=reader.get_bool("DEBUG"),
        user_agent=reader.get_str("USER_AGENT"),
        logging_level=reader.get_str("LOG_LEVEL"),
        logging_file=reader.get_path("LOG_FILE"),
        logging_format=reader.get_str("LOG_FORMAT"),
    )
