"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (RTSP_INSPECTOR_*)
3. Config file (~/.rtsp-inspector/config.toml)
4. Default values

Environment variables:
- RTSP_INSPECTOR_TIMEOUT: Probe deadline in seconds
- RTSP_INSPECTOR_DEBUG: Attach debug traces to reports
- RTSP_INSPECTOR_USER_AGENT: User-Agent header for RTSP requests
- RTSP_INSPECTOR_LOG_LEVEL: debug, info, warning or error
- RTSP_INSPECTOR_LOG_FILE: Path of a rotating log file
- RTSP_INSPECTOR_LOG_FORMAT: text or json
- RTSP_INSPECTOR_CONFIG_PATH: Path to config file (overrides default location)
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from rtsp_inspector.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from rtsp_inspector.config.env import EnvReader
from rtsp_inspector.config.models import InspectorConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".rtsp-inspector"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""

    pass


def get_default_config_path(env_reader: EnvReader | None = None) -> Path:
    """Get the config file path.

    Can be overridden by the RTSP_INSPECTOR_CONFIG_PATH environment variable.
    """
    reader = env_reader or EnvReader()
    return reader.get_path("CONFIG_PATH", DEFAULT_CONFIG_FILE) or DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Args:
        path: Path to config file. If None, uses the default location.
        strict: If True, raise ConfigError when the file cannot be read or
            parsed. If False (default), log a warning and return {}.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist.

    Raises:
        ConfigError: When strict=True and the file cannot be loaded.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with path.open("rb") as f:
            config = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        if strict:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    timeout_seconds: float | None = None,
    debug: bool | None = None,
    user_agent: str | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> InspectorConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides RTSP_INSPECTOR_CONFIG_PATH).
        timeout_seconds: CLI override for the probe timeout.
        debug: CLI override for debug traces.
        user_agent: CLI override for the User-Agent header.
        env_reader: EnvReader to use (reads os.environ if None).
        strict: If True, raise ConfigError for an unreadable config file.

    Returns:
        InspectorConfig with merged configuration.

    Raises:
        ConfigError: If strict and the file cannot be loaded, or if the merged
            values fail validation.
    """
    reader = env_reader or EnvReader()
    if config_path is None:
        config_path = get_default_config_path(reader)

    file_config = load_config_file(config_path, strict=strict)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    builder.apply(
        ConfigSource(
            timeout_seconds=timeout_seconds,
            debug=debug,
            user_agent=user_agent,
        ),
        source_name="cli",
    )

    try:
        return builder.build()
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
