"""Configuration management for RTSP Inspector.

Configuration is loaded with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (RTSP_INSPECTOR_*)
3. Config file (~/.rtsp-inspector/config.toml)
4. Default values (lowest priority)

- EnvReader: Environment variable reading with an injectable mapping
- ConfigBuilder / ConfigSource: Layered config construction
- build_logging_config: Merge CLI logging overrides over a base config
"""

from rtsp_inspector.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from rtsp_inspector.config.env import EnvReader
from rtsp_inspector.config.loader import (
    ConfigError,
    get_config,
    get_default_config_path,
    load_config_file,
)
from rtsp_inspector.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from rtsp_inspector.config.models import InspectorConfig, LoggingConfig, ProbeConfig

__all__ = [
    # Models
    "InspectorConfig",
    "LoggingConfig",
    "ProbeConfig",
    # Loader
    "ConfigError",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    # Builder
    "ConfigBuilder",
    "ConfigSource",
    "EnvReader",
    "source_from_env",
    "source_from_file",
    # Logging
    "build_logging_config",
    "configure_logging_from_cli",
]
