"""Apply the group-level --log-* options over the loaded LoggingConfig."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from rtsp_inspector.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    json_format: bool = False,
) -> LoggingConfig:
    """Merge CLI overrides into base.

    Unset options keep the file/environment value. --log-json only ever
    switches to JSON; text is the default, not an override.

    Raises:
        ValueError: If the merged configuration is invalid.
    """
    overrides: dict[str, object] = {}
    if level is not None:
        overrides["level"] = level
    if file is not None:
        overrides["file"] = file
    if json_format:
        overrides["format"] = "json"
    return replace(base, **overrides)


def configure_logging_from_cli(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    json_format: bool = False,
) -> LoggingConfig:
    """Merge CLI overrides into base and configure the root logger.

    Returns:
        The LoggingConfig that was applied.
    """
    from rtsp_inspector.logging import configure_logging

    final_config = build_logging_config(
        base, level=level, file=file, json_format=json_format
    )
    configure_logging(final_config)
    return final_config
