"""CLI module for RTSP Inspector."""

import logging
from pathlib import Path

import click

from rtsp_inspector import __version__
from rtsp_inspector.cli.exit_codes import ExitCode
from rtsp_inspector.cli.output import error_exit
from rtsp_inspector.config import (
    ConfigError,
    InspectorConfig,
    configure_logging_from_cli,
    get_config,
)

logger = logging.getLogger(__name__)


def _configure_logging(
    config: InspectorConfig,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from the loaded config and CLI options.

    Args:
        config: Loaded configuration (file and environment).
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    try:
        configure_logging_from_cli(
            config.logging,
            level=log_level,
            file=log_file,
            json_format=log_json,
        )
    except ValueError as e:
        error_exit(f"Invalid logging configuration: {e}", ExitCode.CONFIG_ERROR)


@click.group()
@click.version_option(version=__version__, prog_name="rtsp-inspector")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.rtsp-inspector/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: warning).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """RTSP Inspector - Probe RTSP(S) endpoints and describe their media."""
    ctx.ensure_object(dict)

    # Tests may pass a prepared config through obj
    if "config" not in ctx.obj:
        try:
            # An explicitly named config file must load
            ctx.obj["config"] = get_config(
                config_path=config_path, strict=config_path is not None
            )
        except ConfigError as e:
            error_exit(str(e), ExitCode.CONFIG_ERROR)

    _configure_logging(ctx.obj["config"], log_level, log_file, log_json)
    logger.debug(
        "rtsp-inspector %s starting: timeout=%ss, log_level=%s",
        __version__,
        ctx.obj["config"].probe.timeout_seconds,
        log_level or ctx.obj["config"].logging.level,
    )


# Defer import to avoid circular dependency
def _register_commands():
    from rtsp_inspector.cli.check import check_command
    from rtsp_inspector.cli.describe import describe_command

    main.add_command(describe_command)
    main.add_command(check_command)


_register_commands()
