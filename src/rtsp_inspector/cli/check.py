"""CLI check command: TCP reachability only."""

import sys

import click

from rtsp_inspector.cli.exit_codes import ExitCode
from rtsp_inspector.cli.output import error_exit
from rtsp_inspector.config import InspectorConfig
from rtsp_inspector.introspector import InvalidURLError, format_json, is_connectable
from rtsp_inspector.introspector.formatters import connectivity_to_dict


@click.command("check")
@click.argument("url")
@click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Connect timeout in seconds (default: from config, 5).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
@click.pass_obj
def check_command(
    obj: dict,
    url: str,
    timeout: float | None,
    json_output: bool,
) -> None:
    """Check that the host of URL accepts TCP connections.

    No RTSP request is sent. Exits 0 when reachable, 20 otherwise.
    """
    config: InspectorConfig = obj["config"]
    if timeout is None:
        timeout = config.probe.timeout_seconds

    try:
        result = is_connectable(url, timeout)
    except InvalidURLError as e:
        error_exit(str(e), ExitCode.INVALID_URL, json_output)
    except KeyboardInterrupt:
        click.echo("Interrupted.", err=True)
        sys.exit(ExitCode.INTERRUPTED)

    if json_output:
        click.echo(format_json(connectivity_to_dict(url, result)))
    elif result.ok:
        click.echo(f"reachable: {url}")
    else:
        click.echo(
            f"unreachable: {url}: {result.failure_reason} ({result.error_message})"
        )

    sys.exit(ExitCode.SUCCESS if result.ok else ExitCode.UNREACHABLE)
