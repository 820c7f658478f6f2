"""CLI output helpers shared by the commands.

Reports go to stdout; errors and verbose failure lines go to stderr so
stdout stays machine-readable.
"""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from rtsp_inspector.cli.exit_codes import ExitCode


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Print an error to stderr and exit with code.

    With json_output the error is a single object keyed by the exit code
    name, e.g. {"status": "failed", "error": {"code": "INVALID_URL", ...}}.
    """
    if json_output:
        payload = {"status": "failed", "error": {"code": code.name, "message": message}}
        click.echo(json.dumps(payload), err=True)
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def failure_line(reason: object, message: str | None) -> None:
    """Echo "failure: REASON (MESSAGE)" to stderr."""
    click.echo(f"failure: {reason} ({message or ''})", err=True)
