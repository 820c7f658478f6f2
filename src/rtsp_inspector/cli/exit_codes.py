"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, input)
    20-29: Reachability errors
    40-49: Protocol errors
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rtsp_inspector.domain.models import StreamReport


class ExitCode(IntEnum):
    """Exit codes for rtsp-inspector commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2  # Ctrl+C / SIGINT

    # Validation errors (10-19)
    CONFIG_ERROR = 11
    INVALID_URL = 12

    # Reachability errors (20-29)
    UNREACHABLE = 20

    # Protocol errors (40-49)
    DESCRIBE_FAILED = 40


def exit_code_for_report(report: StreamReport) -> ExitCode:
    """Map a probe report to the command's exit code."""
    if report.describe_ok:
        return ExitCode.SUCCESS
    if not report.reachable:
        return ExitCode.UNREACHABLE
    return ExitCode.DESCRIBE_FAILED
