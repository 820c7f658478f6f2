"""Structured logging module for RTSP Inspector.

Provides configurable logging with JSON format support and file rotation.
Includes probe context support so records from the handshake thread carry
the probe they belong to.
"""

from rtsp_inspector.logging.config import configure_logging
from rtsp_inspector.logging.context import (
    ProbeContextFilter,
    clear_probe_context,
    get_probe_context,
    new_probe_id,
    probe_context,
    set_probe_context,
)
from rtsp_inspector.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "ProbeContextFilter",
    "clear_probe_context",
    "configure_logging",
    "get_probe_context",
    "new_probe_id",
    "probe_context",
    "set_probe_context",
]
