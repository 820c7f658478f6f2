"""Probe context for structured logging.

Provides context propagation using contextvars so that every record logged
while a probe runs, including records from the handshake thread, carries
the probe id and its (redacted) target.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

# Context variables for probe identification
_probe_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "probe_id", default=None
)
_probe_target: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "probe_target", default=None
)


def new_probe_id() -> str:
    """Return a short random probe identifier (8 hex characters)."""
    return uuid.uuid4().hex[:8]


def set_probe_context(probe_id: str, target: str | None = None) -> None:
    """Set the current probe context.

    Args:
        probe_id: Probe identifier (e.g., "1a2b3c4d").
        target: URL being probed, with any password masked.
    """
    _probe_id.set(probe_id)
    _probe_target.set(target)


def clear_probe_context() -> None:
    """Clear the current probe context."""
    _probe_id.set(None)
    _probe_target.set(None)


def get_probe_context() -> tuple[str | None, str | None]:
    """Get current probe context.

    Returns:
        Tuple of (probe_id, probe_target), either may be None.
    """
    return _probe_id.get(), _probe_target.get()


@contextmanager
def probe_context(
    target: str, probe_id: str | None = None
) -> Generator[str, None, None]:
    """Context manager scoping log records to one probe.

    Restores the previous context on exit, so probes may nest.

    Args:
        target: URL being probed, with any password masked.
        probe_id: Identifier to use; a new one is generated if None.

    Yields:
        The probe id.

    Example:
        with probe_context("rtsp://camera/stream"):
            logger.info("Probing")  # Record carries probe_id/probe_target
    """
    id_token = _probe_id.set(probe_id or new_probe_id())
    target_token = _probe_target.set(target)
    try:
        yield _probe_id.get() or ""
    finally:
        _probe_target.reset(target_token)
        _probe_id.reset(id_token)


class ProbeContextFilter(logging.Filter):
    """Logging filter that injects probe context into log records.

    Adds probe_id and probe_target attributes to LogRecord from contextvars.
    For text format, also adds a compact probe_tag like [P1a2b3c4d].
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject probe context into log record.

        Args:
            record: The log record to process.

        Returns:
            Always True (does not filter, only enriches).
        """
        probe_id, probe_target = get_probe_context()

        record.probe_id = probe_id
        record.probe_target = probe_target
        record.probe_tag = f"[P{probe_id}] " if probe_id else ""

        return True
