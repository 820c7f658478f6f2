"""TCP reachability preflight, independent of the RTSP protocol."""

from __future__ import annotations

import logging
import socket
import time

from rtsp_inspector.introspector.interface import PreflightError
from rtsp_inspector.introspector.validation import parse_rtsp_url
from rtsp_inspector.rtsp.client import DEFAULT_PORT, split_host_port
from rtsp_inspector.rtsp.url import RTSPURL

logger = logging.getLogger(__name__)


def normalize_host_port(host: str) -> str:
    """Append the default RTSP port when the authority has none.

    Handles bracketed IPv6 literals: "[::1]" becomes "[::1]:554" while
    "[::1]:8554" is returned unchanged. An empty port ("cam:") is filled in.
    """
    if host.startswith("[") and host.endswith("]"):
        return f"{host}:{DEFAULT_PORT}"
    if host.endswith(":"):
        return f"{host}{DEFAULT_PORT}"
    if ":" not in host:
        return f"{host}:{DEFAULT_PORT}"
    return host


class NetworkDialer:
    """Opens and immediately closes a TCP connection to an RTSP endpoint."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout

    def normalize_host_port(self, host: str) -> str:
        return normalize_host_port(host)

    def check_connectivity(self, url: str) -> bool:
        """Validate a URL and check that its host accepts TCP connections.

        Returns:
            True if the connection was established.

        Raises:
            InvalidURLError: If the URL is invalid.
        """
        parsed = parse_rtsp_url(url)
        try:
            self.preflight_dial(parsed)
        except PreflightError as e:
            logger.debug("Connectivity check failed for %s: %s", parsed.redacted(), e)
            return False
        return True

    def preflight_dial(self, parsed_url: RTSPURL) -> None:
        """Dial the URL's host within the timeout and close the connection.

        Raises:
            PreflightError: With a message naming the target and the cause
                ("no such host", "i/o timeout", "connection refused", ...).
        """
        host_port = self.normalize_host_port(parsed_url.host)
        hostname, port = split_host_port(host_port)
        start = time.monotonic()
        try:
            conn = socket.create_connection((hostname, port), timeout=self.timeout)
        except socket.gaierror as e:
            raise PreflightError(
                f"preflight dial failed: lookup {hostname}: no such host ({e})"
            ) from e
        except UnicodeError as e:
            # IDNA rejects empty or over-long labels before any lookup
            raise PreflightError(
                f"preflight dial failed: lookup {hostname}: no such host ({e})"
            ) from e
        except TimeoutError as e:
            raise PreflightError(
                f"preflight dial failed: dial tcp {host_port}: i/o timeout"
            ) from e
        except ConnectionRefusedError as e:
            raise PreflightError(
                f"preflight dial failed: dial tcp {host_port}: connect: connection refused"
            ) from e
        except OSError as e:
            raise PreflightError(
                f"preflight dial failed: dial tcp {host_port}: {e}"
            ) from e
        finally:
            elapsed = round((time.monotonic() - start) * 1000, 1)
            logger.debug(
                "Preflight dial to %s took %.1fms",
                host_port,
                elapsed,
                extra={"operation": "preflight_dial", "duration_ms": elapsed},
            )
        conn.close()
