"""Exceptions and the RTSP client interface used by the probe engine."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from rtsp_inspector.domain.enums import FailureReason

if TYPE_CHECKING:
    from rtsp_inspector.rtsp.messages import Request, Response
    from rtsp_inspector.rtsp.sdp import SessionDescription
    from rtsp_inspector.rtsp.url import RTSPURL


class InspectorError(Exception):
    """Base class for probe errors."""

    pass


class InvalidURLError(InspectorError, ValueError):
    """Raised when a URL is malformed or uses an unsupported scheme.

    Raised before any network activity; no report is produced.
    """

    def __init__(
        self,
        url: str,
        detail: str,
        reason: FailureReason = FailureReason.INVALID_URL,
    ) -> None:
        self.url = url
        self.detail = detail
        self.reason = reason
        super().__init__(f"invalid rtsp url: {detail}")


class DescribeFailedError(InspectorError):
    """A probe completed but the DESCRIBE did not succeed."""

    def __init__(self, reason: FailureReason, message: str = "") -> None:
        self.reason = reason
        self.message = message
        text = f"rtsp describe failed ({reason})"
        if message:
            text += f": {message}"
        super().__init__(text)


class UnreachableError(DescribeFailedError):
    """The TCP preflight failed; the endpoint is not reachable."""

    pass


class PreflightError(InspectorError):
    """Raised when the TCP reachability check fails."""

    pass


class HandshakeError(InspectorError):
    """Raised when a stage of the RTSP handshake fails.

    Attributes:
        stage: Stage that failed ("start", "options", "describe", "auth-retry").
        trace: Debug trace captured up to the failure (empty unless debugging).
    """

    def __init__(self, message: str, stage: str, trace: tuple[str, ...] = ()) -> None:
        self.stage = stage
        self.trace = trace
        super().__init__(message)


class MediaClassificationError(InspectorError):
    """Raised when a media description cannot be classified."""

    pass


class UnsupportedVideoFormatError(MediaClassificationError):
    """Raised for video tracks whose codec is neither H264 nor H265."""

    def __init__(self, format_name: str) -> None:
        self.format_name = format_name
        super().__init__(f"unsupported video format: {format_name}")


class RTSPClientProtocol(Protocol):
    """Interface of the RTSP client driven by the handshake orchestrator.

    rtsp_inspector.rtsp.RTSPClient is the production implementation; tests
    inject fakes through the orchestrator's client_factory.
    """

    on_request: Callable[[Request], None] | None
    on_response: Callable[[Response], None] | None

    def start(self, scheme: str, host: str) -> None:
        """Open the control connection."""
        ...

    def options(self, url: RTSPURL) -> Response:
        """Send OPTIONS."""
        ...

    def describe(self, url: RTSPURL) -> tuple[SessionDescription, Response]:
        """Send DESCRIBE and return the parsed session description."""
        ...

    def close(self) -> None:
        """Close the connection (idempotent)."""
        ...


ClientFactory = Callable[..., RTSPClientProtocol]
