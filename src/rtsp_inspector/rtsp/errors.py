"""RTSP client exception hierarchy.

Messages use the wording the error classifier matches on ("connection
closed", "request timed out", "bad status code: 401 (Unauthorized)").
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rtsp_inspector.rtsp.messages import Response


class RTSPError(Exception):
    """Base RTSP exception."""

    pass


class RTSPTransportError(RTSPError):
    """Transport-level errors (socket connect/send/receive)."""

    pass


class RTSPConnectionClosedError(RTSPTransportError):
    """Raised when the peer closes the connection mid-exchange."""

    pass


class RTSPTimeoutError(RTSPTransportError):
    """Raised when a read or write exceeds the client timeout."""

    pass


class RTSPProtocolError(RTSPError):
    """Raised when protocol parsing or framing fails."""

    pass


class RTSPAuthError(RTSPError):
    """Authentication-related errors (unsupported or malformed challenge)."""

    pass


class RTSPStatusError(RTSPError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, response: Response) -> None:
        self.response = response
        super().__init__(
            f"bad status code: {response.status_code} ({response.reason})"
        )

    @property
    def status_code(self) -> int:
        return self.response.status_code


class SDPParseError(RTSPProtocolError):
    """Raised when a session description cannot be parsed."""

    pass
