"""Minimal RTSP/1.0 client for endpoint probing.

This module provides the protocol pieces the inspector drives:

- RTSPClient: Blocking control connection (OPTIONS, DESCRIBE)
- parse_url / RTSPURL: URL parsing with credential handling
- parse_sdp / SessionDescription: Session description parsing
- Sender: Basic and Digest authentication
- RTSPError and subclasses: Client failures
"""

from rtsp_inspector.rtsp.auth import Sender
from rtsp_inspector.rtsp.client import DEFAULT_PORT, RTSPClient, split_host_port
from rtsp_inspector.rtsp.errors import (
    RTSPAuthError,
    RTSPConnectionClosedError,
    RTSPError,
    RTSPProtocolError,
    RTSPStatusError,
    RTSPTimeoutError,
    RTSPTransportError,
    SDPParseError,
)
from rtsp_inspector.rtsp.messages import Request, Response
from rtsp_inspector.rtsp.sdp import (
    Format,
    H264Format,
    H265Format,
    MediaDescription,
    SessionDescription,
    parse_sdp,
)
from rtsp_inspector.rtsp.url import SUPPORTED_SCHEMES, RTSPURL, parse_url

__all__ = [
    "DEFAULT_PORT",
    "RTSPClient",
    "split_host_port",
    "Sender",
    "Request",
    "Response",
    # URL
    "RTSPURL",
    "SUPPORTED_SCHEMES",
    "parse_url",
    # SDP
    "Format",
    "H264Format",
    "H265Format",
    "MediaDescription",
    "SessionDescription",
    "parse_sdp",
    # Errors
    "RTSPAuthError",
    "RTSPConnectionClosedError",
    "RTSPError",
    "RTSPProtocolError",
    "RTSPStatusError",
    "RTSPTimeoutError",
    "RTSPTransportError",
    "SDPParseError",
]
