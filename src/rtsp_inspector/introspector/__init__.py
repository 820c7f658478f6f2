"""Introspector module for RTSP Inspector.

This module provides the probe engine:

- describe_stream: Validate, preflight, handshake and classify one endpoint
- is_connectable / check_reachable: TCP-only reachability checks
- HandshakeOrchestrator: START/OPTIONS/DESCRIBE under a deadline
- NetworkDialer: TCP preflight
- MediaProcessor / classify_media: Session description to report tracks
- classify_error / ErrorClassifier: Failure taxonomy
- InspectorError and subclasses: Probe failures

Formatters for probe results:
- format_human: Human-readable output
- format_json: JSON output
- report_to_dict / track_to_dict: JSON-serializable dicts
"""

from rtsp_inspector.introspector.classifier import (
    ErrorClassifier,
    classify_error,
    is_auth_challenge,
    wrap_with_context,
)
from rtsp_inspector.introspector.describe import (
    check_reachable,
    describe_stream,
    is_connectable,
)
from rtsp_inspector.introspector.formatters import (
    format_human,
    format_json,
    format_track_line,
    report_to_dict,
    track_to_dict,
)
from rtsp_inspector.introspector.handshake import HandshakeOrchestrator
from rtsp_inspector.introspector.interface import (
    DescribeFailedError,
    HandshakeError,
    InspectorError,
    InvalidURLError,
    MediaClassificationError,
    PreflightError,
    RTSPClientProtocol,
    UnreachableError,
    UnsupportedVideoFormatError,
)
from rtsp_inspector.introspector.media import (
    ClassifiedMedia,
    MediaProcessor,
    classify_media,
)
from rtsp_inspector.introspector.network import NetworkDialer, normalize_host_port
from rtsp_inspector.introspector.trace import DebugTracer
from rtsp_inspector.introspector.validation import parse_rtsp_url, validate_url

__all__ = [
    # Entry points
    "describe_stream",
    "is_connectable",
    "check_reachable",
    # Components
    "ClassifiedMedia",
    "DebugTracer",
    "ErrorClassifier",
    "HandshakeOrchestrator",
    "MediaProcessor",
    "NetworkDialer",
    "RTSPClientProtocol",
    "classify_error",
    "classify_media",
    "is_auth_challenge",
    "normalize_host_port",
    "parse_rtsp_url",
    "validate_url",
    "wrap_with_context",
    # Errors
    "DescribeFailedError",
    "HandshakeError",
    "InspectorError",
    "InvalidURLError",
    "MediaClassificationError",
    "PreflightError",
    "UnreachableError",
    "UnsupportedVideoFormatError",
    # Formatters
    "format_human",
    "format_json",
    "format_track_line",
    "report_to_dict",
    "track_to_dict",
]
