"""RTSP Inspector: probe RTSP(S) endpoints and describe their media.

Usage:
    from rtsp_inspector import describe_stream

    report = describe_stream("rtsp://camera.local/stream", timeout=5.0)
    if report.describe_ok:
        print(report.video_resolution_string)
    else:
        print(report.failure_reason, report.error_message)
"""

__version__ = "0.1.0"

from rtsp_inspector.domain import (  # noqa: E402
    ConnectivityResult,
    FailureReason,
    Resolution,
    StreamReport,
    TrackInfo,
    TrackType,
)
from rtsp_inspector.introspector import (  # noqa: E402
    DescribeFailedError,
    InspectorError,
    InvalidURLError,
    UnreachableError,
    check_reachable,
    describe_stream,
    format_json,
    is_connectable,
    report_to_dict,
    validate_url,
)

__all__ = [
    "__version__",
    # Probe API
    "describe_stream",
    "is_connectable",
    "check_reachable",
    "validate_url",
    # Results
    "ConnectivityResult",
    "FailureReason",
    "Resolution",
    "StreamReport",
    "TrackInfo",
    "TrackType",
    # Errors
    "DescribeFailedError",
    "InspectorError",
    "InvalidURLError",
    "UnreachableError",
    # Serialization
    "format_json",
    "report_to_dict",
]
