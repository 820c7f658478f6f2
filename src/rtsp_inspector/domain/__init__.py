"""Domain models and enums for RTSP Inspector.

This package contains the probe result types, independent of the network
and protocol layers:

- Domain models: StreamReport, TrackInfo, Resolution, ConnectivityResult
- Domain enums: FailureReason, TrackType

Usage:
    from rtsp_inspector.domain import StreamReport, TrackInfo
    from rtsp_inspector.domain import FailureReason
"""

from .enums import FailureReason, TrackType
from .models import ConnectivityResult, Resolution, StreamReport, TrackInfo

__all__ = [
    # Models
    "StreamReport",
    "TrackInfo",
    "Resolution",
    "ConnectivityResult",
    # Enums
    "FailureReason",
    "TrackType",
]
