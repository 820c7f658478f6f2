"""Domain models for RTSP Inspector.

This module contains the result types returned by a probe. They are plain
frozen dataclasses: a report is assembled once per probe call and handed to
the caller as a read-only value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import FailureReason, TrackType

if TYPE_CHECKING:
    from rtsp_inspector.introspector.interface import DescribeFailedError


@dataclass(frozen=True)
class Resolution:
    """Frame dimensions decoded from a codec parameter set."""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class TrackInfo:
    """Represents one media track advertised by a DESCRIBE (domain model)."""

    index: int  # Position in the session description's media list
    track_type: TrackType
    format: str = ""  # Encoding name, e.g. "H264", "PCMU"
    clock_rate: int | None = None
    payload_type: int | None = None
    resolution: Resolution | None = None


@dataclass(frozen=True)
class StreamReport:
    """Result of probing one RTSP endpoint.

    Invariants:
    - describe_ok is True exactly when failure_reason is None.
    - An unreachable endpoint never has a successful describe.
    """

    url: str
    protocol: str = "rtsp"
    reachable: bool = False
    describe_ok: bool = False
    latency_ms: float = 0.0
    failure_reason: FailureReason | None = None
    error_message: str | None = None
    debug_trace: tuple[str, ...] = ()
    video_medias: tuple[TrackInfo, ...] = field(default_factory=tuple)
    audio_medias: tuple[TrackInfo, ...] = field(default_factory=tuple)
    other_medias: tuple[TrackInfo, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate report invariants."""
        if self.describe_ok == (self.failure_reason is not None):
            raise ValueError(
                "describe_ok must be True exactly when failure_reason is empty, "
                f"got describe_ok={self.describe_ok}, "
                f"failure_reason={self.failure_reason}"
            )
        if not self.reachable and self.describe_ok:
            raise ValueError("an unreachable endpoint cannot have describe_ok=True")

    @property
    def media_count(self) -> int:
        """Return the total number of classified tracks."""
        return len(self.video_medias) + len(self.audio_medias) + len(self.other_medias)

    @property
    def medias(self) -> tuple[TrackInfo, ...]:
        """Return all tracks: video, then audio, then other."""
        return self.video_medias + self.audio_medias + self.other_medias

    @property
    def media_types(self) -> list[str]:
        """Return the track type of every entry in medias."""
        return [track.track_type.value for track in self.medias]

    @property
    def has_video(self) -> bool:
        return bool(self.video_medias)

    @property
    def first_video_media(self) -> TrackInfo | None:
        """Return the first video track, or None if there is none."""
        return self.video_medias[0] if self.video_medias else None

    @property
    def video_resolutions(self) -> list[Resolution]:
        """Return decoded resolutions of video tracks, skipping undecoded ones."""
        return [t.resolution for t in self.video_medias if t.resolution is not None]

    @property
    def video_resolution_strings(self) -> list[str]:
        return [str(resolution) for resolution in self.video_resolutions]

    @property
    def video_resolution_string(self) -> str:
        """Return the first video track's resolution as "WxH", or ""."""
        first = self.first_video_media
        if first is not None and first.resolution is not None:
            return str(first.resolution)
        return ""

    @property
    def error(self) -> DescribeFailedError | None:
        """Return the error matching failure_reason, or None on success.

        UnreachableError when the preflight failed, DescribeFailedError
        otherwise.
        """
        # Import here to avoid circular imports at module load
        from rtsp_inspector.introspector.interface import (
            DescribeFailedError,
            UnreachableError,
        )

        if self.failure_reason is None:
            return None
        error_cls = DescribeFailedError if self.reachable else UnreachableError
        return error_cls(self.failure_reason, self.error_message or "")

    def raise_for_failure(self) -> None:
        """Raise the report's error if the probe failed.

        Raises:
            UnreachableError: If the TCP preflight failed.
            DescribeFailedError: If the RTSP handshake or classification failed.
        """
        error = self.error
        if error is not None:
            raise error


@dataclass(frozen=True)
class ConnectivityResult:
    """Result of a preflight-only reachability check."""

    ok: bool
    failure_reason: FailureReason | None = None
    error_message: str | None = None
