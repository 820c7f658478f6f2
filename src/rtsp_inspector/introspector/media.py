"""Conversion of session description media into report tracks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rtsp_inspector.codecs import SPSDecodeError, decode_h264_sps, decode_h265_sps
from rtsp_inspector.domain.enums import TrackType
from rtsp_inspector.domain.models import Resolution, TrackInfo
from rtsp_inspector.introspector.interface import (
    MediaClassificationError,
    UnsupportedVideoFormatError,
)
from rtsp_inspector.rtsp.sdp import (
    H264Format,
    H265Format,
    MediaDescription,
    SessionDescription,
)

logger = logging.getLogger(__name__)


def _decode_resolution(decoder, sps: bytes | None, codec: str) -> Resolution | None:
    if not sps:
        return None
    try:
        width, height = decoder(sps)
    except SPSDecodeError as e:
        logger.debug("Could not decode %s SPS: %s", codec, e)
        return None
    return Resolution(width=width, height=height)


def classify_media(index: int, media: MediaDescription) -> TrackInfo:
    """Build the TrackInfo for one media description.

    Only the first format of the media is considered. Video tracks must be
    H264 or H265; their resolution is decoded from the SPS when available.
    A resolution that cannot be decoded is left empty.

    Args:
        index: Position of the media in the session description.
        media: The media description.

    Returns:
        Classified track.

    Raises:
        UnsupportedVideoFormatError: For video in any other codec.
    """
    track_type = TrackType.from_media_type(media.media_type)
    if not media.formats:
        return TrackInfo(index=index, track_type=track_type)

    fmt = media.formats[0]
    resolution = None
    if track_type == TrackType.VIDEO:
        if isinstance(fmt, H264Format):
            resolution = _decode_resolution(decode_h264_sps, fmt.sps, "H264")
        elif isinstance(fmt, H265Format):
            resolution = _decode_resolution(decode_h265_sps, fmt.sps, "H265")
        else:
            raise UnsupportedVideoFormatError(fmt.name)

    return TrackInfo(
        index=index,
        track_type=track_type,
        format=fmt.name,
        clock_rate=fmt.clock_rate or None,
        payload_type=fmt.payload_type,
        resolution=resolution,
    )


@dataclass(frozen=True)
class ClassifiedMedia:
    """Tracks of one session description grouped by type, in order."""

    video: tuple[TrackInfo, ...] = ()
    audio: tuple[TrackInfo, ...] = ()
    other: tuple[TrackInfo, ...] = ()

    @property
    def count(self) -> int:
        return len(self.video) + len(self.audio) + len(self.other)


class MediaProcessor:
    """Classifies every media of a session description."""

    def process(self, description: SessionDescription | None) -> ClassifiedMedia:
        """Classify all medias, preserving their order within each type.

        Raises:
            MediaClassificationError: If any media cannot be classified.
        """
        if description is None:
            return ClassifiedMedia()

        groups: dict[TrackType, list[TrackInfo]] = {
            TrackType.VIDEO: [],
            TrackType.AUDIO: [],
            TrackType.OTHER: [],
        }
        for index, media in enumerate(description.medias):
            try:
                track = classify_media(index, media)
            except MediaClassificationError as e:
                raise MediaClassificationError(
                    f"failed to classify media {index}: {e}"
                ) from e
            logger.debug(
                "Classified media %d: type=%s format=%s resolution=%s",
                index,
                track.track_type,
                track.format or "-",
                track.resolution or "unknown",
            )
            groups[track.track_type].append(track)

        return ClassifiedMedia(
            video=tuple(groups[TrackType.VIDEO]),
            audio=tuple(groups[TrackType.AUDIO]),
            other=tuple(groups[TrackType.OTHER]),
        )
