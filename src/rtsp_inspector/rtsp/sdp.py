"""SDP parser for RTSP DESCRIBE results.

Turns the session description into a list of media descriptions, each with
its RTP formats. H264 and H265 formats carry their parameter sets decoded
from the fmtp sprop attributes.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field

from rtsp_inspector.rtsp.errors import SDPParseError

logger = logging.getLogger(__name__)

# RFC 3551 static payload types: payload type -> (encoding, clock rate, channels)
STATIC_PAYLOAD_TYPES: dict[int, tuple[str, int, int | None]] = {
    0: ("PCMU", 8000, 1),
    3: ("GSM", 8000, 1),
    4: ("G723", 8000, 1),
    8: ("PCMA", 8000, 1),
    9: ("G722", 8000, 1),
    10: ("L16", 44100, 2),
    11: ("L16", 44100, 1),
    14: ("MPA", 90000, None),
    26: ("JPEG", 90000, None),
    31: ("H261", 90000, None),
    32: ("MPV", 90000, None),
    33: ("MP2T", 90000, None),
    34: ("H263", 90000, None),
}

H264_NAL_SPS = 7
H264_NAL_PPS = 8


@dataclass
class Format:
    """One RTP payload format of a media description."""

    payload_type: int
    encoding: str = ""
    clock_rate: int = 0
    channels: int | None = None
    fmtp: dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """Return the encoding name, or a payload-type placeholder."""
        return self.encoding or f"PT{self.payload_type}"


@dataclass
class H264Format(Format):
    sps: bytes | None = None
    pps: bytes | None = None


@dataclass
class H265Format(Format):
    vps: bytes | None = None
    sps: bytes | None = None
    pps: bytes | None = None


@dataclass
class MediaDescription:
    """One "m=" section of a session description."""

    media_type: str  # "video", "audio", "application", ...
    port: int
    protocol: str
    formats: list[Format] = field(default_factory=list)
    control: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class SessionDescription:
    """Parsed session description."""

    title: str = ""
    control: str | None = None
    medias: list[MediaDescription] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)


def _b64decode(value: str) -> bytes | None:
    value = value.strip()
    if not value:
        return None
    padded = value + "=" * (-len(value) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError):
        logger.debug("Ignoring undecodable parameter set %r", value)
        return None


def parse_fmtp(value: str) -> dict[str, str]:
    """Parse "key=value;key2=value2" fmtp parameters (keys lowercased)."""
    params: dict[str, str] = {}
    for item in value.split(";"):
        key, sep, val = item.strip().partition("=")
        if key and sep:
            params[key.strip().casefold()] = val.strip()
    return params


def _parse_rtpmap(value: str) -> tuple[str, int, int | None]:
    # "H264/90000" or "MPEG4-GENERIC/48000/2"
    parts = value.strip().split("/")
    encoding = parts[0].upper()
    clock_rate = 0
    channels = None
    try:
        if len(parts) > 1:
            clock_rate = int(parts[1])
        if len(parts) > 2:
            channels = int(parts[2])
    except ValueError as e:
        raise SDPParseError(f"invalid rtpmap: {value!r}") from e
    return encoding, clock_rate, channels


def build_format(
    payload_type: int,
    rtpmap: str | None = None,
    fmtp: str | None = None,
) -> Format:
    """Build the most specific Format for a payload type.

    Args:
        payload_type: RTP payload type number.
        rtpmap: The "a=rtpmap" value after the payload type, if any.
        fmtp: The "a=fmtp" value after the payload type, if any.

    Returns:
        H264Format, H265Format or a generic Format.
    """
    if rtpmap:
        encoding, clock_rate, channels = _parse_rtpmap(rtpmap)
    elif payload_type in STATIC_PAYLOAD_TYPES:
        encoding, clock_rate, channels = STATIC_PAYLOAD_TYPES[payload_type]
    else:
        encoding, clock_rate, channels = "", 0, None
    params = parse_fmtp(fmtp) if fmtp else {}

    if encoding == "H264":
        sps = pps = None
        for item in params.get("sprop-parameter-sets", "").split(","):
            unit = _b64decode(item)
            if not unit:
                continue
            nal_type = unit[0] & 0x1F
            if nal_type == H264_NAL_SPS and sps is None:
                sps = unit
            elif nal_type == H264_NAL_PPS and pps is None:
                pps = unit
        return H264Format(
            payload_type, encoding, clock_rate, channels, params, sps=sps, pps=pps
        )

    if encoding in ("H265", "HEVC"):

        def first_unit(key: str) -> bytes | None:
            return _b64decode(params.get(key, "").split(",")[0])

        return H265Format(
            payload_type,
            "H265",
            clock_rate,
            channels,
            params,
            vps=first_unit("sprop-vps"),
            sps=first_unit("sprop-sps"),
            pps=first_unit("sprop-pps"),
        )

    return Format(payload_type, encoding, clock_rate, channels, params)


@dataclass
class _PendingMedia:
    media: MediaDescription
    payload_types: list[int]
    rtpmaps: dict[int, str] = field(default_factory=dict)
    fmtps: dict[int, str] = field(default_factory=dict)


def _split_attribute(value: str) -> tuple[str, str]:
    key, _, val = value.partition(":")
    return key.strip(), val.strip()


def _split_payload_attribute(value: str) -> tuple[int, str] | None:
    # "96 H264/90000" -> (96, "H264/90000")
    head, _, rest = value.partition(" ")
    try:
        return int(head), rest
    except ValueError:
        return None


def _finish(pending: _PendingMedia) -> MediaDescription:
    for pt in pending.payload_types:
        pending.media.formats.append(
            build_format(pt, pending.rtpmaps.get(pt), pending.fmtps.get(pt))
        )
    return pending.media


def parse_sdp(text: str) -> SessionDescription:
    """Parse an SDP document.

    Args:
        text: SDP body of a DESCRIBE response.

    Returns:
        SessionDescription with one MediaDescription per "m=" line, in order.

    Raises:
        SDPParseError: If the document is not a session description.
    """
    session = SessionDescription()
    current: _PendingMedia | None = None
    saw_version = False

    for raw in text.splitlines():
        line = raw.strip()
        if len(line) < 2 or line[1] != "=":
            continue
        prefix, value = line[0], line[2:]

        if prefix == "v":
            saw_version = True
        elif prefix == "s" and current is None:
            session.title = value
        elif prefix == "m":
            if current is not None:
                session.medias.append(_finish(current))
            parts = value.split()
            if len(parts) < 3:
                raise SDPParseError(f"invalid media line: {line!r}")
            try:
                port = int(parts[1].split("/")[0])
                payload_types = [int(pt) for pt in parts[3:]]
            except ValueError as e:
                raise SDPParseError(f"invalid media line: {line!r}") from e
            current = _PendingMedia(
                media=MediaDescription(
                    media_type=parts[0].casefold(), port=port, protocol=parts[2]
                ),
                payload_types=payload_types,
            )
        elif prefix == "a":
            key, val = _split_attribute(value)
            if current is None:
                if key == "control":
                    session.control = val
                session.attributes[key] = val
                continue
            if key == "control":
                current.media.control = val
            elif key in ("rtpmap", "fmtp"):
                parsed = _split_payload_attribute(val)
                if parsed is not None:
                    pt, rest = parsed
                    target = current.rtpmaps if key == "rtpmap" else current.fmtps
                    target[pt] = rest
            else:
                current.media.attributes[key] = val

    if current is not None:
        session.medias.append(_finish(current))

    if not saw_version:
        raise SDPParseError("missing version line (v=) in session description")

    return session
