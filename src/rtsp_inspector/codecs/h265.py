"""H265 sequence parameter set decoding (ITU-T H.265 section 7.3.2.2)."""

from __future__ import annotations

import bitstring
from bitstring import ConstBitStream

from rtsp_inspector.codecs.nal import SPSDecodeError, crop_units, rbsp_reader

NAL_TYPE_SPS = 33


def _skip_profile_tier_level(reader: ConstBitStream, max_sub_layers_minus1: int) -> None:
    # general_profile_space(2) tier(1) profile_idc(5), compatibility flags(32),
    # progressive/interlaced/non_packed/frame_only(4), reserved(43), inbld(1)
    reader.pos += 8 + 32 + 4 + 43 + 1
    reader.read("uint:8")  # general_level_idc

    profile_present = []
    level_present = []
    for _ in range(max_sub_layers_minus1):
        profile_present.append(reader.read("bool"))
        level_present.append(reader.read("bool"))
    if max_sub_layers_minus1 > 0:
        reader.pos += 2 * (8 - max_sub_layers_minus1)
    for i in range(max_sub_layers_minus1):
        if profile_present[i]:
            reader.pos += 88
        if level_present[i]:
            reader.pos += 8
    if reader.pos > reader.len:
        raise SPSDecodeError("truncated profile_tier_level")


def decode_h265_sps(raw: bytes) -> tuple[int, int]:
    """Decode the frame size from an H265 SPS NAL unit.

    Args:
        raw: SPS NAL unit including its two-byte header.

    Returns:
        (width, height) in pixels after conformance window cropping.

    Raises:
        SPSDecodeError: If the unit is not an SPS or is truncated/malformed.
    """
    if len(raw) < 3:
        raise SPSDecodeError(f"H265 SPS too short ({len(raw)} bytes)")
    nal_type = (raw[0] >> 1) & 0x3F
    if nal_type != NAL_TYPE_SPS:
        raise SPSDecodeError(f"not an H265 SPS (NAL type {nal_type})")

    reader = rbsp_reader(raw, 2)
    try:
        return _decode(reader)
    except (bitstring.Error, IndexError, ValueError) as e:
        raise SPSDecodeError(f"malformed H265 SPS: {e}") from e


def _decode(reader: ConstBitStream) -> tuple[int, int]:
    reader.read("uint:4")  # sps_video_parameter_set_id
    max_sub_layers_minus1 = reader.read("uint:3")
    if max_sub_layers_minus1 > 6:
        raise SPSDecodeError(f"invalid sps_max_sub_layers_minus1 {max_sub_layers_minus1}")
    reader.read("bool")  # sps_temporal_id_nesting_flag
    _skip_profile_tier_level(reader, max_sub_layers_minus1)

    sps_id = reader.read("ue")
    if sps_id > 15:
        raise SPSDecodeError(f"invalid sps_seq_parameter_set_id {sps_id}")
    chroma_format_idc = reader.read("ue")
    if chroma_format_idc > 3:
        raise SPSDecodeError(f"invalid chroma_format_idc {chroma_format_idc}")
    separate_colour_plane = False
    if chroma_format_idc == 3:
        separate_colour_plane = reader.read("bool")

    width = reader.read("ue")
    height = reader.read("ue")

    if reader.read("bool"):  # conformance_window_flag
        left = reader.read("ue")
        right = reader.read("ue")
        top = reader.read("ue")
        bottom = reader.read("ue")
        sub_width, sub_height = crop_units(
            0 if separate_colour_plane else chroma_format_idc
        )
        width -= sub_width * (left + right)
        height -= sub_height * (top + bottom)

    if width <= 0 or height <= 0:
        raise SPSDecodeError(f"invalid picture size {width}x{height}")
    return width, height
