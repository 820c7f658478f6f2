"""H264 sequence parameter set decoding (ITU-T H.264 section 7.3.2.1.1)."""

from __future__ import annotations

import bitstring
from bitstring import ConstBitStream

from rtsp_inspector.codecs.nal import SPSDecodeError, crop_units, rbsp_reader

NAL_TYPE_SPS = 7

# Profiles whose SPS carries chroma format, bit depth and scaling matrices
HIGH_PROFILES = frozenset({100, 110, 122, 244, 44, 83, 86, 118, 128, 138, 139, 134, 135})


def _skip_scaling_list(reader: ConstBitStream, size: int) -> None:
    last_scale = 8
    next_scale = 8
    for _ in range(size):
        if next_scale != 0:
            delta = reader.read("se")
            next_scale = (last_scale + delta + 256) % 256
        last_scale = last_scale if next_scale == 0 else next_scale


def decode_h264_sps(raw: bytes) -> tuple[int, int]:
    """Decode the frame size from an H264 SPS NAL unit.

    Args:
        raw: SPS NAL unit including its one-byte header.

    Returns:
        (width, height) in pixels after frame cropping.

    Raises:
        SPSDecodeError: If the unit is not an SPS or is truncated/malformed.
    """
    if len(raw) < 4:
        raise SPSDecodeError(f"H264 SPS too short ({len(raw)} bytes)")
    nal_type = raw[0] & 0x1F
    if nal_type != NAL_TYPE_SPS:
        raise SPSDecodeError(f"not an H264 SPS (NAL type {nal_type})")

    reader = rbsp_reader(raw, 1)
    try:
        return _decode(reader)
    except (bitstring.Error, IndexError, ValueError) as e:
        raise SPSDecodeError(f"malformed H264 SPS: {e}") from e


def _decode(reader: ConstBitStream) -> tuple[int, int]:
    profile_idc = reader.read("uint:8")
    reader.read("uint:8")  # constraint flags + reserved
    reader.read("uint:8")  # level_idc
    sps_id = reader.read("ue")
    if sps_id > 31:
        raise SPSDecodeError(f"invalid seq_parameter_set_id {sps_id}")

    chroma_format_idc = 1
    separate_colour_plane = False
    if profile_idc in HIGH_PROFILES:
        chroma_format_idc = reader.read("ue")
        if chroma_format_idc > 3:
            raise SPSDecodeError(f"invalid chroma_format_idc {chroma_format_idc}")
        if chroma_format_idc == 3:
            separate_colour_plane = reader.read("bool")
        reader.read("ue")  # bit_depth_luma_minus8
        reader.read("ue")  # bit_depth_chroma_minus8
        reader.read("bool")  # qpprime_y_zero_transform_bypass_flag
        if reader.read("bool"):  # seq_scaling_matrix_present_flag
            for i in range(8 if chroma_format_idc != 3 else 12):
                if reader.read("bool"):
                    _skip_scaling_list(reader, 16 if i < 6 else 64)

    reader.read("ue")  # log2_max_frame_num_minus4
    poc_type = reader.read("ue")
    if poc_type == 0:
        reader.read("ue")  # log2_max_pic_order_cnt_lsb_minus4
    elif poc_type == 1:
        reader.read("bool")  # delta_pic_order_always_zero_flag
        reader.read("se")  # offset_for_non_ref_pic
        reader.read("se")  # offset_for_top_to_bottom_field
        for _ in range(reader.read("ue")):
            reader.read("se")
    elif poc_type != 2:
        raise SPSDecodeError(f"invalid pic_order_cnt_type {poc_type}")

    reader.read("ue")  # max_num_ref_frames
    reader.read("bool")  # gaps_in_frame_num_value_allowed_flag
    width_mbs = reader.read("ue") + 1
    height_map_units = reader.read("ue") + 1
    frame_mbs_only = reader.read("bool")
    if not frame_mbs_only:
        reader.read("bool")  # mb_adaptive_frame_field_flag
    reader.read("bool")  # direct_8x8_inference_flag

    crop_left = crop_right = crop_top = crop_bottom = 0
    if reader.read("bool"):
        crop_left = reader.read("ue")
        crop_right = reader.read("ue")
        crop_top = reader.read("ue")
        crop_bottom = reader.read("ue")

    field_factor = 1 if frame_mbs_only else 2
    chroma_array_type = 0 if separate_colour_plane else chroma_format_idc
    if chroma_array_type == 0:
        unit_x, unit_y = 1, field_factor
    else:
        sub_width, sub_height = crop_units(chroma_array_type)
        unit_x, unit_y = sub_width, sub_height * field_factor

    width = width_mbs * 16 - unit_x * (crop_left + crop_right)
    height = field_factor * height_map_units * 16 - unit_y * (crop_top + crop_bottom)
    if width <= 0 or height <= 0:
        raise SPSDecodeError(f"cropping leaves no picture ({width}x{height})")
    return width, height
