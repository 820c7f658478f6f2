"""Tests for H264 SPS decoding."""

import pytest

from fakes import build_h264_sps
from rtsp_inspector.codecs import SPSDecodeError, decode_h264_sps

# Baseline profile 720p SPS as sent by common IP cameras
CAMERA_SPS_720P = bytes(
    [0x67, 0x42, 0xC0, 0x1F, 0x95, 0xA8, 0x14, 0x01, 0x6E, 0x9B, 0x80, 0x80, 0x80, 0xA0]
)


class TestDecodeH264SPS:
    """Tests for decode_h264_sps."""

    def test_camera_sps(self) -> None:
        assert decode_h264_sps(CAMERA_SPS_720P) == (1280, 720)

    def test_built_baseline(self) -> None:
        sps = build_h264_sps(40, 30)
        assert decode_h264_sps(sps) == (640, 480)

    def test_frame_cropping_1080p(self) -> None:
        """1088 coded lines cropped by 4 chroma rows give 1080."""
        sps = build_h264_sps(120, 68, crop=(0, 0, 0, 4))
        assert decode_h264_sps(sps) == (1920, 1080)

    def test_high_profile(self) -> None:
        sps = build_h264_sps(120, 68, profile_idc=100, crop=(0, 0, 0, 4))
        assert decode_h264_sps(sps) == (1920, 1080)

    def test_interlaced_doubles_map_units(self) -> None:
        sps = build_h264_sps(45, 18, frame_mbs_only=False)
        assert decode_h264_sps(sps) == (720, 576)

    def test_truncated(self) -> None:
        with pytest.raises(SPSDecodeError):
            decode_h264_sps(bytes([0x67, 0x42, 0x00, 0x1F]))

    def test_too_short(self) -> None:
        with pytest.raises(SPSDecodeError, match="too short"):
            decode_h264_sps(b"\x67\x42")

    def test_wrong_nal_type(self) -> None:
        """A PPS is not accepted as an SPS."""
        with pytest.raises(SPSDecodeError, match="NAL type 8"):
            decode_h264_sps(b"\x68\xce\x38\x80")
