"""Parameter-set decoders for the video codecs the inspector resolves.

- decode_h264_sps: Frame size from an H264 SPS
- decode_h265_sps: Frame size from an H265 SPS
- SPSDecodeError: Raised for malformed or non-SPS input
"""

from rtsp_inspector.codecs.h264 import decode_h264_sps
from rtsp_inspector.codecs.h265 import decode_h265_sps
from rtsp_inspector.codecs.nal import SPSDecodeError, strip_emulation_prevention

__all__ = [
    "SPSDecodeError",
    "decode_h264_sps",
    "decode_h265_sps",
    "strip_emulation_prevention",
]
