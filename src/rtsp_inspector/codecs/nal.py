"""NAL unit helpers shared by the H264 and H265 parameter-set decoders."""

from __future__ import annotations

from bitstring import ConstBitStream


class SPSDecodeError(Exception):
    """Raised when a sequence parameter set cannot be decoded."""

    pass


def strip_emulation_prevention(data: bytes) -> bytes:
    """Convert a NAL payload to its raw byte sequence (RBSP).

    Encoders insert 0x03 after two zero bytes so the payload never contains
    a start code; this removes those bytes.

    Args:
        data: Escaped NAL unit bytes.

    Returns:
        Unescaped bytes.
    """
    out = bytearray()
    zeros = 0
    for byte in data:
        if zeros >= 2 and byte == 0x03:
            zeros = 0
            continue
        out.append(byte)
        zeros = zeros + 1 if byte == 0 else 0
    return bytes(out)


def rbsp_reader(raw: bytes, header_bytes: int) -> ConstBitStream:
    """Return a bit reader positioned after the NAL header."""
    return ConstBitStream(bytes=strip_emulation_prevention(raw[header_bytes:]))


def crop_units(chroma_format_idc: int) -> tuple[int, int]:
    """Return (SubWidthC, SubHeightC) for a chroma format.

    Monochrome and separately coded 4:4:4 use a crop unit of one sample.
    """
    return {1: (2, 2), 2: (2, 1)}.get(chroma_format_idc, (1, 1))
