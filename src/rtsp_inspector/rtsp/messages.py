"""RTSP request/response framing.

RTSP/1.0 messages are HTTP-like: a start line, CRLF-separated headers, a
blank line, and an optional body sized by Content-Length.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO

from rtsp_inspector.rtsp.errors import RTSPConnectionClosedError, RTSPProtocolError

RTSP_VERSION = "RTSP/1.0"

# Guard against peers that stream garbage without ever ending the header block
MAX_HEADER_LINES = 256
MAX_BODY_BYTES = 1_048_576


def _find_all(headers: list[tuple[str, str]], name: str) -> list[str]:
    wanted = name.casefold()
    return [value for key, value in headers if key.casefold() == wanted]


@dataclass
class Request:
    """An outgoing RTSP request."""

    method: str
    url: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Return the first value of a header (case-insensitive), or None."""
        values = _find_all(self.headers, name)
        return values[0] if values else None

    def encode(self) -> bytes:
        """Serialize the request to wire format."""
        lines = [f"{self.method} {self.url} {RTSP_VERSION}"]
        lines.extend(f"{key}: {value}" for key, value in self.headers)
        if self.body:
            lines.append(f"Content-Length: {len(self.body)}")
        head = "\r\n".join(lines) + "\r\n\r\n"
        return head.encode("utf-8") + self.body


@dataclass
class Response:
    """An incoming RTSP response."""

    status_code: int
    reason: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        """Return the first value of a header (case-insensitive), or None."""
        values = _find_all(self.headers, name)
        return values[0] if values else None

    def header_values(self, name: str) -> list[str]:
        """Return every value of a possibly repeated header."""
        return _find_all(self.headers, name)


def _read_line(reader: BinaryIO) -> str:
    line = reader.readline()
    if not line:
        raise RTSPConnectionClosedError("connection closed by peer (EOF)")
    return line.decode("utf-8", errors="replace").rstrip("\r\n")


def parse_status_line(line: str) -> tuple[int, str]:
    """Parse "RTSP/1.0 200 OK" into (200, "OK").

    Raises:
        RTSPProtocolError: If the line is not an RTSP status line.
    """
    parts = line.split(" ", 2)
    if len(parts) < 2 or not parts[0].startswith("RTSP/"):
        raise RTSPProtocolError(f"invalid status line: {line!r}")
    try:
        status_code = int(parts[1])
    except ValueError as e:
        raise RTSPProtocolError(f"invalid status code in: {line!r}") from e
    reason = parts[2] if len(parts) > 2 else ""
    return status_code, reason


def read_response(reader: BinaryIO) -> Response:
    """Read one response from a buffered binary stream.

    Interleaved RTP/RTCP frames ("$" prefixed) are not expected before
    PLAY and are treated as a protocol error.

    Raises:
        RTSPConnectionClosedError: If the stream ends mid-message.
        RTSPProtocolError: If the message is malformed.
    """
    status_line = _read_line(reader)
    # Tolerate stray blank lines between messages
    while status_line == "":
        status_line = _read_line(reader)
    status_code, reason = parse_status_line(status_line)

    headers: list[tuple[str, str]] = []
    for _ in range(MAX_HEADER_LINES):
        line = _read_line(reader)
        if line == "":
            break
        if line[0] in " \t" and headers:
            # Obsolete line folding: continuation of the previous header
            key, value = headers[-1]
            headers[-1] = (key, f"{value} {line.strip()}")
            continue
        key, sep, value = line.partition(":")
        if not sep:
            raise RTSPProtocolError(f"invalid header line: {line!r}")
        headers.append((key.strip(), value.strip()))
    else:
        raise RTSPProtocolError("too many header lines")

    response = Response(status_code=status_code, reason=reason, headers=headers)

    length_value = response.header("Content-Length")
    if length_value:
        try:
            length = int(length_value)
        except ValueError as e:
            raise RTSPProtocolError(
                f"invalid Content-Length: {length_value!r}"
            ) from e
        if length < 0 or length > MAX_BODY_BYTES:
            raise RTSPProtocolError(f"unacceptable Content-Length: {length}")
        body = reader.read(length)
        if len(body) < length:
            raise RTSPConnectionClosedError("connection closed by peer (EOF)")
        response.body = body

    return response
