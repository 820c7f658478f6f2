"""Debug trace of handshake stages and RTSP messages."""

from __future__ import annotations

import threading

from rtsp_inspector.rtsp.messages import Request, Response


def _mask(key: str, value: str) -> str:
    # Keep the auth scheme, drop the credentials
    if key.casefold() == "authorization":
        return value.partition(" ")[0] + " ***"
    return value


class DebugTracer:
    """Collects human-readable trace lines.

    Lines look like:
        STAGE: options
        --> OPTIONS rtsp://camera/stream
        --> H CSeq: 1
        <-- 200 OK
        <-- H Public: OPTIONS, DESCRIBE

    The tracer is written from the handshake thread and read by the caller,
    possibly after the handshake was abandoned, so access is locked.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._lock = threading.Lock()

    def add_stage(self, stage: str) -> None:
        self._append([f"STAGE: {stage}"])

    def on_request(self, request: Request) -> None:
        lines = [f"--> {request.method} {request.url}"]
        lines.extend(
            f"--> H {key}: {_mask(key, value)}" for key, value in request.headers
        )
        self._append(lines)

    def on_response(self, response: Response) -> None:
        lines = [f"<-- {response.status_code} {response.reason}"]
        lines.extend(f"<-- H {key}: {value}" for key, value in response.headers)
        self._append(lines)

    def get_trace(self) -> tuple[str, ...]:
        """Return a snapshot of the trace."""
        with self._lock:
            return tuple(self._lines)

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    def _append(self, lines: list[str]) -> None:
        with self._lock:
            self._lines.extend(lines)
