"""Blocking RTSP client supporting the requests a probe needs.

Only OPTIONS and DESCRIBE are implemented; there is no SETUP/PLAY and no
RTP transport. Credentials embedded in the URL are used to answer Basic or
Digest challenges: a 401 response records the challenge and is still
reported to the caller, so the next request goes out signed.
"""

from __future__ import annotations

import contextlib
import logging
import socket
import ssl
import threading
from collections.abc import Callable

from rtsp_inspector import __version__
from rtsp_inspector.rtsp.auth import Sender
from rtsp_inspector.rtsp.errors import (
    RTSPConnectionClosedError,
    RTSPError,
    RTSPProtocolError,
    RTSPStatusError,
    RTSPTimeoutError,
    RTSPTransportError,
)
from rtsp_inspector.rtsp.messages import Request, Response, read_response
from rtsp_inspector.rtsp.sdp import SessionDescription, parse_sdp
from rtsp_inspector.rtsp.url import SUPPORTED_SCHEMES, RTSPURL

logger = logging.getLogger(__name__)

DEFAULT_PORT = 554
DEFAULT_USER_AGENT = f"rtsp-inspector/{__version__}"

RequestHook = Callable[[Request], None]
ResponseHook = Callable[[Response], None]


def split_host_port(host: str, default_port: int = DEFAULT_PORT) -> tuple[str, int]:
    """Split "host", "host:port", "[v6]" or "[v6]:port" into (hostname, port).

    An empty port ("host:") falls back to default_port.

    Raises:
        ValueError: If the port is not a number.
    """
    if host.startswith("["):
        end = host.find("]")
        if end == -1:
            raise ValueError(f"unterminated IPv6 literal: {host!r}")
        hostname = host[1:end]
        rest = host[end + 1 :]
        port = int(rest[1:]) if rest.startswith(":") and rest[1:] else default_port
        return hostname, port
    hostname, sep, port_str = host.rpartition(":")
    if not sep:
        return host, default_port
    if not port_str:
        return hostname, default_port
    return hostname, int(port_str)


class RTSPClient:
    """One RTSP control connection.

    Usage:
        client = RTSPClient(read_timeout=5.0, write_timeout=5.0)
        client.start("rtsp", "camera.local:554")
        client.options(url)
        description, response = client.describe(url)
        client.close()
    """

    def __init__(
        self,
        read_timeout: float = 10.0,
        write_timeout: float = 10.0,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        on_request: RequestHook | None = None,
        on_response: ResponseHook | None = None,
        ssl_context: ssl.SSLContext | None = None,
    ) -> None:
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.user_agent = user_agent
        self.on_request = on_request
        self.on_response = on_response
        self._ssl_context = ssl_context

        self._sock: socket.socket | None = None
        self._reader = None
        self._cseq = 1
        self._session: str | None = None
        self._sender: Sender | None = None
        self._closed = False
        self._close_lock = threading.Lock()

    def __enter__(self) -> RTSPClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def start(self, scheme: str, host: str) -> None:
        """Open the control connection.

        Args:
            scheme: "rtsp" or "rtsps".
            host: Authority as found in the URL ("host", "host:port", "[v6]:port").

        Raises:
            RTSPError: If the scheme is not supported.
            RTSPTimeoutError: If the connection is not established in time.
            RTSPTransportError: If the connection cannot be established.
        """
        if scheme not in SUPPORTED_SCHEMES:
            raise RTSPError(f"unsupported scheme '{scheme}'")
        if self._sock is not None:
            raise RTSPError("client already started")
        try:
            hostname, port = split_host_port(host)
        except ValueError as e:
            raise RTSPError(f"invalid host {host!r}: {e}") from e

        try:
            sock = socket.create_connection((hostname, port), timeout=self.write_timeout)
        except socket.gaierror as e:
            raise RTSPTransportError(f"lookup {hostname}: no such host ({e})") from e
        except UnicodeError as e:
            # IDNA rejects empty or over-long labels before any lookup
            raise RTSPTransportError(f"lookup {hostname}: no such host ({e})") from e
        except TimeoutError as e:
            raise RTSPTimeoutError(f"dial tcp {host}: i/o timeout") from e
        except OSError as e:
            raise RTSPTransportError(f"dial tcp {host}: {e}") from e

        if scheme == "rtsps":
            context = self._ssl_context or ssl.create_default_context()
            try:
                sock = context.wrap_socket(sock, server_hostname=hostname)
            except TimeoutError as e:
                sock.close()
                raise RTSPTimeoutError(f"tls handshake with {host}: i/o timeout") from e
            except (ssl.SSLError, OSError) as e:
                sock.close()
                raise RTSPTransportError(f"tls handshake with {host}: {e}") from e

        with self._close_lock:
            if self._closed:
                sock.close()
                raise RTSPConnectionClosedError("use of closed network connection")
            self._sock = sock
            self._reader = sock.makefile("rb")
        logger.debug("RTSP connection established to %s", host)

    def options(self, url: RTSPURL) -> Response:
        """Send OPTIONS.

        Raises:
            RTSPStatusError: On a non-2xx response (including 401).
            RTSPError: On transport or framing errors.
        """
        return self._do("OPTIONS", url)

    def describe(self, url: RTSPURL) -> tuple[SessionDescription, Response]:
        """Send DESCRIBE and parse the returned session description.

        Raises:
            RTSPStatusError: On a non-2xx response (including 401).
            RTSPProtocolError: If the body is not a valid SDP document.
            RTSPError: On transport or framing errors.
        """
        response = self._do("DESCRIBE", url, [("Accept", "application/sdp")])
        content_type = response.header("Content-Type")
        if content_type is not None:
            media_type = content_type.split(";")[0].strip().casefold()
            if media_type != "application/sdp":
                raise RTSPProtocolError(f"unexpected Content-Type: {content_type}")
        if not response.body:
            raise RTSPProtocolError("DESCRIBE response has no body")
        description = parse_sdp(response.body.decode("utf-8", errors="replace"))
        if description.control is None:
            description.control = response.header("Content-Base")
        return description, response

    def close(self) -> None:
        """Close the connection. Safe to call more than once, from any thread."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            sock, reader = self._sock, self._reader
            self._sock = self._reader = None
        if sock is None:
            return
        # shutdown() unblocks a reader thread stuck in recv()
        with contextlib.suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)
        with contextlib.suppress(OSError):
            if reader is not None:
                reader.close()
            sock.close()
        logger.debug("RTSP connection closed")

    def _do(
        self,
        method: str,
        url: RTSPURL,
        extra_headers: list[tuple[str, str]] | None = None,
    ) -> Response:
        sock, reader = self._sock, self._reader
        if sock is None or reader is None:
            if self._closed:
                raise RTSPConnectionClosedError("use of closed network connection")
            raise RTSPError("client not started")

        uri = url.request_uri()
        cseq = self._cseq
        self._cseq += 1
        headers = [("CSeq", str(cseq)), ("User-Agent", self.user_agent)]
        headers.extend(extra_headers or [])
        if self._sender is not None:
            headers.append(("Authorization", self._sender.authorization(method, uri)))
        if self._session is not None:
            headers.append(("Session", self._session))
        request = Request(method=method, url=uri, headers=headers)

        if self.on_request is not None:
            self.on_request(request)

        try:
            sock.settimeout(self.write_timeout)
            sock.sendall(request.encode())
            sock.settimeout(self.read_timeout)
            response = read_response(reader)
        except TimeoutError as e:
            raise RTSPTimeoutError(f"{method} request timed out") from e
        except (BrokenPipeError, ConnectionResetError, ConnectionAbortedError) as e:
            raise RTSPConnectionClosedError(f"connection closed: {e}") from e
        except ValueError as e:
            # Raised by the buffered reader once close() ran on another thread
            raise RTSPConnectionClosedError("use of closed network connection") from e
        except OSError as e:
            if self._closed:
                raise RTSPConnectionClosedError(
                    "use of closed network connection"
                ) from e
            raise RTSPTransportError(f"{method} failed: {e}") from e

        if self.on_response is not None:
            self.on_response(response)

        response_cseq = response.header("CSeq")
        if response_cseq is not None and response_cseq.strip() != str(cseq):
            raise RTSPProtocolError(
                f"CSeq mismatch: sent {cseq}, received {response_cseq.strip()}"
            )

        session = response.header("Session")
        if session:
            self._session = session.split(";")[0].strip()

        if response.status_code == 401 and url.has_credentials:
            challenges = response.header_values("WWW-Authenticate")
            if challenges:
                # A later request is signed; the caller decides whether to retry
                self._sender = Sender(
                    challenges, url.username or "", url.password or ""
                )

        if not response.ok:
            raise RTSPStatusError(response)
        return response
