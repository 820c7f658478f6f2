"""Parsed RTSP URL type."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

SUPPORTED_SCHEMES = frozenset({"rtsp", "rtsps"})


@dataclass(frozen=True)
class RTSPURL:
    """An RTSP URL split into the parts the client needs.

    ``host`` keeps the URL's authority without credentials, including the
    port and IPv6 brackets when present (e.g. ``[::1]:8554``).
    """

    raw: str
    scheme: str
    host: str
    hostname: str
    port: int | None
    path: str
    query: str = ""
    username: str | None = None
    password: str | None = None

    @property
    def has_credentials(self) -> bool:
        return self.username is not None

    def request_uri(self) -> str:
        """Render the URL without credentials, as sent on request lines."""
        uri = f"{self.scheme}://{self.host}{self.path}"
        if self.query:
            uri += f"?{self.query}"
        return uri

    def redacted(self) -> str:
        """Render the URL with the password masked, for logs."""
        if not self.has_credentials:
            return self.request_uri()
        userinfo = self.username or ""
        if self.password is not None:
            userinfo += ":***"
        uri = f"{self.scheme}://{userinfo}@{self.host}{self.path}"
        if self.query:
            uri += f"?{self.query}"
        return uri

    def __str__(self) -> str:
        return self.raw


def parse_url(raw: str) -> RTSPURL:
    """Parse a URL string into an RTSPURL.

    The scheme is not checked here; see introspector.validation.

    Args:
        raw: URL string.

    Returns:
        Parsed URL.

    Raises:
        ValueError: If the URL cannot be parsed (bad IPv6 brackets,
            non-numeric or out-of-range port, missing host).
    """
    parts = urlsplit(raw)
    # Accessing .port validates it
    port = parts.port
    hostname = parts.hostname
    if not hostname:
        raise ValueError(f"missing host in URL: {raw!r}")

    host = parts.netloc.rpartition("@")[2]
    username = unquote(parts.username) if parts.username is not None else None
    password = unquote(parts.password) if parts.password is not None else None

    return RTSPURL(
        raw=raw,
        scheme=parts.scheme.casefold(),
        host=host,
        hostname=hostname,
        port=port,
        path=parts.path,
        query=parts.query,
        username=username,
        password=password,
    )
