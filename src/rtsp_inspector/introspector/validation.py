"""URL validation performed before any network activity."""

from __future__ import annotations

from urllib.parse import urlsplit

from rtsp_inspector.domain.enums import FailureReason
from rtsp_inspector.introspector.interface import InvalidURLError
from rtsp_inspector.rtsp.url import SUPPORTED_SCHEMES, RTSPURL, parse_url


def parse_rtsp_url(raw: str) -> RTSPURL:
    """Parse and validate an RTSP(S) URL.

    Accepts rtsp:// and rtsps:// URLs with a host and either an empty path
    or one starting with "/".

    Args:
        raw: URL string.

    Returns:
        Parsed URL.

    Raises:
        InvalidURLError: With reason UNSUPPORTED_SCHEME for a scheme other
            than rtsp/rtsps, INVALID_URL for anything else.
    """
    if not raw or not raw.strip():
        raise InvalidURLError(raw, "empty URL")

    try:
        scheme = urlsplit(raw).scheme.casefold()
    except ValueError as e:
        raise InvalidURLError(raw, str(e)) from e
    if not scheme:
        raise InvalidURLError(raw, "missing scheme")
    if scheme not in SUPPORTED_SCHEMES:
        raise InvalidURLError(
            raw,
            f"unsupported scheme '{scheme}': only rtsp and rtsps are supported",
            reason=FailureReason.UNSUPPORTED_SCHEME,
        )

    try:
        parsed = parse_url(raw)
    except ValueError as e:
        raise InvalidURLError(raw, str(e)) from e

    if parsed.path and not parsed.path.startswith("/"):
        raise InvalidURLError(raw, f"path must start with '/': {parsed.path!r}")
    return parsed


def validate_url(raw: str) -> bool:
    """Return True if raw is a syntactically valid RTSP(S) URL."""
    try:
        parse_rtsp_url(raw)
    except InvalidURLError:
        return False
    return True
