"""Domain enums for RTSP Inspector.

This module contains the closed vocabularies shared by the probe engine,
the formatters and the CLI.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Classified reason a probe did not complete a DESCRIBE.

    Classification priority (see introspector.classifier):
    1. CONNECTION_REFUSED
    2. TIMEOUT
    3. DNS_ERROR
    4. CONNECTION_CLOSED
    5. AUTH_REQUIRED
    6. NOT_FOUND
    7. UNSUPPORTED_SCHEME
    8. OTHER
    """

    INVALID_URL = "invalid_url"  # URL failed validation
    UNSUPPORTED_SCHEME = "unsupported_scheme"  # Scheme other than rtsp/rtsps
    DNS_ERROR = "dns_error"  # Hostname does not resolve
    CONNECTION_REFUSED = "connection_refused"  # Nothing listening on the port
    TIMEOUT = "timeout"  # Deadline elapsed
    AUTH_REQUIRED = "auth_required"  # 401 challenge not satisfied
    NOT_FOUND = "not_found"  # 404 for the requested path
    CONNECTION_CLOSED = "connection_closed"  # Peer closed or reset the connection
    OTHER = "other"  # Anything else

    def __str__(self) -> str:
        return self.value


class TrackType(str, Enum):
    """Kind of media track advertised in a session description."""

    VIDEO = "video"
    AUDIO = "audio"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_media_type(cls, media_type: str) -> "TrackType":
        """Map an SDP media type ("video", "audio", "application", ...)."""
        normalized = media_type.casefold()
        if normalized == "video":
            return cls.VIDEO
        if normalized == "audio":
            return cls.AUDIO
        return cls.OTHER
