"""Error classification into the FailureReason taxonomy.

Classification works on the lowercased error message so that errors from
the socket layer, the RTSP client and wrapped handshake errors all map the
same way. Rules are checked in a fixed priority order; the first match wins.
"""

from __future__ import annotations

from rtsp_inspector.domain.enums import FailureReason

_TIMEOUT_MARKERS = ("i/o timeout", "deadline exceeded", "timed out")
_DNS_MARKERS = (
    "no such host",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
)
_CLOSED_MARKERS = ("closed", "broken pipe", "reset by peer", "eof")


def _chain(error: BaseException) -> list[BaseException]:
    # The error and its explicit causes, outermost first
    chain = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        current = current.__cause__
    return chain


def classify_error(error: BaseException | None) -> FailureReason | None:
    """Map an error to a FailureReason.

    Priority: connection_refused, timeout, dns_error, connection_closed,
    auth_required, not_found, unsupported_scheme, other.

    Args:
        error: Error to classify, or None.

    Returns:
        The classified reason, or None when error is None.
    """
    if error is None:
        return None

    message = str(error).lower()
    chain = _chain(error)

    if "connection refused" in message or any(
        isinstance(e, ConnectionRefusedError) for e in chain
    ):
        return FailureReason.CONNECTION_REFUSED
    if any(marker in message for marker in _TIMEOUT_MARKERS) or any(
        isinstance(e, TimeoutError) for e in chain
    ):
        return FailureReason.TIMEOUT
    if any(marker in message for marker in _DNS_MARKERS):
        return FailureReason.DNS_ERROR
    if any(marker in message for marker in _CLOSED_MARKERS) or any(
        isinstance(e, EOFError) for e in chain
    ):
        return FailureReason.CONNECTION_CLOSED
    if "401" in message or "unauthorized" in message:
        return FailureReason.AUTH_REQUIRED
    if "404" in message or "not found" in message:
        return FailureReason.NOT_FOUND
    if "unsupported scheme" in message:
        return FailureReason.UNSUPPORTED_SCHEME
    return FailureReason.OTHER


def is_auth_challenge(error: BaseException | None) -> bool:
    """Return True if the error is a 401-style authentication challenge."""
    if error is None:
        return False
    message = str(error).lower()
    return "401" in message or "unauthorized" in message


def wrap_with_context(error: BaseException, operation: str) -> Exception:
    """Return an exception describing which operation failed.

    The returned exception is chained to the original through __cause__.
    """
    wrapped = RuntimeError(f"{operation} failed: {error}")
    wrapped.__cause__ = error
    return wrapped


class ErrorClassifier:
    """Stateless facade over the module-level classification functions."""

    def classify(self, error: BaseException | None) -> FailureReason | None:
        return classify_error(error)

    def is_auth_challenge(self, error: BaseException | None) -> bool:
        return is_auth_challenge(error)

    def wrap_with_context(self, error: BaseException, operation: str) -> Exception:
        return wrap_with_context(error, operation)
