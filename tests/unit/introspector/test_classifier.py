"""Tests for error classification."""

import socket

import pytest

from fakes import status_error
from rtsp_inspector.domain.enums import FailureReason
from rtsp_inspector.introspector.classifier import (
    ErrorClassifier,
    classify_error,
    is_auth_challenge,
    wrap_with_context,
)
from rtsp_inspector.rtsp.errors import RTSPConnectionClosedError


class TestClassifyError:
    """Tests for classify_error."""

    def test_none(self) -> None:
        assert classify_error(None) is None

    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("dial tcp 10.0.0.1:554: connect: connection refused", FailureReason.CONNECTION_REFUSED),
            ("dial tcp 10.0.0.1:554: i/o timeout", FailureReason.TIMEOUT),
            ("deadline exceeded", FailureReason.TIMEOUT),
            ("DESCRIBE request timed out", FailureReason.TIMEOUT),
            ("lookup cam.invalid: no such host", FailureReason.DNS_ERROR),
            ("[Errno -2] Name or service not known", FailureReason.DNS_ERROR),
            ("[Errno -3] Temporary failure in name resolution", FailureReason.DNS_ERROR),
            ("connection closed by peer (EOF)", FailureReason.CONNECTION_CLOSED),
            ("[Errno 32] Broken pipe", FailureReason.CONNECTION_CLOSED),
            ("[Errno 104] Connection reset by peer", FailureReason.CONNECTION_CLOSED),
            ("bad status code: 401 (Unauthorized)", FailureReason.AUTH_REQUIRED),
            ("bad status code: 404 (Not Found)", FailureReason.NOT_FOUND),
            ("stream not found", FailureReason.NOT_FOUND),
            ("unsupported scheme 'http'", FailureReason.UNSUPPORTED_SCHEME),
            ("bad status code: 500 (Internal Server Error)", FailureReason.OTHER),
            ("unsupported video format: JPEG", FailureReason.OTHER),
        ],
    )
    def test_messages(self, message: str, expected: FailureReason) -> None:
        assert classify_error(RuntimeError(message)) is expected

    def test_case_insensitive(self) -> None:
        assert classify_error(RuntimeError("Connection Refused")) is FailureReason.CONNECTION_REFUSED

    def test_refused_beats_timeout(self) -> None:
        error = RuntimeError("connection refused after i/o timeout")
        assert classify_error(error) is FailureReason.CONNECTION_REFUSED

    def test_timeout_beats_auth(self) -> None:
        error = RuntimeError("401 unauthorized: deadline exceeded")
        assert classify_error(error) is FailureReason.TIMEOUT

    def test_closed_beats_not_found(self) -> None:
        error = RuntimeError("404: connection closed")
        assert classify_error(error) is FailureReason.CONNECTION_CLOSED

    def test_refused_from_cause_chain(self) -> None:
        error = RuntimeError("dial failed")
        error.__cause__ = ConnectionRefusedError(111, "refused")
        assert classify_error(error) is FailureReason.CONNECTION_REFUSED

    def test_timeout_from_cause_chain(self) -> None:
        error = RuntimeError("handshake failed")
        error.__cause__ = socket.timeout()
        assert classify_error(error) is FailureReason.TIMEOUT

    def test_eof_from_cause_chain(self) -> None:
        error = RuntimeError("read failed")
        error.__cause__ = EOFError()
        assert classify_error(error) is FailureReason.CONNECTION_CLOSED

    def test_status_error(self) -> None:
        assert classify_error(status_error(401, "Unauthorized")) is FailureReason.AUTH_REQUIRED
        assert classify_error(status_error(404, "Not Found")) is FailureReason.NOT_FOUND

    def test_client_error(self) -> None:
        error = RTSPConnectionClosedError("use of closed network connection")
        assert classify_error(error) is FailureReason.CONNECTION_CLOSED


class TestIsAuthChallenge:
    def test_detects_401(self) -> None:
        assert is_auth_challenge(status_error(401, "Unauthorized"))

    def test_other_status(self) -> None:
        assert not is_auth_challenge(status_error(404, "Not Found"))

    def test_none(self) -> None:
        assert not is_auth_challenge(None)


class TestWrapWithContext:
    def test_message_and_cause(self) -> None:
        original = OSError("boom")
        wrapped = wrap_with_context(original, "RTSP options")
        assert str(wrapped) == "RTSP options failed: boom"
        assert wrapped.__cause__ is original

    def test_classification_survives_wrapping(self) -> None:
        wrapped = wrap_with_context(ConnectionRefusedError(), "dial")
        assert classify_error(wrapped) is FailureReason.CONNECTION_REFUSED


class TestErrorClassifier:
    def test_delegates(self) -> None:
        classifier = ErrorClassifier()
        assert classifier.classify(RuntimeError("i/o timeout")) is FailureReason.TIMEOUT
        assert classifier.is_auth_challenge(RuntimeError("401"))
        assert "x failed" in str(classifier.wrap_with_context(RuntimeError("y"), "x"))
