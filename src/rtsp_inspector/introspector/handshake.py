"""RTSP handshake orchestration under an overall deadline.

The handshake is START -> OPTIONS -> DESCRIBE, with one authenticated
DESCRIBE retry when the server answers with a 401 challenge and the URL
carries credentials:

    start -> options -> describe -> [auth-retry] -> done | failed

describe_with_deadline() runs the sequence on a daemon thread and waits for
its outcome on a single-slot queue. When the deadline passes first the
attempt is abandoned: the client is closed in the background and any late
outcome is dropped.
"""

from __future__ import annotations

import contextvars
import logging
import queue
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from rtsp_inspector.introspector.classifier import is_auth_challenge
from rtsp_inspector.introspector.interface import (
    ClientFactory,
    HandshakeError,
    RTSPClientProtocol,
)
from rtsp_inspector.introspector.trace import DebugTracer
from rtsp_inspector.rtsp.client import DEFAULT_USER_AGENT, RTSPClient
from rtsp_inspector.rtsp.errors import RTSPError
from rtsp_inspector.rtsp.messages import Request, Response
from rtsp_inspector.rtsp.sdp import SessionDescription
from rtsp_inspector.rtsp.url import RTSPURL

logger = logging.getLogger(__name__)

# Errors a client may raise for a failed request
CLIENT_ERRORS = (RTSPError, OSError)

_Outcome = tuple[SessionDescription | None, HandshakeError | None]


class _Attempt:
    """State of one handshake: its client, trace and abandonment flag."""

    def __init__(self, client: RTSPClientProtocol, tracer: DebugTracer | None) -> None:
        self.client = client
        self.tracer = tracer
        self.stage = "init"
        self.results: queue.Queue[_Outcome] = queue.Queue(maxsize=1)
        self._lock = threading.Lock()
        self._abandoned = False
        self._closed = False

    def trace(self) -> tuple[str, ...]:
        return self.tracer.get_trace() if self.tracer is not None else ()

    def deliver(self, outcome: _Outcome) -> bool:
        """Hand the outcome to the waiting caller unless it gave up."""
        with self._lock:
            if self._abandoned:
                return False
            self.results.put_nowait(outcome)
            return True

    def abandon(self) -> None:
        with self._lock:
            self._abandoned = True
        self.close_async()

    def close_async(self) -> None:
        """Close the client on a background thread, once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        threading.Thread(target=self._close, name="rtsp-close", daemon=True).start()

    def _close(self) -> None:
        try:
            self.client.close()
        except CLIENT_ERRORS as e:
            logger.debug("Error closing RTSP client: %s", e)


class HandshakeOrchestrator:
    """Drives the RTSP client through the describe handshake.

    Args:
        timeout: Read/write timeout given to the client, in seconds.
        debug: Record a debug trace of stages and RTSP messages.
        client_factory: Callable building the client; receives
            read_timeout, write_timeout and user_agent keyword arguments.
        user_agent: User-Agent header sent with every request.
    """

    def __init__(
        self,
        timeout: float,
        debug: bool = False,
        client_factory: ClientFactory = RTSPClient,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.timeout = timeout
        self.debug = debug
        self.client_factory = client_factory
        self.user_agent = user_agent

    def perform_describe(
        self, parsed_url: RTSPURL
    ) -> tuple[SessionDescription, tuple[str, ...]]:
        """Run the handshake on the calling thread.

        Returns:
            (session description, debug trace).

        Raises:
            HandshakeError: If a stage fails; the client error is __cause__.
        """
        attempt = self._new_attempt()
        try:
            description = self._run(parsed_url, attempt)
            return description, attempt.trace()
        finally:
            attempt.close_async()

    def describe_with_deadline(
        self, parsed_url: RTSPURL, deadline: float
    ) -> tuple[SessionDescription, tuple[str, ...]]:
        """Run the handshake on a worker thread, bounded by a deadline.

        Args:
            parsed_url: Validated URL.
            deadline: Absolute time.monotonic() value.

        Returns:
            (session description, debug trace).

        Raises:
            HandshakeError: If a stage fails, or with message
                "deadline exceeded" and a TimeoutError cause when the deadline
                passes first. Its trace holds what was recorded so far.
        """
        attempt = self._new_attempt()

        def work() -> None:
            try:
                outcome: _Outcome = (self._run(parsed_url, attempt), None)
            except HandshakeError as e:
                outcome = (None, e)
            except Exception as e:
                # Deliver unexpected failures instead of letting the caller
                # wait for the deadline
                error = HandshakeError(
                    f"RTSP handshake failed: {e}", attempt.stage, attempt.trace()
                )
                error.__cause__ = e
                outcome = (None, error)
            if not attempt.deliver(outcome):
                logger.debug(
                    "Discarding handshake result for %s that arrived after the deadline",
                    parsed_url.redacted(),
                )
            attempt.close_async()

        context = contextvars.copy_context()
        worker = threading.Thread(
            target=context.run, args=(work,), name="rtsp-handshake", daemon=True
        )
        worker.start()

        remaining = max(deadline - time.monotonic(), 0.0)
        try:
            description, error = attempt.results.get(timeout=remaining)
        except queue.Empty:
            attempt.abandon()
            logger.debug(
                "Handshake with %s abandoned at stage %s: deadline exceeded",
                parsed_url.redacted(),
                attempt.stage,
            )
            raise HandshakeError(
                "deadline exceeded", attempt.stage, attempt.trace()
            ) from TimeoutError("deadline exceeded")

        if error is not None:
            raise error
        assert description is not None
        return description, attempt.trace()

    def _new_attempt(self) -> _Attempt:
        tracer = DebugTracer() if self.debug else None
        client = self.client_factory(
            read_timeout=self.timeout,
            write_timeout=self.timeout,
            user_agent=self.user_agent,
        )
        client.on_request = self._request_hook(tracer)
        client.on_response = self._response_hook(tracer)
        return _Attempt(client, tracer)

    @staticmethod
    def _request_hook(tracer: DebugTracer | None) -> Callable[[Request], None]:
        def on_request(request: Request) -> None:
            logger.debug("RTSP request: %s %s", request.method, request.url)
            if tracer is not None:
                tracer.on_request(request)

        return on_request

    @staticmethod
    def _response_hook(tracer: DebugTracer | None) -> Callable[[Response], None]:
        def on_response(response: Response) -> None:
            logger.debug("RTSP response: %d %s", response.status_code, response.reason)
            if tracer is not None:
                tracer.on_response(response)

        return on_response

    def _enter_stage(self, attempt: _Attempt, stage: str) -> None:
        attempt.stage = stage
        if attempt.tracer is not None:
            attempt.tracer.add_stage(stage)
        logger.debug("Handshake stage: %s", stage, extra={"stage": stage})

    @contextmanager
    def _timed(
        self, attempt: _Attempt, operation: str, target: str
    ) -> Iterator[None]:
        fields: dict[str, object] = {"stage": attempt.stage, "operation": operation}
        start = time.monotonic()
        try:
            yield
        except BaseException as e:
            fields["duration_ms"] = round((time.monotonic() - start) * 1000, 1)
            logger.debug(
                "Network operation %s to %s failed after %.1fms: %s",
                operation,
                target,
                fields["duration_ms"],
                e,
                extra=fields,
            )
            raise
        fields["duration_ms"] = round((time.monotonic() - start) * 1000, 1)
        logger.debug(
            "Network operation %s to %s took %.1fms",
            operation,
            target,
            fields["duration_ms"],
            extra=fields,
        )

    def _fail(
        self, attempt: _Attempt, message: str, error: BaseException
    ) -> HandshakeError:
        return HandshakeError(f"{message}: {error}", attempt.stage, attempt.trace())

    def _run(self, url: RTSPURL, attempt: _Attempt) -> SessionDescription:
        client = attempt.client

        self._enter_stage(attempt, "start")
        try:
            with self._timed(attempt, "rtsp_start", url.host):
                client.start(url.scheme, url.host)
        except CLIENT_ERRORS as e:
            raise self._fail(attempt, "RTSP start failed", e) from e

        self._enter_stage(attempt, "options")
        try:
            with self._timed(attempt, "rtsp_options", url.host):
                client.options(url)
        except CLIENT_ERRORS as e:
            if not is_auth_challenge(e):
                raise self._fail(attempt, "RTSP options failed", e) from e

        self._enter_stage(attempt, "describe")
        try:
            with self._timed(attempt, "rtsp_describe", url.host):
                description, _ = client.describe(url)
            return description
        except CLIENT_ERRORS as e:
            if not (is_auth_challenge(e) and url.has_credentials):
                raise self._fail(attempt, "RTSP describe failed", e) from e

        self._enter_stage(attempt, "auth-retry")
        try:
            with self._timed(attempt, "rtsp_describe_retry", url.host):
                description, _ = client.describe(url)
        except CLIENT_ERRORS as e:
            raise self._fail(attempt, "RTSP describe failed", e) from e
        return description
