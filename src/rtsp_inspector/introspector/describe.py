"""Top-level probe entry points.

describe_stream() sequences the probe:

1. Validate the URL (invalid -> InvalidURLError, no network activity)
2. TCP preflight (failure -> unreachable report)
3. RTSP handshake under the overall deadline
4. Media classification of every advertised track

Every outcome other than an invalid URL is reported through the returned
StreamReport rather than raised.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from rtsp_inspector.domain.enums import FailureReason
from rtsp_inspector.domain.models import ConnectivityResult, StreamReport
from rtsp_inspector.introspector.classifier import classify_error
from rtsp_inspector.introspector.handshake import HandshakeOrchestrator
from rtsp_inspector.introspector.interface import (
    ClientFactory,
    HandshakeError,
    MediaClassificationError,
    PreflightError,
)
from rtsp_inspector.introspector.media import ClassifiedMedia, MediaProcessor
from rtsp_inspector.introspector.network import NetworkDialer
from rtsp_inspector.introspector.validation import parse_rtsp_url
from rtsp_inspector.logging.context import probe_context
from rtsp_inspector.rtsp.client import DEFAULT_USER_AGENT, RTSPClient

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


@dataclass
class _ReportBuilder:
    """Mutable report state for the duration of one probe call."""

    url: str
    protocol: str
    started: float
    reachable: bool = False
    failure_reason: FailureReason | None = None
    error_message: str | None = None
    debug_trace: tuple[str, ...] = ()
    media: ClassifiedMedia = ClassifiedMedia()

    def fail(self, reason: FailureReason | None, message: str) -> None:
        self.failure_reason = reason or FailureReason.OTHER
        self.error_message = message

    def build(self) -> StreamReport:
        return StreamReport(
            url=self.url,
            protocol=self.protocol,
            reachable=self.reachable,
            describe_ok=self.failure_reason is None,
            latency_ms=(time.monotonic() - self.started) * 1000,
            failure_reason=self.failure_reason,
            error_message=self.error_message,
            debug_trace=self.debug_trace,
            video_medias=self.media.video,
            audio_medias=self.media.audio,
            other_medias=self.media.other,
        )


def _classify_handshake_error(error: HandshakeError) -> FailureReason:
    if isinstance(error.__cause__, TimeoutError):
        return FailureReason.TIMEOUT
    return classify_error(error) or FailureReason.OTHER


def describe_stream(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    *,
    debug: bool = False,
    client_factory: ClientFactory = RTSPClient,
    user_agent: str = DEFAULT_USER_AGENT,
) -> StreamReport:
    """Probe an RTSP(S) endpoint and describe its media.

    Args:
        url: rtsp:// or rtsps:// URL, optionally with credentials.
        timeout: Overall deadline in seconds, covering preflight and handshake.
        debug: Attach a trace of handshake stages and RTSP messages.
        client_factory: RTSP client constructor (injectable for tests).
        user_agent: User-Agent header sent with RTSP requests.

    Returns:
        Frozen StreamReport. Failures are described by failure_reason and
        error_message; see StreamReport.raise_for_failure().

    Raises:
        InvalidURLError: If the URL is malformed or not rtsp/rtsps.
    """
    parsed = parse_rtsp_url(url)

    with probe_context(parsed.redacted()):
        started = time.monotonic()
        deadline = started + timeout
        builder = _ReportBuilder(url=url, protocol=parsed.scheme, started=started)

        try:
            NetworkDialer(timeout).preflight_dial(parsed)
        except PreflightError as e:
            builder.fail(classify_error(e), str(e))
            report = builder.build()
            logger.info(
                "Endpoint %s unreachable: %s (%s)",
                parsed.redacted(),
                report.failure_reason,
                report.error_message,
            )
            return report
        builder.reachable = True

        orchestrator = HandshakeOrchestrator(
            timeout,
            debug=debug,
            client_factory=client_factory,
            user_agent=user_agent,
        )
        try:
            description, trace = orchestrator.describe_with_deadline(parsed, deadline)
        except HandshakeError as e:
            builder.fail(_classify_handshake_error(e), str(e))
            builder.debug_trace = e.trace
        else:
            builder.debug_trace = trace
            try:
                builder.media = MediaProcessor().process(description)
            except MediaClassificationError as e:
                builder.fail(classify_error(e), str(e))

        report = builder.build()
        if report.failure_reason is not None:
            logger.info(
                "Describe of %s failed: %s (%s)",
                parsed.redacted(),
                report.failure_reason,
                report.error_message,
            )
        else:
            logger.debug(
                "Describe of %s succeeded in %.1fms with %d media",
                parsed.redacted(),
                report.latency_ms,
                report.media_count,
            )
        return report


def is_connectable(url: str, timeout: float = DEFAULT_TIMEOUT) -> ConnectivityResult:
    """Check TCP reachability only; no RTSP traffic is sent.

    Raises:
        InvalidURLError: If the URL is malformed or not rtsp/rtsps.
    """
    parsed = parse_rtsp_url(url)
    with probe_context(parsed.redacted()):
        try:
            NetworkDialer(timeout).preflight_dial(parsed)
        except PreflightError as e:
            reason = classify_error(e) or FailureReason.OTHER
            logger.info("Endpoint %s unreachable: %s (%s)", parsed.redacted(), reason, e)
            return ConnectivityResult(ok=False, failure_reason=reason, error_message=str(e))
    return ConnectivityResult(ok=True)


def check_reachable(url: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Return True if the endpoint accepts TCP connections.

    Raises:
        InvalidURLError: If the URL is malformed or not rtsp/rtsps.
    """
    return is_connectable(url, timeout).ok
