"""End-to-end describe_stream tests against loopback RTSP servers."""

import time

import pytest

from fakes import CLOSE, HANG, b64, build_h264_sps, build_h265_sps, h264_sdp, rtsp_response
from rtsp_inspector import describe_stream
from rtsp_inspector.domain.enums import FailureReason
from rtsp_inspector.domain.models import Resolution
from rtsp_inspector.introspector.interface import InvalidURLError

pytestmark = pytest.mark.integration

SDP_HEADERS = {"Content-Type": "application/sdp"}
CAMERA_SPS_720P = bytes(
    [0x67, 0x42, 0xC0, 0x1F, 0x95, 0xA8, 0x14, 0x01, 0x6E, 0x9B, 0x80, 0x80, 0x80, 0xA0]
)


def _camera(sdp: str):
    """Responder for a camera that needs no authentication."""

    def responder(request):
        if request.method == "OPTIONS":
            return rtsp_response(request, headers={"Public": "OPTIONS, DESCRIBE"})
        return rtsp_response(request, headers=SDP_HEADERS, body=sdp.encode())

    return responder


def _digest_camera(sdp: str, username: str):
    """Responder challenging DESCRIBE until a Digest Authorization for username arrives.

    OPTIONS is answered without authentication, as most cameras do.
    """

    def responder(request):
        if request.method == "OPTIONS":
            return rtsp_response(request, headers={"Public": "OPTIONS, DESCRIBE"})
        authorization = request.headers.get("authorization", "")
        if f'username="{username}"' in authorization:
            return rtsp_response(request, headers=SDP_HEADERS, body=sdp.encode())
        return rtsp_response(
            request,
            401,
            "Unauthorized",
            headers={"WWW-Authenticate": 'Digest realm="cam", nonce="0a4f113b"'},
        )

    return responder


class TestSuccessfulDescribe:
    """Probes that complete DESCRIBE."""

    def test_h264_720p_with_audio(self, rtsp_server) -> None:
        server = rtsp_server(_camera(h264_sdp(CAMERA_SPS_720P)))
        report = describe_stream(server.url(), timeout=3.0)

        assert report.reachable
        assert report.describe_ok
        assert report.failure_reason is None
        assert report.media_count == 2
        assert report.video_resolution_string == "1280x720"
        video = report.video_medias[0]
        assert video.format == "H264"
        assert video.clock_rate == 90000
        assert video.payload_type == 96
        audio = report.audio_medias[0]
        assert audio.format == "PCMU"
        assert audio.clock_rate == 8000
        assert server.methods() == ["OPTIONS", "DESCRIBE"]

    def test_h265(self, rtsp_server) -> None:
        sps = build_h265_sps(1920, 1088, conformance=(0, 0, 0, 4))
        sdp = (
            "v=0\r\ns=hevc\r\nm=video 0 RTP/AVP 96\r\n"
            "a=rtpmap:96 H265/90000\r\n"
            f"a=fmtp:96 sprop-sps={b64(sps)}\r\n"
        )
        report = describe_stream(rtsp_server(_camera(sdp)).url(), timeout=3.0)

        assert report.describe_ok
        assert report.video_medias[0].format == "H265"
        assert report.video_medias[0].resolution == Resolution(1920, 1080)

    def test_truncated_sps_leaves_resolution_empty(self, rtsp_server) -> None:
        sdp = h264_sdp(bytes([0x67, 0x42, 0x00, 0x1F]), audio=False)
        report = describe_stream(rtsp_server(_camera(sdp)).url(), timeout=3.0)

        assert report.describe_ok
        assert report.video_medias[0].resolution is None
        assert report.video_resolution_string == ""

    def test_digest_credentials(self, rtsp_server) -> None:
        sdp = h264_sdp(build_h264_sps(120, 68, crop=(0, 0, 0, 4)))
        server = rtsp_server(_digest_camera(sdp, "admin"))

        report = describe_stream(server.url(userinfo="admin:secret"), timeout=3.0)

        assert report.describe_ok
        assert report.video_resolution_string == "1920x1080"
        assert server.methods() == ["OPTIONS", "DESCRIBE", "DESCRIBE"]

    def test_debug_trace(self, rtsp_server) -> None:
        server = rtsp_server(_digest_camera(h264_sdp(CAMERA_SPS_720P), "admin"))
        report = describe_stream(
            server.url(userinfo="admin:secret"), timeout=3.0, debug=True
        )

        trace = report.debug_trace
        assert trace[0] == "STAGE: start"
        assert "STAGE: auth-retry" in trace
        assert any(line.startswith("--> DESCRIBE rtsp://127.0.0.1:") for line in trace)
        assert "<-- 401 Unauthorized" in trace
        assert "--> H Authorization: Digest ***" in trace
        assert not any("secret" in line for line in trace)

    def test_idempotent(self, rtsp_server) -> None:
        server = rtsp_server(_camera(h264_sdp(CAMERA_SPS_720P)))
        first = describe_stream(server.url(), timeout=3.0)
        second = describe_stream(server.url(), timeout=3.0)

        assert first.describe_ok and second.describe_ok
        assert first.video_medias == second.video_medias
        assert first.audio_medias == second.audio_medias


class TestFailedDescribe:
    """Probes that reach the endpoint but fail the handshake."""

    def test_auth_required_without_credentials(self, rtsp_server) -> None:
        server = rtsp_server(_digest_camera(h264_sdp(CAMERA_SPS_720P), "admin"))
        report = describe_stream(server.url(), timeout=3.0)

        assert report.reachable
        assert not report.describe_ok
        assert report.failure_reason is FailureReason.AUTH_REQUIRED
        assert server.methods() == ["OPTIONS", "DESCRIBE"]

    def test_wrong_credentials(self, rtsp_server) -> None:
        server = rtsp_server(_digest_camera(h264_sdp(CAMERA_SPS_720P), "admin"))
        report = describe_stream(server.url(userinfo="guest:guess"), timeout=3.0)

        assert report.failure_reason is FailureReason.AUTH_REQUIRED
        assert server.methods() == ["OPTIONS", "DESCRIBE", "DESCRIBE"]

    def test_not_found(self, rtsp_server) -> None:
        def responder(request):
            if request.method == "OPTIONS":
                return rtsp_response(request)
            return rtsp_response(request, 404, "Stream Not Found")

        report = describe_stream(rtsp_server(responder).url("/missing"), timeout=3.0)

        assert report.failure_reason is FailureReason.NOT_FOUND
        assert "404" in report.error_message

    def test_connection_closed(self, rtsp_server) -> None:
        report = describe_stream(rtsp_server(lambda req: CLOSE).url(), timeout=3.0)

        assert report.reachable
        assert report.failure_reason is FailureReason.CONNECTION_CLOSED

    def test_unsupported_video_codec(self, rtsp_server) -> None:
        sdp = "v=0\r\ns=mjpeg\r\nm=video 0 RTP/AVP 26\r\n"
        report = describe_stream(rtsp_server(_camera(sdp)).url(), timeout=3.0)

        assert report.reachable
        assert report.failure_reason is FailureReason.OTHER
        assert "unsupported video format: JPEG" in report.error_message

    def test_server_error_is_other(self, rtsp_server) -> None:
        report = describe_stream(
            rtsp_server(lambda req: rtsp_response(req, 500, "Internal Server Error")).url(),
            timeout=3.0,
        )
        assert report.failure_reason is FailureReason.OTHER

    def test_silent_server_times_out(self, rtsp_server) -> None:
        server = rtsp_server(lambda req: HANG)
        started = time.monotonic()
        report = describe_stream(server.url(), timeout=0.5)
        elapsed = time.monotonic() - started

        assert report.reachable
        assert report.failure_reason is FailureReason.TIMEOUT
        assert elapsed < 1.5

    def test_idle_listener_times_out(self, idle_listener: int) -> None:
        started = time.monotonic()
        report = describe_stream(f"rtsp://127.0.0.1:{idle_listener}/s", timeout=0.5)

        assert report.failure_reason is FailureReason.TIMEOUT
        assert time.monotonic() - started < 1.5


class TestUnreachable:
    """Probes that fail the TCP preflight."""

    def test_connection_refused(self, refused_port: int) -> None:
        report = describe_stream(f"rtsp://127.0.0.1:{refused_port}/s", timeout=2.0)

        assert not report.reachable
        assert not report.describe_ok
        assert report.failure_reason is FailureReason.CONNECTION_REFUSED
        assert report.media_count == 0

    def test_dns_error(self) -> None:
        report = describe_stream("rtsp://camera.invalid/stream", timeout=3.0)

        assert not report.reachable
        assert report.failure_reason is FailureReason.DNS_ERROR

    def test_unreachable_error_raised_on_demand(self, refused_port: int) -> None:
        report = describe_stream(f"rtsp://127.0.0.1:{refused_port}/s", timeout=2.0)
        with pytest.raises(Exception, match="connection_refused"):
            report.raise_for_failure()


class TestInvalidURL:
    @pytest.mark.parametrize("url", ["", "http://cam/s", "rtsp://", "rtsp://cam:x/s"])
    def test_raises_without_network(self, url: str) -> None:
        with pytest.raises(InvalidURLError):
            describe_stream(url, timeout=1.0)
