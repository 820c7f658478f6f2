"""Tests for domain enums."""

import pytest

from rtsp_inspector.domain.enums import FailureReason, TrackType


class TestFailureReason:
    """Tests for FailureReason enum."""

    def test_values_are_snake_case_names(self) -> None:
        """Serialized values match the documented taxonomy."""
        assert {reason.value for reason in FailureReason} == {
            "invalid_url",
            "unsupported_scheme",
            "dns_error",
            "connection_refused",
            "timeout",
            "auth_required",
            "not_found",
            "connection_closed",
            "other",
        }

    def test_str_is_value(self) -> None:
        """str() renders the wire value, not the member name."""
        assert str(FailureReason.AUTH_REQUIRED) == "auth_required"
        assert f"{FailureReason.TIMEOUT}" == "timeout"

    def test_compares_equal_to_string(self) -> None:
        """Members are str subclasses."""
        assert FailureReason.NOT_FOUND == "not_found"


class TestTrackType:
    """Tests for TrackType.from_media_type."""

    @pytest.mark.parametrize(
        ("media_type", "expected"),
        [
            ("video", TrackType.VIDEO),
            ("VIDEO", TrackType.VIDEO),
            ("audio", TrackType.AUDIO),
            ("application", TrackType.OTHER),
            ("text", TrackType.OTHER),
            ("", TrackType.OTHER),
        ],
    )
    def test_from_media_type(self, media_type: str, expected: TrackType) -> None:
        assert TrackType.from_media_type(media_type) is expected
