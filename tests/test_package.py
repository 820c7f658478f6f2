"""Tests for rtsp_inspector package."""


def test_package_imports():
    """Test that the package can be imported successfully."""
    import rtsp_inspector

    assert rtsp_inspector is not None


def test_package_version():
    """Test that the package has a version string."""
    from rtsp_inspector import __version__

    assert __version__ == "0.1.0"


def test_public_api_exported():
    """The probe entry points are importable from the package root."""
    import rtsp_inspector

    for name in (
        "describe_stream",
        "is_connectable",
        "check_reachable",
        "validate_url",
        "StreamReport",
        "FailureReason",
    ):
        assert hasattr(rtsp_inspector, name)
