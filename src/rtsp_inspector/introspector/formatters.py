"""Formatters for probe results.

This module provides functions to format StreamReport and TrackInfo objects
for JSON or human-readable output. The JSON shape is stable: consumers key
on url, reachable, protocol, describe_ok, latency and media_count, plus the
optional media lists, failure fields and debug trace.
"""

import json
from typing import Any

from rtsp_inspector.domain.models import ConnectivityResult, StreamReport, TrackInfo


def track_to_dict(track: TrackInfo) -> dict[str, Any]:
    """Convert TrackInfo to JSON-serializable dict.

    Optional fields are omitted when absent.

    Args:
        track: The track to convert.

    Returns:
        Dictionary representation.
    """
    d: dict[str, Any] = {
        "index": track.index,
        "type": track.track_type.value,
    }
    if track.format:
        d["format"] = track.format
    if track.clock_rate is not None:
        d["clock_rate"] = track.clock_rate
    if track.payload_type is not None:
        d["payload_type"] = track.payload_type
    if track.resolution is not None:
        d["resolution"] = {
            "width": track.resolution.width,
            "height": track.resolution.height,
        }
    return d


def report_to_dict(report: StreamReport) -> dict[str, Any]:
    """Convert StreamReport to JSON-serializable dict.

    Empty media lists, an empty debug trace and unset failure fields are
    omitted.
    """
    d: dict[str, Any] = {
        "url": report.url,
        "reachable": report.reachable,
        "protocol": report.protocol,
        "describe_ok": report.describe_ok,
        "latency": report.latency_ms,
        "media_count": report.media_count,
    }
    for key, tracks in (
        ("video_medias", report.video_medias),
        ("audio_medias", report.audio_medias),
        ("other_medias", report.other_medias),
    ):
        if tracks:
            d[key] = [track_to_dict(t) for t in tracks]
    if report.failure_reason is not None:
        d["failure_reason"] = report.failure_reason.value
    if report.error_message:
        d["error_message"] = report.error_message
    if report.debug_trace:
        d["debug_trace"] = list(report.debug_trace)
    return d


def invalid_url_to_dict(url: str, reason: str, message: str) -> dict[str, Any]:
    """Build the minimal result emitted for a URL that failed validation."""
    return {
        "url": url,
        "describe_ok": False,
        "failure_reason": reason,
        "error_message": message,
    }


def connectivity_to_dict(url: str, result: ConnectivityResult) -> dict[str, Any]:
    """Convert a preflight-only result to a JSON-serializable dict."""
    d: dict[str, Any] = {"url": url, "reachable": result.ok}
    if result.failure_reason is not None:
        d["failure_reason"] = result.failure_reason.value
    if result.error_message:
        d["error_message"] = result.error_message
    return d


def format_json(data: StreamReport | dict[str, Any], pretty: bool = True) -> str:
    """Format a report (or an already converted dict) as JSON.

    Args:
        data: The report, or a dict from one of the *_to_dict helpers.
        pretty: Indent with two spaces; compact single line otherwise.

    Returns:
        JSON string.
    """
    if isinstance(data, StreamReport):
        data = report_to_dict(data)
    if pretty:
        return json.dumps(data, indent=2)
    return json.dumps(data, separators=(",", ":"))


def format_track_line(track: TrackInfo) -> str:
    """Format a single track for human output.

    Args:
        track: The track to format.

    Returns:
        Formatted track line, e.g. "#0 [video] H264 1280x720 pt=96 90000Hz".
    """
    parts = [f"#{track.index}", f"[{track.track_type.value}]"]
    if track.format:
        parts.append(track.format)
    if track.resolution is not None:
        parts.append(str(track.resolution))
    if track.payload_type is not None:
        parts.append(f"pt={track.payload_type}")
    if track.clock_rate is not None:
        parts.append(f"{track.clock_rate}Hz")
    return " ".join(parts)


def format_human(report: StreamReport) -> str:
    """Format a report for human-readable output.

    Args:
        report: The report to format.

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = [
        f"URL: {report.url}",
        f"Protocol: {report.protocol}",
        f"Reachable: {'yes' if report.reachable else 'no'}",
        f"Describe: {'ok' if report.describe_ok else 'failed'}",
        f"Latency: {report.latency_ms:.1f}ms",
    ]

    if report.failure_reason is not None:
        lines.append(f"Failure: {report.failure_reason.value}")
        if report.error_message:
            lines.append(f"Error: {report.error_message}")

    if report.describe_ok:
        lines.append("")
        lines.append(f"Tracks ({report.media_count}):")
        for title, tracks in (
            ("Video", report.video_medias),
            ("Audio", report.audio_medias),
            ("Other", report.other_medias),
        ):
            if tracks:
                lines.append(f"  {title}:")
                for track in tracks:
                    lines.append(f"    {format_track_line(track)}")
        if not report.media_count:
            lines.append("  (no tracks found)")

    if report.debug_trace:
        lines.append("")
        lines.append("Debug trace:")
        for entry in report.debug_trace:
            lines.append(f"  {entry}")

    return "\n".join(lines)
