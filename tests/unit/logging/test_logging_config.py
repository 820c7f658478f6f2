"""Tests for configure_logging."""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rtsp_inspector.config.models import LoggingConfig
from rtsp_inspector.logging import configure_logging
from rtsp_inspector.logging.config import LOG_BACKUP_COUNT, LOG_MAX_BYTES
from rtsp_inspector.logging.context import probe_context
from rtsp_inspector.logging.handlers import JSONFormatter


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_stderr_by_default(self, restore_root_logger: logging.Logger) -> None:
        configure_logging(LoggingConfig(level="info"))
        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert type(handlers[0]) is logging.StreamHandler
        assert restore_root_logger.level == logging.INFO

    def test_file_handler(
        self, temp_dir: Path, restore_root_logger: logging.Logger
    ) -> None:
        log_file = temp_dir / "logs" / "probe.log"
        configure_logging(LoggingConfig(level="debug", file=log_file, format="json"))

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert handlers[0].maxBytes == LOG_MAX_BYTES
        assert handlers[0].backupCount == LOG_BACKUP_COUNT
        assert isinstance(handlers[0].formatter, JSONFormatter)

        with probe_context("rtsp://cam/s", probe_id="abcd1234"):
            logging.getLogger("rtsp_inspector.test").info("probing")
        handlers[0].flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "probing"
        assert entry["probe"]["id"] == "abcd1234"

    def test_file_and_stderr(
        self, temp_dir: Path, restore_root_logger: logging.Logger
    ) -> None:
        configure_logging(LoggingConfig(file=temp_dir / "p.log", include_stderr=True))
        assert len(restore_root_logger.handlers) == 2

    def test_text_format_includes_probe_tag(
        self, temp_dir: Path, restore_root_logger: logging.Logger
    ) -> None:
        log_file = temp_dir / "probe.log"
        configure_logging(LoggingConfig(level="info", file=log_file))

        with probe_context("rtsp://cam/s", probe_id="abcd1234"):
            logging.getLogger("rtsp_inspector.test").info("probing")
        logging.getLogger("rtsp_inspector.test").info("idle")
        restore_root_logger.handlers[0].flush()

        lines = log_file.read_text().splitlines()
        assert "[Pabcd1234] rtsp_inspector.test - INFO - probing" in lines[0]
        assert " - rtsp_inspector.test - INFO - idle" in lines[1]

    def test_unwritable_file_falls_back_to_stderr(
        self, temp_dir: Path, restore_root_logger: logging.Logger, capsys
    ) -> None:
        blocker = temp_dir / "file"
        blocker.write_text("")
        configure_logging(LoggingConfig(file=blocker / "sub" / "probe.log"))

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert type(handlers[0]) is logging.StreamHandler
        assert "Could not open log file" in capsys.readouterr().err
