"""Shared test fixtures for RTSP Inspector."""

import logging
import shutil
import socket
import tempfile
from pathlib import Path

import pytest

from fakes import FakeRTSPServer
from rtsp_inspector.logging.context import ProbeContextFilter


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def rtsp_server():
    """Factory starting FakeRTSPServer instances, stopped after the test."""
    servers: list[FakeRTSPServer] = []

    def factory(responder) -> FakeRTSPServer:
        server = FakeRTSPServer(responder).start()
        servers.append(server)
        return server

    yield factory
    for server in servers:
        server.stop()


@pytest.fixture
def refused_port() -> int:
    """Return a loopback port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def idle_listener():
    """A listening socket that accepts connections but never answers."""
    sock = socket.create_server(("127.0.0.1", 0))
    yield sock.getsockname()[1]
    sock.close()


@pytest.fixture
def restore_root_logger():
    """Remove handlers installed by configure_logging and restore the level."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if any(isinstance(f, ProbeContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
