"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Callable, Generator, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bytehttp import HTTPServer, ServerConfig, create_app


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /echo/abc HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: */*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request uploading a file."""
    body = b"hello"
    return (
        b"POST /files/new.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n\r\n".encode()
        + body
    )


@pytest.fixture
def config(tmp_path: Path) -> ServerConfig:
    """Test configuration storing files under a temporary directory."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        timeout=5.0,
        directory=str(tmp_path),
        log_level="WARNING",
    )


@pytest.fixture
def app(config: ServerConfig) -> HTTPServer:
    """Fully wired server, used without a socket via handle_bytes()."""
    return create_app(config)


class LiveServer:
    """Runs a server on a background thread for socket-level tests."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def address(self):
        return self.server.bound_address

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.ready.wait(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, data: bytes) -> bytes:
        """Send raw request bytes, return everything until the server closes."""
        with socket.create_connection(self.address, timeout=5.0) as sock:
            sock.sendall(data)
            chunks = []
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[LiveServer, None, None]:
    """create_app() served on 127.0.0.1 with an OS-assigned port."""
    server = LiveServer(create_app(config))
    server.start()

    yield server

    server.stop()


@pytest.fixture
def make_live_server() -> Generator[Callable[[ServerConfig], LiveServer], None, None]:
    """Start servers with custom configuration; all are stopped afterwards."""
    started = []

    def factory(config: ServerConfig) -> LiveServer:
        server = LiveServer(create_app(config))
        server.start()
        started.append(server)
        return server

    yield factory

    for server in started:
        server.stop()
