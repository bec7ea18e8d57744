"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttp import HTTPServer, ServerConfig


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
    """Sample HTTP POST request with a body."""
    body = b"hello world"
    return (
        b"POST /files/upload.txt HTTP/1.1\r\n"
        b"Host: localhost:4221\r\n"
        b"Content-Type: application/octet-stream\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"\r\n"
        + body
    )


@pytest.fixture
def config(tmp_path) -> ServerConfig:
    """Default test server configuration, files rooted in tmp_path."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        backlog=64,
        directory=str(tmp_path),
        timeout=5.0,
        log_level="WARNING",
    )


def http_request(port: int, raw: bytes, timeout: float = 5.0) -> bytes:
    """Send raw bytes to the server and read the response until EOF."""
    with socket.create_connection(("127.0.0.1", port), timeout=timeout) as s:
        s.sendall(raw)
        chunks = []
        while True:
            chunk = s.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def request(self, raw: bytes, timeout: float = 5.0) -> bytes:
        """Send one request and return the complete response."""
        return http_request(self.port, raw, timeout=timeout)

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture(params=[None, 4], ids=["thread-per-connection", "pool"])
def test_server(request, config: ServerConfig) -> Generator[TestServer, None, None]:
    """Run a server on a free port, once per dispatch mode."""
    server = HTTPServer(config.with_overrides(max_workers=request.param))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
