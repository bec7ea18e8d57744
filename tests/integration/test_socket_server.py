"""
Integration tests over real TCP sockets.

Each test runs against a live server on a free port, once with a thread
per connection and once with a bounded worker pool.
"""

import gzip
import socket
import threading

import pytest

from minihttp.http.response import decoded_body


class TestRoutesOverSocket:
    """Tests for the built-in routes end to end."""

    def test_index(self, test_server):
        """Test GET / over the wire."""
        assert test_server.request(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n") == (
            b"HTTP/1.1 200 OK\r\n\r\n"
        )

    def test_echo(self, test_server):
        """Test the echo route."""
        assert test_server.request(b"GET /echo/abc HTTP/1.1\r\n\r\n") == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 3\r\n\r\nabc"
        )

    def test_echo_gzip(self, test_server):
        """Test a gzip-compressed echo."""
        raw = test_server.request(
            b"GET /echo/compress-me HTTP/1.1\r\nAccept-Encoding: invalid, gzip\r\n\r\n"
        )
        head, _, body = raw.partition(b"\r\n\r\n")

        assert b"Content-Encoding: gzip" in head.split(b"\r\n")
        assert f"Content-Length: {len(body)}".encode() in head.split(b"\r\n")
        assert gzip.decompress(body) == b"compress-me"

    def test_user_agent(self, test_server):
        """Test user-agent reflection."""
        raw = test_server.request(b"GET /user-agent HTTP/1.1\r\nUser-Agent: test-agent\r\n\r\n")
        assert decoded_body(raw) == b"test-agent"

    def test_files_roundtrip(self, test_server, tmp_path):
        """Test uploading then downloading a file."""
        upload = test_server.request(
            b"POST /files/data.bin HTTP/1.1\r\nContent-Length: 6\r\n\r\n\x00\x01\x02abc"
        )
        assert upload == b"HTTP/1.1 201 Created\r\n\r\n"
        assert (tmp_path / "data.bin").read_bytes() == b"\x00\x01\x02abc"

        download = test_server.request(b"GET /files/data.bin HTTP/1.1\r\n\r\n")
        assert download.startswith(b"HTTP/1.1 200 OK\r\nContent-Type: application/octet-stream\r\n")
        assert decoded_body(download) == b"\x00\x01\x02abc"

    def test_not_found(self, test_server):
        """Test an unknown target."""
        assert test_server.request(b"GET /missing HTTP/1.1\r\n\r\n") == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_malformed(self, test_server):
        """Test that a malformed request line gets 400."""
        assert test_server.request(b"NONSENSE\r\n\r\n") == b"HTTP/1.1 400 Bad Request\r\n\r\n"


class TestConnectionLifecycle:
    """Tests for one-request-per-connection behavior and concurrency."""

    def test_connection_closed_after_response(self, test_server):
        """Test that the server closes the connection after responding."""
        with socket.create_connection(("127.0.0.1", test_server.port), timeout=5.0) as s:
            s.sendall(b"GET / HTTP/1.1\r\n\r\n")

            data = b""
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                data += chunk

        assert data == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_concurrent_clients(self, test_server):
        """Test many clients at once each get their own response."""
        results = {}
        errors = []

        def client(i):
            try:
                results[i] = test_server.request(f"GET /echo/client-{i} HTTP/1.1\r\n\r\n".encode())
            except OSError as e:
                errors.append(e)

        threads = [threading.Thread(target=client, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)

        assert not errors
        for i in range(20):
            assert decoded_body(results[i]) == f"client-{i}".encode()

    def test_idle_client_does_not_block_others(self, test_server):
        """Test that a client that never sends does not stall the server."""
        idle = socket.create_connection(("127.0.0.1", test_server.port), timeout=5.0)
        try:
            raw = test_server.request(b"GET /echo/still-alive HTTP/1.1\r\n\r\n", timeout=2.0)
            assert decoded_body(raw) == b"still-alive"
        finally:
            idle.close()

    def test_shutdown_stops_listening(self, test_server):
        """Test that no connections are accepted after shutdown."""
        port = test_server.port
        test_server.stop()

        with pytest.raises(OSError):
            socket.create_connection(("127.0.0.1", port), timeout=1.0)
