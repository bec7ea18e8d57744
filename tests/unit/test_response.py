"""
Unit tests for HTTP response serialization.
"""

import gzip

import pytest

from minihttp.http.response import (
    HTTPResponse,
    TEXT_PLAIN,
    OCTET_STREAM,
    decoded_body,
    ok,
    created,
    bad_request,
    not_found,
    method_not_allowed,
    internal_error,
    service_unavailable,
)
from minihttp.http.status_codes import HTTPStatus


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"

    def test_serialize_text(self):
        """Test exact bytes for a text response."""
        response = ok("abc", TEXT_PLAIN)

        assert response.serialize() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_serialize_empty(self):
        """Test that empty content emits no Content-Length and no body."""
        assert not_found().serialize() == b"HTTP/1.1 404 Not Found\r\n\r\n"
        assert created().serialize() == b"HTTP/1.1 201 Created\r\n\r\n"

    def test_content_type_without_content(self):
        """Test that Content-Type is emitted even when content is empty."""
        assert ok("", TEXT_PLAIN).serialize() == (
            b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\n"
        )

    def test_content_length_counts_bytes(self):
        """Test that Content-Length counts UTF-8 bytes, not characters."""
        result = ok("é", TEXT_PLAIN).serialize()
        assert b"Content-Length: 2\r\n" in result

    def test_serialize_gzip(self):
        """Test gzip output: header order, compressed length, payload."""
        response = ok("abc", TEXT_PLAIN)
        response.encoding = ["gzip"]

        head, _, body = response.serialize().partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        assert lines[0] == b"HTTP/1.1 200 OK"
        assert lines[1] == b"Content-Type: text/plain"
        assert lines[2] == b"Content-Encoding: gzip"
        assert lines[3] == f"Content-Length: {len(body)}".encode()
        assert gzip.decompress(body) == b"abc"

    def test_gzip_empty_content(self):
        """Test that empty content is not compressed and gets no encoding header."""
        response = not_found()
        response.encoding = ["gzip"]
        assert response.serialize() == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_non_gzip_encoding_ignored(self):
        """Test that the empty token does not change the output."""
        response = ok("abc", TEXT_PLAIN)
        response.encoding = [""]
        assert response.serialize() == ok("abc", TEXT_PLAIN).serialize()

    def test_serialize_is_idempotent(self):
        """Test that serializing twice gives identical bytes."""
        response = ok(b"\x00\x01binary", OCTET_STREAM)
        response.encoding = ["gzip"]
        assert response.serialize() == response.serialize()

    def test_to_bytes_alias(self):
        """Test to_bytes() matches serialize()."""
        response = ok("x", TEXT_PLAIN)
        assert response.to_bytes() == response.serialize()

    def test_set_content_chaining(self):
        """Test method chaining and str encoding."""
        response = HTTPResponse().set_content("hi").set_content_type(TEXT_PLAIN)

        assert response.content == b"hi"
        assert response.content_type == TEXT_PLAIN


class TestDecodedBody:
    """Tests for decoded_body()."""

    def test_plain(self):
        """Test extracting an uncompressed body."""
        assert decoded_body(ok("abc", TEXT_PLAIN).serialize()) == b"abc"

    def test_gzip(self):
        """Test extracting and decompressing a gzip body."""
        response = ok("abc" * 50, TEXT_PLAIN)
        response.encoding = ["gzip"]
        assert decoded_body(response.serialize()) == b"abc" * 50

    def test_empty(self):
        """Test a response without a body."""
        assert decoded_body(not_found().serialize()) == b""


class TestConvenienceFunctions:
    """Tests for response helper functions."""

    @pytest.mark.parametrize("factory,status", [
        (ok, HTTPStatus.OK),
        (created, HTTPStatus.CREATED),
        (bad_request, HTTPStatus.BAD_REQUEST),
        (not_found, HTTPStatus.NOT_FOUND),
        (method_not_allowed, HTTPStatus.METHOD_NOT_ALLOWED),
        (internal_error, HTTPStatus.INTERNAL_SERVER_ERROR),
        (service_unavailable, HTTPStatus.SERVICE_UNAVAILABLE),
    ])
    def test_status(self, factory, status):
        """Test each helper's status and empty default content."""
        response = factory()
        assert response.status == status
        assert response.content == b""

    def test_method_not_allowed_has_no_allow_header(self):
        """Test that 405 serializes with no headers at all."""
        assert method_not_allowed().serialize() == b"HTTP/1.1 405 Method Not Allowed\r\n\r\n"


class TestHTTPStatus:
    """Tests for HTTPStatus enum."""

    def test_status_text(self):
        """Test the "NNN Reason" form."""
        assert HTTPStatus.OK.status_text == "200 OK"
        assert HTTPStatus.BAD_REQUEST.status_text == "400 Bad Request"
        assert HTTPStatus.INTERNAL_SERVER_ERROR.status_text == "500 Internal Server Error"

    def test_int_comparison(self):
        """Test that statuses compare as integers."""
        assert HTTPStatus.CREATED == 201

    def test_categories(self):
        """Test success/error helpers."""
        assert HTTPStatus.CREATED.is_success
        assert not HTTPStatus.CREATED.is_error
        assert HTTPStatus.NOT_FOUND.is_error
        assert HTTPStatus.SERVICE_UNAVAILABLE.is_error
