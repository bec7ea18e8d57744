"""
Unit tests for the gzip codec.
"""

import gzip
import logging
import zlib

from minihttp.http import compression
from minihttp.http.compression import gzip_compress, encode_body, GZIP


def broken_compress(data, compresslevel=9):
    raise zlib.error("simulated failure")


class TestGzipCompress:
    """Tests for gzip_compress()."""

    def test_produces_gzip_container(self):
        """Test that output carries the gzip magic bytes and round-trips."""
        data = b"hello " * 100
        compressed = gzip_compress(data)

        assert compressed[:2] == b"\x1f\x8b"
        assert gzip.decompress(compressed) == data

    def test_failure_returns_input(self, monkeypatch, caplog):
        """Test that a codec failure returns the input unchanged."""
        monkeypatch.setattr(compression.gzip, "compress", broken_compress)

        with caplog.at_level(logging.WARNING, logger="minihttp.http.compression"):
            assert gzip_compress(b"abc") == b"abc"

        assert "gzip compression failed" in caplog.text


class TestEncodeBody:
    """Tests for encode_body()."""

    def test_gzip_selected(self):
        """Test compression when gzip was negotiated."""
        body, encoding = encode_body(b"abc", ["gzip"])

        assert encoding == GZIP
        assert gzip.decompress(body) == b"abc"

    def test_gzip_among_other_tokens(self):
        """Test that gzip is found anywhere in the list."""
        body, encoding = encode_body(b"abc", ["", "gzip"])
        assert encoding == GZIP

    def test_no_encoding(self):
        """Test that content passes through without gzip."""
        assert encode_body(b"abc", []) == (b"abc", "")
        assert encode_body(b"abc", [""]) == (b"abc", "")

    def test_empty_content_never_compressed(self):
        """Test that empty content stays empty even with gzip."""
        assert encode_body(b"", ["gzip"]) == (b"", "")

    def test_failure_drops_encoding(self, monkeypatch):
        """Test that a codec failure sends the body as-is without an encoding."""
        monkeypatch.setattr(compression.gzip, "compress", broken_compress)
        assert encode_body(b"abc", ["gzip"]) == (b"abc", "")
