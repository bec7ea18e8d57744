"""
=============================================================================
GZIP CODEC
=============================================================================

Compresses response bodies into the gzip container format.

=============================================================================
GZIP vs RAW DEFLATE
=============================================================================

gzip wraps a DEFLATE stream in a header and a trailer:

    ┌──────────────┬──────────────────────────────┬──────────────────┐
    │ 10-byte      │ DEFLATE compressed data      │ CRC32 + ISIZE    │
    │ header       │ (LZ77 + Huffman)             │ (8-byte trailer) │
    │ 1f 8b 08 ... │                              │                  │
    └──────────────┴──────────────────────────────┴──────────────────┘

"Content-Encoding: gzip" means the full container, so we use
gzip.compress() and not zlib.compress() (zlib framing) or a raw
deflate stream.

=============================================================================
FAILING OPEN
=============================================================================

Compression must never fail a request. If the codec raises, the original
bytes are sent uncompressed and the response goes out WITHOUT a
Content-Encoding header:

    encode_body(b"abc", ["gzip"])   → (b"\\x1f\\x8b...", "gzip")
    encode_body(b"abc", [])         → (b"abc", "")
    encode_body(b"", ["gzip"])      → (b"", "")        empty stays empty
    (codec failure)                 → (b"abc", "")

=============================================================================
"""

import gzip
import logging
import zlib
from typing import Iterable, Optional, Tuple


logger = logging.getLogger(__name__)

GZIP = "gzip"

# Level 6 is the usual balanced default (zlib's own default).
DEFAULT_COMPRESSION_LEVEL = 6


def _try_gzip(data: bytes, level: int) -> Optional[bytes]:
    """Compress data, or return None if the codec fails."""
    try:
        return gzip.compress(data, compresslevel=level)
    except (zlib.error, ValueError, OSError) as e:
        logger.warning(f"gzip compression failed, sending uncompressed: {e}")
        return None


def gzip_compress(data: bytes, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """
    Compress bytes into a gzip container.

    Args:
        data: Payload to compress.
        level: Compression level (1-9).

    Returns:
        gzip-compressed bytes, or data unchanged if compression failed.
    """
    compressed = _try_gzip(data, level)
    return data if compressed is None else compressed


def encode_body(
    content: bytes,
    encodings: Iterable[str],
    level: int = DEFAULT_COMPRESSION_LEVEL,
) -> Tuple[bytes, str]:
    """
    Apply the negotiated content encoding to a response body.

    Args:
        content: Raw (uncompressed) response content.
        encodings: Negotiated encoding tokens.
        level: gzip compression level.

    Returns:
        (body_bytes, chosen_encoding). chosen_encoding is "" whenever the
        body goes out as-is.
    """
    if not content or GZIP not in encodings:
        return content, ""

    compressed = _try_gzip(content, level)
    if compressed is None:
        return content, ""
    return compressed, GZIP
