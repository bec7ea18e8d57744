"""
=============================================================================
HTTP RESPONSE MODEL
=============================================================================

Holds a response's status, content, content type and negotiated encoding,
and serializes it to HTTP/1.1 bytes.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS (fixed order, each optional) ─────────────────────────┐ │
    │  │    Content-Type: text/plain\r\n        if content_type        │ │
    │  │    Content-Encoding: gzip\r\n          if body was gzipped    │ │
    │  │    Content-Length: 23\r\n              if body non-empty      │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE (separator) ───────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    <content, or gzip(content)>                                  │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The header set and its order are fixed. Test fixtures compare whole
responses byte-for-byte, so nothing else (Date, Server, Connection) is
emitted.

Content-Length counts the bytes actually sent: after gzip, it is the
compressed length.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Union
import gzip

from .compression import encode_body, GZIP
from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.1"
CRLF = b"\r\n"

TEXT_PLAIN = "text/plain"
OCTET_STREAM = "application/octet-stream"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Created once per connection, filled in by a handler, then serialized.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler fills           Negotiation sets         serialize()
        status/content   ─────►  encoding         ─────►  wire bytes
            │                       │                        │
        HTTPResponse(            response.encoding =      b"HTTP/1.1 200 OK\r\n
          status=OK,               ["gzip"]                 Content-Type: ...\r\n
          content=b"abc",                                   Content-Encoding: gzip\r\n
          content_type=                                     Content-Length: 23\r\n
            "text/plain")                                   \r\n<gzip bytes>"

    =========================================================================
    """

    status: HTTPStatus = HTTPStatus.OK      # Status code (enum)
    content: bytes = b""                     # Payload before compression
    content_type: str = ""                   # Omitted from headers when empty
    encoding: List[str] = field(default_factory=list)  # Negotiated encodings

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.1 200 OK"
        """
        return f"{HTTP_VERSION} {self.status.status_text}"

    def set_content(self, content: Union[str, bytes]) -> "HTTPResponse":
        """
        Set the response content.

        Strings are encoded to UTF-8 bytes.

        Returns:
            Self for method chaining
        """
        if isinstance(content, str):
            self.content = content.encode("utf-8")
        else:
            self.content = content
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        """Set the Content-Type."""
        self.content_type = content_type
        return self

    def serialize(self) -> bytes:
        """
        Serialize the response to bytes for sending over the socket.

        Pure function of the current fields: calling it twice on an
        unchanged response gives identical bytes.

        Returns:
            Complete HTTP response as bytes ready for socket.sendall()
        """
        body, chosen_encoding = encode_body(self.content, self.encoding)

        lines = [self.status_line]

        if self.content_type:
            lines.append(f"Content-Type: {self.content_type}")

        if chosen_encoding:
            lines.append(f"Content-Encoding: {chosen_encoding}")

        if body:
            lines.append(f"Content-Length: {len(body)}")

        # Status line and headers each end with CRLF, then one more CRLF
        head = "\r\n".join(lines).encode("utf-8") + CRLF + CRLF
        return head + body

    def to_bytes(self) -> bytes:
        """Alias for serialize()."""
        return self.serialize()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def decoded_body(raw_response: bytes) -> bytes:
    """
    Extract and decode the body of a serialized response.

    Splits the response at the header/body separator and gunzips the body
    when the headers announce "Content-Encoding: gzip". Useful for clients
    and tests that need the original content back.

    Args:
        raw_response: Complete serialized HTTP response.

    Returns:
        The original, uncompressed content.
    """
    head, _, body = raw_response.partition(CRLF + CRLF)
    if f"Content-Encoding: {GZIP}".encode() in head.split(CRLF):
        return gzip.decompress(body)
    return body


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# Quick one-liners for the responses the built-in handlers produce.
#
#     return ok("abc", TEXT_PLAIN)
#     return not_found()
#
# =============================================================================

def ok(content: Union[str, bytes] = b"", content_type: str = "") -> HTTPResponse:
    """Create a 200 OK response."""
    return HTTPResponse(status=HTTPStatus.OK, content_type=content_type).set_content(content)


def created() -> HTTPResponse:
    """Create a 201 Created response with no content."""
    return HTTPResponse(status=HTTPStatus.CREATED)


def bad_request() -> HTTPResponse:
    """Create a 400 Bad Request response."""
    return HTTPResponse(status=HTTPStatus.BAD_REQUEST)


def not_found() -> HTTPResponse:
    """Create a 404 Not Found response."""
    return HTTPResponse(status=HTTPStatus.NOT_FOUND)


def method_not_allowed() -> HTTPResponse:
    """
    Create a 405 Method Not Allowed response.

    No Allow header: the serialized header set is fixed.
    """
    return HTTPResponse(status=HTTPStatus.METHOD_NOT_ALLOWED)


def internal_error() -> HTTPResponse:
    """
    Create a 500 Internal Server Error response.

    The body stays empty; details go to the log, never to the client.
    """
    return HTTPResponse(status=HTTPStatus.INTERNAL_SERVER_ERROR)


def service_unavailable() -> HTTPResponse:
    """Create a 503 Service Unavailable response (worker pool refused)."""
    return HTTPResponse(status=HTTPStatus.SERVICE_UNAVAILABLE)
