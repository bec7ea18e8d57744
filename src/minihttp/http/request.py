"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of a single socket read into an HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────┐
    │  REQUEST LINE                                                    │
    │  ─────────────────────────────────────────────────────────────  │
    │  GET /echo/abc HTTP/1.1\r\n                                     │
    │  └─┘ └───────┘ └──────┘                                         │
    │  Method Target  Version (ignored)                                │
    ├─────────────────────────────────────────────────────────────────┤
    │  HEADERS                                                         │
    │  ─────────────────────────────────────────────────────────────  │
    │  Host: localhost:4221\r\n                                       │
    │  User-Agent: curl/8.4.0\r\n                                     │
    │  Accept-Encoding: gzip\r\n                                      │
    │  \r\n                           ← Empty line = end of headers   │
    ├─────────────────────────────────────────────────────────────────┤
    │  BODY (optional)                                                 │
    │  ─────────────────────────────────────────────────────────────  │
    │  hello                                                           │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
A LENIENT PARSER
=============================================================================

This parser NEVER raises. Whatever arrives, it returns a best-effort
HTTPRequest, and the connection task decides what to do with it:

    Input                                    Result
    ─────                                    ──────
    b""                                      all fields empty
    b"GET\r\n\r\n"                           method="" target=""  (malformed)
    b"GET /x HTTP/1.1"  (no CRLF)            method="" target=""  (malformed)
    b"GET /x HTTP/1.1\r\nBad header\r\n\r\n" header line skipped

Rules worth knowing:

    1. The target is NOT URL-decoded and the query string is NOT split off.
       "/echo/a%20b?x=1" is routed exactly as it arrived.

    2. Headers are split on the exact substring ": ". "Host:x" is skipped.

    3. Header names are matched CASE-SENSITIVELY and the last duplicate wins.
       "user-agent: x" does NOT satisfy a lookup for "User-Agent".

    4. The body is everything after the first \r\n\r\n, verbatim. There is
       no Content-Length truncation and no reassembly across reads.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict
import logging


logger = logging.getLogger(__name__)

# A request line must be terminated within the first read buffer.
DEFAULT_MAX_LINE_BYTES = 1024

HEADER_SEPARATOR = b"\r\n\r\n"
LINE_SEPARATOR = "\r\n"
FIELD_SEPARATOR = ": "


@dataclass(frozen=True)
class HTTPRequest:
    """
    Represents a parsed HTTP request.

    Frozen: a request is created once per connection and never changes
    after parsing.

    Attributes:
        method:  Request method token ("GET", "POST", or anything else,
                 passed through as-is). Empty if the request line was
                 malformed.
        target:  Raw request target ("/echo/abc?x=1"). Not decoded.
                 Empty if the request line was malformed.
        headers: Header name → value. Case-sensitive keys, last one wins.
        body:    Raw body bytes, b"" when absent.
    """

    method: str = ""
    target: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def is_malformed(self) -> bool:
        """True when the request line could not be split into method and target."""
        return not self.method or not self.target

    @property
    def user_agent(self) -> str:
        """Get the User-Agent header value ("" if absent)."""
        return self.headers.get("User-Agent", "")

    def get_header(self, name: str, default: str = "") -> str:
        """
        Get a header value by its exact name.

        Args:
            name: Header name, matched case-sensitively.
            default: Value returned when the header is missing.

        Returns:
            Header value or default.
        """
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

    ==========================================================================
    PARSING ALGORITHM
    ==========================================================================

        Raw bytes
            │
            ├──► split on first \r\n\r\n ──► header block │ body block
            │
            ├──► header block split on \r\n
            │        │
            │        ├── line 0: request line ──► "METHOD TARGET ..."
            │        │
            │        └── lines 1..n: "Name: Value" ──► headers dict
            │
            └──► body block ──► body (verbatim)

    ==========================================================================
    """

    def __init__(self, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES):
        """
        Initialize the request parser.

        Args:
            max_line_bytes: The request line's terminating \r\n must appear
                            within this many leading bytes. Defaults to the
                            size of the single read buffer.
        """
        self.max_line_bytes = max_line_bytes

    def parse(self, data: bytes) -> HTTPRequest:
        """
        Parse raw HTTP request data into an HTTPRequest object.

        Args:
            data: Raw bytes from one socket read.

        Returns:
            Parsed HTTPRequest. Never raises; malformed input yields a
            request with empty method and target.
        """
        if not data:
            return HTTPRequest()

        # ─────────────────────────────────────────────────────────────────
        # STEP 1: Separate headers from body
        # ─────────────────────────────────────────────────────────────────
        header_end = data.find(HEADER_SEPARATOR)
        if header_end == -1:
            header_block, body = data, b""
        else:
            header_block = data[:header_end]
            body = data[header_end + len(HEADER_SEPARATOR):]

        lines = header_block.decode("utf-8", errors="replace").split(LINE_SEPARATOR)

        # ─────────────────────────────────────────────────────────────────
        # STEP 2: Request line
        # ─────────────────────────────────────────────────────────────────
        # An unterminated request line (no \r\n within the read buffer)
        # is malformed even if it looks like "GET / HTTP/1.1".
        if data.find(b"\r\n", 0, self.max_line_bytes) == -1:
            logger.debug("Malformed request: no line ending found")
            method, target = "", ""
        else:
            method, target = self._parse_request_line(lines[0])

        # ─────────────────────────────────────────────────────────────────
        # STEP 3: Headers
        # ─────────────────────────────────────────────────────────────────
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(method=method, target=target, headers=headers, body=body)

    def _parse_request_line(self, line: str) -> tuple[str, str]:
        """
        Split the request line on single spaces.

        Token 0 is the method, token 1 the target. Anything after (the
        HTTP version) is ignored.

        Args:
            line: The request line, e.g. "GET /echo/abc HTTP/1.1".

        Returns:
            (method, target), or ("", "") when fewer than two tokens exist.
        """
        tokens = line.split(" ")
        # "GET  /x" yields an empty target token and is rejected here (400).
        # Older servers routed the empty target instead and answered 404.
        if len(tokens) < 2 or not tokens[0] or not tokens[1]:
            logger.debug(f"Malformed request line: {line!r}")
            return "", ""
        return tokens[0], tokens[1]

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse header lines into a dictionary.

        Lines without ": " are skipped. Names keep their original case.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                continue

            name, sep, value = line.partition(FIELD_SEPARATOR)
            if not sep:
                continue  # Lenient: skip malformed header lines

            headers[name] = value

        return headers


def parse_request(data: bytes, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> HTTPRequest:
    """
    Convenience function to parse an HTTP request.

    Args:
        data: Raw HTTP request bytes.
        max_line_bytes: Window in which the request line must end.

    Returns:
        Parsed HTTPRequest object.
    """
    return RequestParser(max_line_bytes=max_line_bytes).parse(data)
