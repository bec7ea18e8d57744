"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server can put on the wire, with their reason phrases.

=============================================================================
WHICH CODES, AND WHY ONLY THESE?
=============================================================================

The server only has a handful of outcomes, so the enum stays small:

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  2xx   │ 200 OK            - echo, user-agent, file read, "/"      │
    │        │ 201 Created       - file written via POST /files/...      │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  4xx   │ 400 Bad Request   - read failed / request line malformed  │
    │        │ 404 Not Found     - unknown route / file cannot be opened │
    │        │ 405 Method Not Allowed - /files/ with neither GET nor POST│
    ├────────┼───────────────────────────────────────────────────────────┤
    │  5xx   │ 500 Internal Error    - anything unexpected               │
    │        │ 503 Service Unavailable - bounded worker pool refused     │
    └────────┴───────────────────────────────────────────────────────────┘

On the wire a status is rendered as "NNN Reason":

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── phrase
              └───────── code

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes compare as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.status_text
        '404 Not Found'
    """

    OK = 200
    CREATED = 201

    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405

    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """Get the reason phrase, e.g. "Not Found"."""
        return _STATUS_PHRASES[self]

    @property
    def status_text(self) -> str:
        """
        Get the "NNN Reason" form used in the status line.

        Example: HTTPStatus.CREATED.status_text == "201 Created"
        """
        return f"{int(self)} {self.phrase}"

    @property
    def is_success(self) -> bool:
        """Check if this is a 2xx status."""
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        """Check if this is a 4xx or 5xx status."""
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}
