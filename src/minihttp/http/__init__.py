"""
=============================================================================
HTTP PROTOCOL
=============================================================================

    request.py       → HTTPRequest, RequestParser (bytes → request)
    response.py      → HTTPResponse (response → bytes) + helpers
    negotiation.py   → Accept-Encoding negotiation
    compression.py   → gzip codec (fails open)
    router.py        → Router, RouteResult, NOT_FOUND
    status_codes.py  → HTTPStatus

=============================================================================
"""

from .status_codes import HTTPStatus
from .request import HTTPRequest, RequestParser, parse_request
from .response import (
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
from .negotiation import negotiate_encodings, SUPPORTED_ENCODINGS
from .compression import gzip_compress, encode_body
from .router import Router, Route, RouteResult, NOT_FOUND

__all__ = [
    "HTTPStatus",
    "HTTPRequest",
    "RequestParser",
    "parse_request",
    "HTTPResponse",
    "TEXT_PLAIN",
    "OCTET_STREAM",
    "decoded_body",
    "ok",
    "created",
    "bad_request",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "service_unavailable",
    "negotiate_encodings",
    "SUPPORTED_ENCODINGS",
    "gzip_compress",
    "encode_body",
    "Router",
    "Route",
    "RouteResult",
    "NOT_FOUND",
]
