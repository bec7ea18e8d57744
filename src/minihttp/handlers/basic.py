"""
Built-in handlers that need nothing but the request: echo, user-agent
reflection and the index page.
"""

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok, TEXT_PLAIN


ECHO_PREFIX = "/echo/"


def echo(request: HTTPRequest) -> HTTPResponse:
    """
    Echo everything after "/echo/" back as text/plain.

    The raw target is used, so a query string is echoed too:

        GET /echo/abc?x=1  →  200 "abc?x=1"
    """
    return ok(request.target[len(ECHO_PREFIX):], TEXT_PLAIN)


def user_agent(request: HTTPRequest) -> HTTPResponse:
    """Reflect the User-Agent header ("" when absent)."""
    return ok(request.user_agent, TEXT_PLAIN)


def index(request: HTTPRequest) -> HTTPResponse:
    """200 OK with no content."""
    return ok()
