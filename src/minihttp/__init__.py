"""
=============================================================================
MINIHTTP
=============================================================================

A minimal HTTP/1.1 server on raw sockets.

    python -m minihttp --directory /tmp/data

=============================================================================
ROUTES
=============================================================================

    *    /echo/{text}    200 text/plain, the text back
    *    /user-agent     200 text/plain, the User-Agent header
    GET  /files/{name}   200 application/octet-stream, or 404
    POST /files/{name}   201, body written to the file, or 404
    *    /               200, empty

Anything else is 404. Responses are gzip-compressed when the client sends
"Accept-Encoding: gzip". Every connection carries exactly one request and
is closed after the response.

=============================================================================
PACKAGE LAYOUT
=============================================================================

    minihttp/
    ├── server.py       HTTPServer: the per-connection task
    ├── config.py       ServerConfig
    ├── core/           listener, connection, dispatcher
    ├── http/           parsing, responses, negotiation, gzip, routing
    ├── handlers/       echo, user-agent, index, files
    └── middleware/     pipeline + access log

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
