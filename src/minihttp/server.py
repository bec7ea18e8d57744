"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the listener, the dispatcher, the parser, the middleware pipeline and
the router together. Each connection is one request and one response.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        └────────┬────────┘                          │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────────┐  ┌──────────────┐      │
    │    │SocketServer  │    │ConnectionDispatch│  │    Router    │      │
    │    │ (listener)   │    │ (thread/pool)    │  │ + handlers   │      │
    │    └──────────────┘    └──────────────────┘  └──────────────┘      │
    │                                                                      │
    │           ┌─────────────────────────────────────────┐               │
    │           │   Middleware: Logging → route/404        │               │
    │           └─────────────────────────────────────────┘               │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONNECTION TASK
=============================================================================

    READING      conn.read_request()        ─── None ──────────► 400
       │
    PARSED       parser.parse(raw)          ─── malformed ─────► 400
       │
    ROUTED       pipeline(router.dispatch)  ─── NOT_FOUND ─────► 404
       │                                    ─── exception ─────► 500
       │
    SERIALIZED   encoding = negotiate(headers)   (every response)
                 conn.send_response(response.serialize())
       │
    CLOSED       `with conn:` exit, exactly once

Nothing is retried and no error escapes the task. The only state shared
between tasks is the frozen ServerConfig.

=============================================================================
"""

import logging
from typing import Optional, Callable, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, ConnectionDispatcher
from .handlers import register_builtin_routes
from .http import (
    HTTPRequest, RequestParser,
    HTTPResponse, bad_request, not_found, internal_error, service_unavailable,
    Router, negotiate_encodings,
)
from .middleware import MiddlewarePipeline, Middleware, LoggingMiddleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Minimal HTTP/1.1 server.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(directory="/tmp/data"))
        server.run()                    # blocks until SIGINT/SIGTERM

    In-process, without sockets:

        response = server.respond(b"GET /echo/abc HTTP/1.1\\r\\n\\r\\n")
        response.serialize()
        # b"HTTP/1.1 200 OK\\r\\nContent-Type: text/plain\\r\\n..."

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, access_log: bool = True):
        """
        Initialize the HTTP server.

        Args:
            config: Server configuration. Defaults are used if not provided.
            access_log: Install the access-log middleware.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._dispatcher = ConnectionDispatcher(
            self._process_connection,
            max_workers=self.config.max_workers,
            on_rejected=self._reject_connection,
        )

        # The request line must end within the single read
        self._parser = RequestParser(max_line_bytes=self.config.buffer_size)

        self._router = register_builtin_routes(Router(), self.config)
        self._middleware = MiddlewarePipeline()
        if access_log:
            self._middleware.add(LoggingMiddleware(log_format=self.config.log_format))

        # middleware.wrap(self._route), built on first use
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    # =========================================================================
    # CONFIGURATION METHODS
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """
        Add middleware to the server. Executed in the order added.

        Returns:
            Self for method chaining.
        """
        self._middleware.add(middleware)
        self._handler = None
        return self

    @property
    def router(self) -> Router:
        """Get the router (built-in routes already registered)."""
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Get the listening address (the bound one once running)."""
        return self._socket_server.address

    @property
    def handler(self) -> Callable[[HTTPRequest], HTTPResponse]:
        """The request handler: middleware wrapped around routing."""
        if self._handler is None:
            self._handler = self._middleware.wrap(self._route)
        return self._handler

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Blocks until shutdown() is called or SIGINT/SIGTERM arrives.

        Raises:
            OSError: If the port cannot be bound.
        """
        self._setup_logging()
        logger.info(f"Serving files from {self.config.directory or '.'!r}")

        try:
            self._socket_server.start(self._dispatcher.dispatch)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Stop accepting connections. Safe to call from any thread."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until the listener is accepting. Returns False on timeout."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("minihttp").setLevel(level)

    def _shutdown(self):
        """Stop the dispatcher; in-flight connections finish on their own."""
        self._dispatcher.shutdown(wait=True)
        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _route(self, request: HTTPRequest) -> HTTPResponse:
        """Innermost handler: dispatch, turning NOT_FOUND into 404."""
        result = self._router.dispatch(request)
        if not result.found:
            return not_found()
        return result.response

    def respond(self, raw: Optional[bytes], conn: Optional[Connection] = None) -> HTTPResponse:
        """
        Build the response for one raw request.

        Args:
            raw: The bytes read from the client, or None if the read failed.
            conn: The connection whose state is advanced, if any.

        Returns:
            The response, with its encoding already negotiated.
        """
        request = HTTPRequest()

        if raw is None:
            response = bad_request()
        else:
            request = self._parser.parse(raw)
            if request.is_malformed:
                logger.debug(f"Malformed request: {raw[:80]!r}")
                response = bad_request()
            else:
                if conn is not None:
                    conn.state = ConnectionState.PARSED
                try:
                    response = self.handler(request)
                except Exception:
                    logger.exception(f"Error handling {request.method} {request.target}")
                    response = internal_error()
                else:
                    if conn is not None:
                        conn.state = ConnectionState.ROUTED

        response.encoding = negotiate_encodings(request.headers)
        return response

    def _process_connection(self, conn: Connection):
        """
        Handle one connection from read to close (runs in a worker thread).

        Args:
            conn: The accepted client connection.
        """
        with conn:
            raw = conn.read_request()
            response = self.respond(raw, conn)

            try:
                data = response.serialize()
            except Exception:
                logger.exception(f"[{conn.id}] Failed to serialize response")
                data = internal_error().serialize()

            conn.state = ConnectionState.SERIALIZED
            conn.send_response(data)

    def _reject_connection(self, conn: Connection):
        """Answer 503 to a connection that could not be scheduled."""
        with conn:
            conn.send_response(service_unavailable().serialize())

