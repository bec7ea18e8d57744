"""
=============================================================================
URL ROUTER
=============================================================================

Maps a parsed request onto a handler using an ordered table of prefix and
exact-match patterns.

=============================================================================
ROUTE TABLE
=============================================================================

Routes are tried in registration order; the FIRST match wins:

    ┌────────────────┬──────────┬──────────┬────────────────────────────┐
    │ Pattern        │ Kind     │ Method   │ Handler                    │
    ├────────────────┼──────────┼──────────┼────────────────────────────┤
    │ /echo/         │ prefix   │ any      │ echo                       │
    │ /files/        │ prefix   │ GET      │ read file                  │
    │ /files/        │ prefix   │ POST     │ write file                 │
    │ /user-agent    │ prefix   │ any      │ user-agent reflection      │
    │ /              │ exact    │ any      │ index                      │
    └────────────────┴──────────┴──────────┴────────────────────────────┘

Matching works on the RAW target. "/echo/a?b" matches "/echo/" and the
query string is part of what gets echoed.

=============================================================================
TAGGED OUTCOME, NOT EXCEPTIONS
=============================================================================

dispatch() never raises for an unknown route. It returns a RouteResult:

    RouteResult(response=<HTTPResponse>)   → route found
    NOT_FOUND                              → nothing matched

The connection task checks result.found and turns NOT_FOUND into
"404 Not Found".

If some pattern matched the target but none of its routes accepts the
method (PUT /files/x), the router answers 405 Method Not Allowed itself.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
import logging

from .request import HTTPRequest
from .response import HTTPResponse, method_not_allowed


logger = logging.getLogger(__name__)


# Handler: A function that takes a request and returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


class MatchKind(Enum):
    """How a route pattern is compared against the request target."""
    PREFIX = "prefix"   # target.startswith(pattern)
    EXACT = "exact"     # target == pattern


@dataclass(frozen=True)
class Route:
    """
    A registered route: a pattern bound to a handler.

        Route(
            pattern="/files/",
            handler=files.read,
            method="GET",           # None = any method
            kind=MatchKind.PREFIX,
        )
    """

    pattern: str
    handler: Handler
    method: Optional[str] = None
    kind: MatchKind = MatchKind.PREFIX

    def matches_target(self, target: str) -> bool:
        """Check the pattern against a raw request target."""
        if self.kind is MatchKind.EXACT:
            return target == self.pattern
        return target.startswith(self.pattern)

    def accepts(self, method: str) -> bool:
        """Check the method constraint (None accepts everything)."""
        return self.method is None or self.method == method


@dataclass(frozen=True)
class RouteResult:
    """
    Outcome of routing a request.

    A result with a response means a route handled the request. The
    NOT_FOUND sentinel (no response) means nothing matched.
    """

    response: Optional[HTTPResponse] = None

    @property
    def found(self) -> bool:
        """True if a route produced a response."""
        return self.response is not None


NOT_FOUND = RouteResult()


class Router:
    """
    Ordered prefix/exact router.

    ==========================================================================
    DECORATOR-BASED API
    ==========================================================================

        router = Router()

        @router.route("/echo/")
        def echo(request):
            return ok(request.target[len("/echo/"):], TEXT_PLAIN)

        @router.get("/files/")
        def read_file(request):
            ...

        @router.route("/", exact=True)
        def index(request):
            return ok()

    ==========================================================================
    """

    def __init__(self):
        """Initialize an empty route table."""
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        pattern: str,
        handler: Handler,
        method: Optional[str] = None,
        exact: bool = False,
    ) -> Route:
        """
        Register a route.

        Args:
            pattern: Target prefix, or the full target when exact=True.
            handler: Function that takes a request and returns a response.
            method: Required method (None for any method).
            exact: Match the whole target instead of a prefix.

        Returns:
            The registered Route object.
        """
        route = Route(
            pattern=pattern,
            handler=handler,
            method=method.upper() if method else None,
            kind=MatchKind.EXACT if exact else MatchKind.PREFIX,
        )
        self._routes.append(route)
        return route

    def route(self, pattern: str, method: Optional[str] = None, exact: bool = False):
        """
        Decorator to register a route.

        Example:
            @router.route("/user-agent")
            def user_agent(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(pattern, handler, method=method, exact=exact)
            return handler
        return decorator

    def get(self, pattern: str, exact: bool = False):
        """Register a GET route."""
        return self.route(pattern, method="GET", exact=exact)

    def post(self, pattern: str, exact: bool = False):
        """Register a POST route."""
        return self.route(pattern, method="POST", exact=exact)

    # =========================================================================
    # MATCHING AND DISPATCH
    # =========================================================================

    def match(self, method: str, target: str) -> Optional[Route]:
        """
        Find the first route accepting this method and target.

        Returns:
            The matching Route, or None.
        """
        for route in self._routes:
            if route.matches_target(target) and route.accepts(method):
                return route
        return None

    def get_allowed_methods(self, target: str) -> List[str]:
        """
        Get the methods registered for patterns that match this target.

        Returns an empty list if any matching route accepts every method,
        or if nothing matches at all.
        """
        methods = []
        for route in self._routes:
            if route.matches_target(target):
                if route.method is None:
                    return []
                if route.method not in methods:
                    methods.append(route.method)
        return methods

    def dispatch(self, request: HTTPRequest) -> RouteResult:
        """
        Route a request to its handler.

        Handler exceptions propagate; the connection task maps them to 500.

        Args:
            request: The parsed request.

        Returns:
            RouteResult with the handler's response, a 405 response, or
            NOT_FOUND.
        """
        route = self.match(request.method, request.target)
        if route is not None:
            return RouteResult(response=route.handler(request))

        allowed = self.get_allowed_methods(request.target)
        if allowed:
            logger.debug(f"{request.method} not allowed on {request.target} (allowed: {allowed})")
            return RouteResult(response=method_not_allowed())

        return NOT_FOUND

    @property
    def routes(self) -> List[Route]:
        """Get a copy of the registered routes, in match order."""
        return list(self._routes)
