"""
=============================================================================
REQUEST MIDDLEWARE
=============================================================================

A middleware is a callable taking (request, next). It may inspect the
request, call next(request) to hand it on, look at the response coming
back, or answer on its own without calling next at all.

    respond(raw) ─► parse ─► [access log] ─► [user layers] ─► router
                                  ▲                              │
                                  └──────── HTTPResponse ◄───────┘

Only parsed requests enter the chain. A 400 for a malformed request is
produced before any middleware runs, so it is never access-logged.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


# Whatever sits further down the chain (another layer or the router)
NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    One layer of the request chain.

    Subclasses implement __call__; returning without calling next() answers
    the request at this layer.
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Handle the request, usually by delegating to next()."""

    @property
    def name(self) -> str:
        return type(self).__name__


class MiddlewarePipeline:
    """
    Ordered list of layers placed around the routing function.

        pipeline = MiddlewarePipeline()
        pipeline.add(LoggingMiddleware())
        handler = pipeline.wrap(server._route)

    The layer added first sees the request first and the response last.
    """

    def __init__(self):
        self._layers: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Append a layer inside the ones already added."""
        self._layers.append(middleware)
        logger.debug(f"Middleware registered: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around handler.

        The list is folded from the innermost layer outwards, so the result
        of wrapping [A, B] around route is A(request, B(request, route)).
        """
        chained = handler
        for layer in reversed(self._layers):
            chained = _bind(layer, chained)
        return chained


def _bind(layer: Middleware, next_handler: NextHandler) -> NextHandler:
    """Fix next_handler as the continuation of layer."""
    def call(request: HTTPRequest) -> HTTPResponse:
        return layer(request, next_handler)
    return call


class FunctionMiddleware(Middleware):
    """
    Adapts a plain (request, next) function to the Middleware interface.

        def deny_posts(request, next):
            if request.method == "POST":
                return method_not_allowed()
            return next(request)

        server.use(FunctionMiddleware(deny_posts))
    """

    def __init__(
        self,
        func: Callable[[HTTPRequest, NextHandler], HTTPResponse],
        name: Optional[str] = None,
    ):
        self._func = func
        self._label = name or func.__name__

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        return self._func(request, next)

    @property
    def name(self) -> str:
        return self._label
