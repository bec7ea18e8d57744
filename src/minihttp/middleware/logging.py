"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

Writes one line per request to the "minihttp.access" logger:

    text:  "GET /echo/abc" 200 3 0.12ms ua="curl/8.4.0"
    json:  {"method": "GET", "target": "/echo/abc", "status_code": 200, ...}

The logger is separate from the module loggers so it can be routed or
silenced on its own:

    logging.getLogger("minihttp.access").setLevel(logging.WARNING)

=============================================================================
"""

import time
import json
import logging
from dataclasses import dataclass, asdict

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("minihttp.access")


@dataclass
class RequestLog:
    """
    Structured access log entry.

    content_length is the size of the content before compression; the
    encoding is negotiated after the pipeline has run.
    """

    method: str
    target: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Format as a single human-readable line."""
        return (
            f'"{self.method} {self.target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms '
            f'ua="{self.user_agent}"'
        )


class LoggingMiddleware(Middleware):
    """
    Request logging middleware. Add it FIRST so it sees every response,
    including ones short-circuited by later middleware.

        pipeline.add(LoggingMiddleware(log_format="json"))
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
    ):
        """
        Initialize logging middleware.

        Args:
            log_format: "text" (one readable line) or "json".
            log_level: Level the access lines are logged at.
        """
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Time the request, then log method, target and status."""
        start_time = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method} {request.target} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        entry = RequestLog(
            method=request.method,
            target=request.target,
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.content),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return response
