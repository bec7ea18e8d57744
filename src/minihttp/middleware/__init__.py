"""
=============================================================================
MIDDLEWARE
=============================================================================

    base.py     → Middleware ABC, MiddlewarePipeline, FunctionMiddleware
    logging.py  → LoggingMiddleware (access log)

=============================================================================
"""

from .base import (
    Middleware,
    MiddlewarePipeline,
    FunctionMiddleware,
    NextHandler,
)
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "FunctionMiddleware",
    "NextHandler",
    "LoggingMiddleware",
    "RequestLog",
]
