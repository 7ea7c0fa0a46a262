"""
=============================================================================
MIDDLEWARE MODULE
=============================================================================

Layers that wrap the router and see every routed request and response.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         MIDDLEWARE STACK                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │     Request  ───────────────────────────────────────►               │
    │                                                                      │
    │     ┌──────────────────────────────────────────────────────┐        │
    │     │  LoggingMiddleware       timing + access log          │        │
    │     │  ┌────────────────────────────────────────────────┐  │        │
    │     │  │  CompressionMiddleware   Accept-Encoding        │  │        │
    │     │  │  ┌──────────────────────────────────────────┐  │  │        │
    │     │  │  │            router.handle                 │  │  │        │
    │     │  │  └──────────────────────────────────────────┘  │  │        │
    │     │  └────────────────────────────────────────────────┘  │        │
    │     └──────────────────────────────────────────────────────┘        │
    │                                                                      │
    │     ◄─────────────────────────────────────────────── Response       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Requests that fail to parse never reach the pipeline; the server answers
them directly.

=============================================================================
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware, RequestLog
from .compression import CompressionMiddleware

__all__ = [
    # Base classes
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",

    # Built-in middleware
    "LoggingMiddleware",
    "RequestLog",
    "CompressionMiddleware",
]
