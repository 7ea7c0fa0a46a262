"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

One log line per routed request, with timing, on the "bytehttp.access"
logger.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ 127.0.0.1 - - [19/Oct/2026:10:55:36 +0000] "GET /echo/abc" 200 3    │
    │ 0.12ms a1b2c3d4                                                     │
    └─────────────────────────────────────────────────────────────────────┘

    JSON:
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"request_id": "a1b2c3d4", "method": "GET", "target": "/echo/abc",  │
    │  "client_ip": "127.0.0.1", "status_code": 200, "encoding": "gzip",  │
    │  ...}                                                               │
    └─────────────────────────────────────────────────────────────────────┘

The request id is a correlation key for the log only. It is never added
to the response: any explicit header would switch off Content-Type and
Content-Length defaulting in the serializer.

=============================================================================
INTERVIEW QUESTIONS ABOUT LOGGING
=============================================================================

Q: "What should you NOT log?"
A: "Request bodies. /files uploads are arbitrary user data; the access log
   records sizes, never content."

Q: "Why a separate logger name for access logs?"
A: "So they can be routed or silenced on their own:
   logging.getLogger('bytehttp.access').setLevel(logging.WARNING)."

=============================================================================
"""

import time
import json
import uuid
import logging
from typing import Optional
from dataclasses import dataclass

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("bytehttp.access")


@dataclass
class RequestLog:
    """
    Structured access log entry.

    content_length is the handler's body size before any compression;
    encoding records what the serializer will apply.
    """

    request_id: str
    method: str
    target: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    encoding: Optional[str]
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "target": self.target,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "encoding": self.encoding,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache-style line, request id last."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms {self.request_id}'
        )


class LoggingMiddleware(Middleware):
    """
    Access log middleware.

    Add it first so its timing covers the whole chain:

        pipeline.add(LoggingMiddleware(log_format="json"))
        pipeline.add(CompressionMiddleware())
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
    ):
        """
        Args:
            log_format: "text" or "json".
            log_level: Level the access lines are logged at.
        """
        self.log_format = log_format
        self.log_level = log_level

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed: {request.method.value} {request.target} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms) {request_id}"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        log_entry = RequestLog(
            request_id=request_id,
            method=request.method.value,
            target=request.target,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body.content) if response.body is not None else 0,
            encoding=response.encoding.value if response.encoding is not None else None,
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(log_entry.to_dict()))
        else:
            logger.log(self.log_level, log_entry.to_text())

        return response
