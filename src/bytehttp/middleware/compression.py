"""
=============================================================================
COMPRESSION MIDDLEWARE
=============================================================================

Picks the response's Content-Encoding from the request's Accept-Encoding.
The middleware only records the choice on the response; the serializer
compresses the body and measures Content-Length afterwards.

=============================================================================
CONTENT NEGOTIATION
=============================================================================

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │ GET /echo/abc HTTP/1.1                                        │
    │ Accept-Encoding: invalid-encoding, gzip, br                   │
    │                  │                 │     │                    │
    │                  │                 │     └── known, not       │
    │                  │                 │         supported        │
    │                  │                 └── first known AND        │
    │                  │                     supported → chosen     │
    │                  └── unknown, skipped                         │
    └───────────────────────────────────────────────────────────────┘

    Response:
    ┌───────────────────────────────────────────────────────────────┐
    │ HTTP/1.1 200 OK                                               │
    │ Content-Type: text/plain                                      │
    │ Content-Length: 23      (compressed size)                     │
    │ Content-Encoding: gzip                                        │
    │                                                               │
    │ [gzip compressed body]                                        │
    └───────────────────────────────────────────────────────────────┘

First match in the client's order wins. q-values are not weighed. No
match is not an error: the body goes out uncompressed with no
Content-Encoding header.

=============================================================================
INTERVIEW QUESTIONS ABOUT COMPRESSION
=============================================================================

Q: "Why does a 2-byte echo come back larger when gzipped?"
A: "gzip has ~20 bytes of header and trailer. The server compresses
   whenever the client asks for it rather than second-guessing the size;
   Content-Length always reports what was actually sent."

Q: "Why not compress in the handler?"
A: "Compression is a transport concern shared by every route. Keeping it
   out of handlers keeps them pure functions of the request."

=============================================================================
"""

import logging

from .base import Middleware, NextHandler
from ..http.encoding import negotiate_encoding
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)


class CompressionMiddleware(Middleware):
    """
    Content negotiation middleware.

    1. Call the next handler
    2. Negotiate against Accept-Encoding (case-insensitive header lookup)
    3. Set response.encoding unless the handler already chose one

    Add it after LoggingMiddleware so the access log sees the choice:

        pipeline.add(LoggingMiddleware())
        pipeline.add(CompressionMiddleware())
    """

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        response = next(request)

        if response.encoding is not None:
            return response

        accept_encoding = request.get_header("Accept-Encoding") or None
        encoding = negotiate_encoding(accept_encoding)
        if encoding is not None:
            logger.debug(f"Negotiated {encoding.value} for {request.target}")
            response.set_encoding(encoding)

        return response
