"""
=============================================================================
HTTP PROTOCOL CORE
=============================================================================

Turns raw request bytes into structured requests, routes them, and turns
responses back into bytes. Nothing in this package touches a socket.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP Request-Response Cycle                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   b"GET /echo/hi HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"         │
    │        │                                                             │
    │        ▼  RequestParser.parse()               (request.py)          │
    │   HTTPRequest(RequestLine(GET, "/echo/hi", HTTP/1.1), [Header...])  │
    │        │                                                             │
    │        ▼  Router.handle()                     (router.py)           │
    │   HTTPResponse(StatusLine(200), body=HttpBody(b"hi"))               │
    │        │                                                             │
    │        ▼  negotiate_encoding() → GZIP         (encoding.py)         │
    │        │                                                             │
    │        ▼  HTTPResponse.to_bytes()             (response.py)         │
    │   b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n..."             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MODULE COMPONENTS
=============================================================================

    status_codes.py   HTTPStatus: closed set of codes and reason phrases
    protocol.py       HTTPMethod, HTTPVersion: request-line tokens
    headers.py        Header: ordered name/value pairs
    encoding.py       ContentEncoding, negotiate_encoding(), encode()
    body.py           HttpBody: content plus encoded form
    errors.py         HTTPError taxonomy (400/403/404/405/500/505)
    request.py        RequestLine, HTTPRequest, RequestParser
    response.py       StatusLine, HTTPResponse, ResponseBuilder
    router.py         Router: ordered (predicate, handler) table

=============================================================================
"""

from .body import HttpBody
from .encoding import ContentEncoding, negotiate_encoding, encode
from .errors import (
    HTTPError,
    HTTPParseError,
    ParseErrorKind,
    ForbiddenError,
    NotFoundError,
    MethodNotAllowedError,
    UnsupportedVersionError,
    IOFailureError,
)
from .headers import Header
from .protocol import HTTPMethod, HTTPVersion
from .request import HTTPRequest, RequestLine, RequestParser, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    StatusLine,
    ok,
    created,
    bad_request,
    forbidden,
    not_found,
    method_not_allowed,
    internal_error,
    version_not_supported,
    error_response,
)
from .router import Router, Route, exact, prefix
from .status_codes import HTTPStatus

__all__ = [
    # Wire types
    "HTTPMethod",
    "HTTPVersion",
    "HTTPStatus",
    "Header",
    "HttpBody",
    "ContentEncoding",

    # Request parsing
    "HTTPRequest",
    "RequestLine",
    "RequestParser",
    "parse_request",

    # Response building
    "HTTPResponse",
    "StatusLine",
    "ResponseBuilder",
    "ok",
    "created",
    "bad_request",
    "forbidden",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "version_not_supported",
    "error_response",

    # Content negotiation
    "negotiate_encoding",
    "encode",

    # Errors
    "HTTPError",
    "HTTPParseError",
    "ParseErrorKind",
    "ForbiddenError",
    "NotFoundError",
    "MethodNotAllowedError",
    "UnsupportedVersionError",
    "IOFailureError",

    # Routing
    "Router",
    "Route",
    "exact",
    "prefix",
]
