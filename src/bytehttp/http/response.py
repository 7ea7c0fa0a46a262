"""
=============================================================================
HTTP RESPONSE SERIALIZER
=============================================================================

Accumulates status, headers, body and negotiated encoding, then turns
them into wire bytes exactly once.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 200 OK\r\n                                         │ │
    │  │    ────┬─── ─┬─ ─┬─                                            │ │
    │  │    Version  Code Phrase                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Content-Type: text/plain\r\n                                │ │
    │  │    Content-Length: 3\r\n                                       │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    abc                                                          │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
HEADER DEFAULTING RULES
=============================================================================

    ┌────────────────────┬───────┬───────────────────────────────────────┐
    │ headers            │ body  │ header section written                │
    ├────────────────────┼───────┼───────────────────────────────────────┤
    │ None               │ None  │ (empty)                               │
    │ None               │ yes   │ Content-Type: text/plain              │
    │                    │       │ Content-Length: <transmitted bytes>   │
    │                    │       │ [Content-Encoding: <enc>]             │
    │ explicit list      │ any   │ the list as given                     │
    │                    │       │ [Content-Encoding: <enc>]             │
    └────────────────────┴───────┴───────────────────────────────────────┘

Explicit headers are assumed complete: nothing is added except
Content-Encoding, and an explicit Content-Length is rewritten to the
encoded size so framing stays correct. Content-Encoding only appears when
there was a body to encode.

=============================================================================
INTERVIEW QUESTIONS ABOUT HTTP RESPONSES
=============================================================================

Q: "How does the client know when the response body ends?"
A: "Content-Length. That is why it is measured on the bytes actually
   transmitted, after gzip, never on the handler's original content."

Q: "What does an empty 200 look like on the wire?"
A: "b'HTTP/1.1 200 OK\\r\\n\\r\\n': status line, no headers, the blank line,
   no body."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from .body import HttpBody
from .encoding import ContentEncoding
from .errors import HTTPError
from .headers import Header
from .protocol import HTTPVersion
from .status_codes import HTTPStatus


DEFAULT_CONTENT_TYPE = "text/plain"


@dataclass(frozen=True)
class StatusLine:
    """
    The first line of a response.

        StatusLine(HTTPStatus.NOT_FOUND).to_line() == "HTTP/1.1 404 Not Found"
    """

    status: HTTPStatus = HTTPStatus.OK
    version: HTTPVersion = HTTPVersion.HTTP_1_1

    def to_line(self) -> str:
        return f"{self.version.value} {int(self.status)} {self.status.phrase}"


@dataclass
class HTTPResponse:
    """
    An HTTP response under construction.

    =========================================================================
    RESPONSE LIFECYCLE
    =========================================================================

        Handler builds          Middleware sets        to_bytes()
        HTTPResponse    ─────►  encoding      ─────►   serializes once
            │                       │                       │
        HTTPResponse(           response.encoding      b"HTTP/1.1 200 OK\\r\\n
          status_line=...,        = GZIP                 Content-Type: ...
          body=HttpBody(...))                            ..."

    `headers` is None until a handler adds one. None and [] mean different
    things: None asks the serializer for default headers, [] means "send no
    headers at all".

    =========================================================================
    """

    status_line: StatusLine = field(default_factory=StatusLine)
    headers: Optional[List[Header]] = None
    body: Optional[HttpBody] = None
    encoding: Optional[ContentEncoding] = None

    @property
    def status(self) -> HTTPStatus:
        return self.status_line.status

    def set_status(self, status: HTTPStatus) -> "HTTPResponse":
        self.status_line = StatusLine(status, self.status_line.version)
        return self

    def add_header(self, name: str, value: str) -> "HTTPResponse":
        """
        Append a header. Existing headers with the same name are kept.

        Returns self for method chaining.
        """
        if self.headers is None:
            self.headers = []
        self.headers.append(Header(name, value))
        return self

    def set_body(self, body: Union[str, bytes, HttpBody]) -> "HTTPResponse":
        """Set the body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            self.body = HttpBody.from_text(body)
        elif isinstance(body, bytes):
            self.body = HttpBody(body)
        else:
            self.body = body
        return self

    def set_encoding(self, encoding: Optional[ContentEncoding]) -> "HTTPResponse":
        self.encoding = encoding
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize the response for socket.sendall().

        =====================================================================
        SERIALIZATION FORMAT
        =====================================================================

            HTTP/1.1 200 OK\\r\\n                ← status line
            Content-Type: text/plain\\r\\n      ← explicit or defaulted
            Content-Length: 23\\r\\n            ← after encoding
            Content-Encoding: gzip\\r\\n        ← only if negotiated
            \\r\\n                              ← empty line
            <body bytes>                       ← encoded form if any

        =====================================================================

        The response itself is not modified; serializing twice yields the
        same bytes.
        """
        body = self.body
        encoding = None
        if body is not None and self.encoding is not None:
            body = body.encoded(self.encoding)
            encoding = self.encoding

        if self.headers is not None:
            headers = list(self.headers)
            if encoding is not None:
                headers = [
                    Header(h.name, str(len(body)))
                    if h.name.lower() == "content-length" else h
                    for h in headers
                ]
        elif body is not None:
            headers = [
                Header("Content-Type", DEFAULT_CONTENT_TYPE),
                Header("Content-Length", str(len(body))),
            ]
        else:
            headers = []

        if encoding is not None:
            headers.append(Header("Content-Encoding", encoding.value))

        head = self.status_line.to_line() + "\r\n"
        head += "".join(header.to_line() for header in headers)
        head += "\r\n"

        payload = body.value() if body is not None else b""
        return head.encode("utf-8") + payload


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header("Content-Type", "application/octet-stream")
            .body(data)
            .build())

    Each method returns `self` except build().
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Optional[List[Header]] = None
        self._body: Optional[HttpBody] = None
        self._encoding: Optional[ContentEncoding] = None

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = status
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        """Add an explicit header. Disables header defaulting."""
        if self._headers is None:
            self._headers = []
        self._headers.append(Header(name, value))
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Set the body. Strings are encoded as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self._body = HttpBody(body)
        return self

    def text(self, text: str) -> "ResponseBuilder":
        """
        Plain text body with no explicit headers, so the serializer writes
        Content-Type: text/plain and the transmitted Content-Length.
        """
        return self.body(text)

    def file(self, content: bytes) -> "ResponseBuilder":
        """Binary download: explicit octet-stream type and length."""
        self._body = HttpBody(content)
        return (self.content_type("application/octet-stream")
                .header("Content-Length", str(len(content))))

    def encoding(self, encoding: Optional[ContentEncoding]) -> "ResponseBuilder":
        self._encoding = encoding
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status_line=StatusLine(self._status),
            headers=self._headers,
            body=self._body,
            encoding=self._encoding,
        )

    def to_bytes(self) -> bytes:
        """Build and serialize in one step."""
        return self.build().to_bytes()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================
#
# One-liners for the responses the routes produce.
#
#     return ok("abc")
#     return not_found()
#
# Error helpers send no body; the status line says it all.
# =============================================================================

def ok(body: Union[str, bytes, None] = None) -> HTTPResponse:
    """200 OK, optionally with a text/plain body."""
    builder = ResponseBuilder().status(HTTPStatus.OK)
    if body is not None:
        builder.body(body)
    return builder.build()


def created() -> HTTPResponse:
    """201 Created, empty."""
    return ResponseBuilder().status(HTTPStatus.CREATED).build()


def bad_request() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.BAD_REQUEST).build()


def forbidden() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.FORBIDDEN).build()


def not_found() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).build()


def method_not_allowed() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.METHOD_NOT_ALLOWED).build()


def internal_error(message: Optional[str] = None) -> HTTPResponse:
    """
    500 Internal Server Error.

    Args:
        message: Sent as a text/plain body when given (I/O failures send
                 the OS error text).
    """
    builder = ResponseBuilder().status(HTTPStatus.INTERNAL_SERVER_ERROR)
    if message:
        builder.body(message)
    return builder.build()


def version_not_supported() -> HTTPResponse:
    return ResponseBuilder().status(HTTPStatus.HTTP_VERSION_NOT_SUPPORTED).build()


def error_response(error: HTTPError) -> HTTPResponse:
    """
    Convert an HTTPError into the response the client should see.

        NotFoundError()        → 404, no body
        IOFailureError(e)      → 500, body = str(e)
        HTTPParseError(...)    → 400 (or its carried status), no body
    """
    builder = ResponseBuilder().status(error.status_code)
    if error.body:
        builder.body(error.body)
    return builder.build()
