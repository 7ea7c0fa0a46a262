"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Parses the raw bytes of a single read into a structured HTTPRequest.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ REQUEST LINE ─────────────────────────────────────────────────┐ │
    │  │                                                                 │ │
    │  │    POST /files/notes.txt HTTP/1.1\r\n                           │ │
    │  │    ─┬──  ───────┬─────── ────┬───                               │ │
    │  │     │           │            │                                  │ │
    │  │   Method     Target        Version                              │ │
    │  │  (HTTPMethod) (raw, not   (HTTPVersion)                         │ │
    │  │               decoded)                                          │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ HEADERS ──────────────────────────────────────────────────────┐ │
    │  │    Host: localhost:4221\r\n                                     │ │
    │  │    User-Agent: curl/8.4.0\r\n                                   │ │
    │  │    Content-Length: 5\r\n                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EMPTY LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY (optional) ──────────────────────────────────────────────┐ │
    │  │    hello                                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT THE PARSER DOES AND DOES NOT DO
=============================================================================

DOES:
    - Split request line on single spaces into exactly three tokens
    - Split each header on its first ": " (no other separator accepted)
    - Stop reading headers at the first empty line
    - Keep every byte after the blank line as the body, CRLFs included
    - Keep headers in arrival order, duplicates and all

DOES NOT:
    - URL-decode or split the target (the router sees it verbatim)
    - Trust Content-Length to trim or wait for the body: the connection
      performs one fixed-size read and whatever arrived is the request
    - Fold obsolete continuation lines

Anything malformed raises HTTPParseError. Nothing in here can crash the
connection handler.

=============================================================================
INTERVIEW QUESTIONS ABOUT HTTP PARSING
=============================================================================

Q: "How do you know when the HTTP headers end?"
A: "At the first \\r\\n\\r\\n. Everything before it is decoded as text and
   split into lines; everything after it is body bytes and is never
   decoded."

Q: "Why is the body kept as bytes?"
A: "POST /files writes it to disk. Decoding and re-encoding would corrupt
   binary uploads, and dropping the CRLFs between lines would corrupt
   text ones."

Q: "What happens with 'GET /' (two tokens)?"
A: "HTTPParseError(MALFORMED_REQUEST_LINE). The caller answers 400. A
   parser that indexes tokens blindly would raise IndexError instead and
   take the connection down with a 500 or worse."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .body import HttpBody
from .errors import HTTPParseError, ParseErrorKind
from .headers import Header, find_header, get_header
from .protocol import HTTPMethod, HTTPVersion


HEADER_TERMINATOR = b"\r\n\r\n"
DEFAULT_MAX_REQUEST_SIZE = 10 * 1024 * 1024


@dataclass(frozen=True)
class RequestLine:
    """
    The first line of a request.

        RequestLine(HTTPMethod.GET, "/echo/abc", HTTPVersion.HTTP_1_1)
        .to_line() == "GET /echo/abc HTTP/1.1"
    """

    method: HTTPMethod
    target: str
    version: HTTPVersion = HTTPVersion.HTTP_1_1

    def to_line(self) -> str:
        """Wire form, without the trailing CRLF."""
        return f"{self.method.value} {self.target} {self.version.value}"


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    REQUEST LIFECYCLE
    =========================================================================

        Raw bytes            HTTPRequest                  Handler
        from one read ──parse──► dataclass  ──route──►  function
           │                        │                       │
        b"GET /echo/hi..."    HTTPRequest(              def echo(
                                request_line=...,         request):
                                headers=[Header...],        ...
                                body=None)

    Owned by the handling of exactly one connection and discarded once the
    response has been written.

    =========================================================================
    """

    request_line: RequestLine
    headers: List[Header] = field(default_factory=list)
    body: Optional[HttpBody] = None

    # Metadata
    client_address: Tuple[str, int] = ("", 0)
    raw: bytes = field(default=b"", repr=False)

    @property
    def method(self) -> HTTPMethod:
        return self.request_line.method

    @property
    def target(self) -> str:
        return self.request_line.target

    @property
    def version(self) -> HTTPVersion:
        return self.request_line.version

    @property
    def content(self) -> bytes:
        """Body bytes, or b"" when the request had none."""
        return self.body.content if self.body is not None else b""

    @property
    def user_agent(self) -> Optional[str]:
        """Value of the exact-case "User-Agent" header."""
        return self.header("User-Agent")

    def header(self, name: str) -> Optional[str]:
        """
        Exact-case header lookup.

        Returns the first matching header's value, or None.
        """
        found = find_header(self.headers, name)
        return found.value if found is not None else None

    def get_header(self, name: str, default: str = "") -> str:
        """
        Case-insensitive header lookup.

        Example:
            request.get_header("accept-encoding")  # matches "Accept-Encoding"
        """
        found = get_header(self.headers, name)
        return found.value if found is not None else default


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

    ==========================================================================
    PARSER ARCHITECTURE
    ==========================================================================

        Raw Request Bytes
              │
              ▼
        ┌───────────────────────────────────────────────────────────────────┐
        │  1. Size / emptiness check        → 413 TOO_LARGE / EMPTY_REQUEST │
        │  2. Split at first \\r\\n\\r\\n       head | body                     │
        │  3. Decode head as UTF-8          → INVALID_ENCODING              │
        │  4. Request line, 3 tokens        → MALFORMED_REQUEST_LINE        │
        │     method / version tokens       → UNKNOWN_* (strict only)       │
        │  5. Header lines until empty line → MALFORMED_HEADER              │
        │  6. Body: remaining bytes, None when empty                        │
        └───────────────────────────────────────────────────────────────────┘
              │
              ▼
        HTTPRequest dataclass

    ==========================================================================
    """

    def __init__(
        self,
        strict: bool = False,
        max_request_size: int = DEFAULT_MAX_REQUEST_SIZE,
    ):
        """
        Args:
            strict: Reject unknown methods and versions instead of coercing
                    them to GET and HTTP/1.1.
            max_request_size: Larger buffers are rejected with 413.
        """
        self.strict = strict
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse one request buffer.

        Args:
            data: Bytes from the connection's single read.
            client_address: Peer (ip, port), kept for logging.

        Returns:
            Parsed HTTPRequest.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                kind=ParseErrorKind.TOO_LARGE,
                status_code=413,
            )

        if not data.strip():
            raise HTTPParseError("Empty request", kind=ParseErrorKind.EMPTY_REQUEST)

        # No terminator means headers only: everything is head, body is empty.
        head, _, body = data.partition(HEADER_TERMINATOR)

        try:
            header_section = head.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HTTPParseError(
                f"Request head is not valid UTF-8: {e}",
                kind=ParseErrorKind.INVALID_ENCODING,
            ) from e

        lines = header_section.split("\r\n")
        request_line = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            request_line=request_line,
            headers=headers,
            body=HttpBody(body) if body else None,
            client_address=client_address,
            raw=data,
        )

    def _parse_request_line(self, line: str) -> RequestLine:
        """
        Parse "METHOD SP TARGET SP VERSION".

        Single spaces only: "GET  / HTTP/1.1" has an empty token and is
        rejected, as is anything with fewer or more than three tokens.
        """
        tokens = line.split(" ")
        if len(tokens) != 3 or not all(tokens):
            raise HTTPParseError(
                f"Invalid request line: {line!r}",
                kind=ParseErrorKind.MALFORMED_REQUEST_LINE,
            )

        method_token, target, version_token = tokens
        return RequestLine(
            method=HTTPMethod.parse(method_token, strict=self.strict),
            target=target,
            version=HTTPVersion.parse(version_token, strict=self.strict),
        )

    def _parse_headers(self, lines: List[str]) -> List[Header]:
        """Header lines in order, up to the first empty line."""
        headers: List[Header] = []
        for line in lines:
            if not line:
                break
            headers.append(Header.parse(line))
        return headers


def parse_request(
    data: bytes,
    client_address: Tuple[str, int] = ("", 0),
    strict: bool = False,
) -> HTTPRequest:
    """
    Parse a request with a throwaway RequestParser.

    Use RequestParser directly when parsing many requests with the same
    settings.
    """
    return RequestParser(strict=strict).parse(data, client_address)
