"""
=============================================================================
REQUEST-LINE TOKENS: METHOD AND VERSION
=============================================================================

The first and last tokens of a request line are drawn from small closed
sets. This module turns the raw tokens into enum members.

    GET /echo/abc HTTP/1.1
    ─┬─           ───┬────
     │               │
    HTTPMethod     HTTPVersion

=============================================================================
LENIENT VS STRICT PARSING
=============================================================================

Historically this server never rejected a request line because of an
unknown token:

    BREW /pot HTTP/1.1   →  treated as GET
    GET / HTTP/9.9       →  treated as HTTP/1.1

That lenient behaviour is still the default. RequestParser(strict=True)
(or `--strict` on the command line) rejects unknown tokens instead:

    unknown method   →  HTTPParseError(UNKNOWN_METHOD, 405)
    unknown version  →  HTTPParseError(UNKNOWN_VERSION, 505)

Known-but-unsupported versions (HTTP/2, HTTP/3) parse in both modes; the
server answers them with 505 once the request is built.

=============================================================================
"""

from enum import Enum
import logging

from .errors import HTTPParseError, ParseErrorKind


logger = logging.getLogger(__name__)


class HTTPMethod(Enum):
    """
    The nine request methods of RFC 7231 / RFC 5789.

        ┌──────────┬────────────┬──────────────────────────────────┐
        │  Method  │ Idempotent │ Meaning for this server          │
        ├──────────┼────────────┼──────────────────────────────────┤
        │  GET     │    Yes     │ every route                      │
        │  POST    │    No      │ create a file under /files       │
        │  others  │     -      │ routed like GET, 405 on /files   │
        └──────────┴────────────┴──────────────────────────────────┘
    """
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, token: str, strict: bool = False) -> "HTTPMethod":
        """
        Map a request-line token to a method.

        Args:
            token: Method token exactly as received (case-sensitive).
            strict: Reject unknown tokens instead of coercing them to GET.

        Raises:
            HTTPParseError: Unknown token in strict mode.
        """
        try:
            return cls(token)
        except ValueError:
            if strict:
                raise HTTPParseError(
                    f"Invalid method: {token}",
                    kind=ParseErrorKind.UNKNOWN_METHOD,
                    status_code=405,
                )
            logger.debug(f"Unknown method {token!r}, treating as GET")
            return cls.GET


class HTTPVersion(Enum):
    """Protocol versions recognised on a request line."""
    HTTP_1_1 = "HTTP/1.1"
    HTTP_2 = "HTTP/2"
    HTTP_3 = "HTTP/3"

    @property
    def is_supported(self) -> bool:
        """Only HTTP/1.1 is spoken; anything else gets a 505."""
        return self is HTTPVersion.HTTP_1_1

    @classmethod
    def parse(cls, token: str, strict: bool = False) -> "HTTPVersion":
        """
        Map a request-line token to a version.

        Raises:
            HTTPParseError: Unknown token in strict mode (status 505).
        """
        try:
            return cls(token)
        except ValueError:
            if strict:
                raise HTTPParseError(
                    f"Unsupported HTTP version: {token}",
                    kind=ParseErrorKind.UNKNOWN_VERSION,
                    status_code=505,
                )
            logger.debug(f"Unknown version {token!r}, treating as HTTP/1.1")
            return cls.HTTP_1_1
