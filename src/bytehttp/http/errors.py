"""
=============================================================================
HTTP ERROR TAXONOMY
=============================================================================

Every failure the protocol core can recover from is an HTTPError that
carries the status code the client should see:

    ┌─────────────────────────┬────────┬──────────────────────────────────┐
    │ Exception               │ Status │ Raised when                      │
    ├─────────────────────────┼────────┼──────────────────────────────────┤
    │ HTTPParseError          │ 400*   │ request bytes are malformed      │
    │ ForbiddenError          │ 403    │ /files target escapes its root   │
    │ NotFoundError           │ 404    │ nothing lives at the target      │
    │ MethodNotAllowedError   │ 405    │ verb not accepted, file exists   │
    │ IOFailureError          │ 500    │ file read/write failed           │
    │ UnsupportedVersionError │ 505    │ HTTP/2 or HTTP/3 request line    │
    └─────────────────────────┴────────┴──────────────────────────────────┘

    * HTTPParseError may carry 405, 413 or 505 for strict parsing and
      oversized buffers.

Handlers raise; the router converts the exception into a response with
response.error_response(). Socket-level failures are NOT HTTPErrors: they
are OSErrors handled by the connection layer.

=============================================================================
INTERVIEW QUESTIONS ABOUT ERROR HANDLING
=============================================================================

Q: "Why exceptions instead of returning error responses directly?"
A: "A helper three calls deep can stop the request without threading a
   response object back up through every caller. The one place that
   catches HTTPError turns it into bytes, so status codes stay consistent."

Q: "Why does the parse error carry a 'kind' as well as a status?"
A: "Status is what the client sees. Kind is what the logs and tests care
   about: 'header without separator' and 'missing request-line token' are
   both 400 but are different bugs in the client."

=============================================================================
"""

from enum import Enum
from typing import Optional

from .status_codes import HTTPStatus


class HTTPError(Exception):
    """
    Base class for errors that map onto an HTTP response.

    Args:
        message: Description for logs.
        status_code: Status to answer with.
        body: Optional response body. Only I/O failures send one.
    """

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        if status_code is not None:
            self.status_code = HTTPStatus(status_code)
        self.body = body


class ParseErrorKind(Enum):
    """Why a request buffer could not be turned into an HTTPRequest."""
    EMPTY_REQUEST = "empty_request"
    INVALID_ENCODING = "invalid_encoding"
    MALFORMED_REQUEST_LINE = "malformed_request_line"
    MALFORMED_HEADER = "malformed_header"
    UNKNOWN_METHOD = "unknown_method"
    UNKNOWN_VERSION = "unknown_version"
    TOO_LARGE = "too_large"


class HTTPParseError(HTTPError):
    """
    Raised when HTTP request parsing fails.

    Never escapes the server: it becomes a 400 (or the carried status)
    instead of taking the connection handler down.
    """

    status_code = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        message: str,
        kind: ParseErrorKind = ParseErrorKind.MALFORMED_REQUEST_LINE,
        status_code: int = 400,
    ):
        super().__init__(message, status_code)
        self.kind = kind


class ForbiddenError(HTTPError):
    status_code = HTTPStatus.FORBIDDEN


class NotFoundError(HTTPError):
    status_code = HTTPStatus.NOT_FOUND


class MethodNotAllowedError(HTTPError):
    status_code = HTTPStatus.METHOD_NOT_ALLOWED


class UnsupportedVersionError(HTTPError):
    status_code = HTTPStatus.HTTP_VERSION_NOT_SUPPORTED


class IOFailureError(HTTPError):
    """
    A filesystem operation failed. The OS error text is sent as the body
    so the client can tell "permission denied" from "is a directory".
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, error: OSError):
        text = str(error)
        super().__init__(text, body=text)
        self.error = error
