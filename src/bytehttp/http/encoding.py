"""
=============================================================================
CONTENT-ENCODING NEGOTIATION
=============================================================================

The client lists the encodings it can decode; we pick one we can produce.

    Request:
    ┌───────────────────────────────────────────────────────────────┐
    │ GET /echo/abc HTTP/1.1                                        │
    │ Accept-Encoding: invalid-encoding, gzip, br                   │
    │                  ────────┬───────  ──┬─  ─┬                   │
    │                          │           │    └── known, but we   │
    │                          │           │        can't produce it│
    │                          │           └── known + supported:   │
    │                          │               SELECTED             │
    │                          └── unknown token: skipped           │
    └───────────────────────────────────────────────────────────────┘

    Response:
    ┌───────────────────────────────────────────────────────────────┐
    │ HTTP/1.1 200 OK                                               │
    │ Content-Type: text/plain                                      │
    │ Content-Length: 23          (compressed size)                 │
    │ Content-Encoding: gzip                                        │
    │                                                               │
    │ [gzip compressed body]                                        │
    └───────────────────────────────────────────────────────────────┘

Selection is first-match in the order the client wrote the list. Quality
values are not weighed: "gzip;q=0.1, br" still selects gzip. No match is
not an error; the body simply goes out uncompressed.

=============================================================================
INTERVIEW QUESTIONS ABOUT COMPRESSION
=============================================================================

Q: "Why compress at serialization time rather than in the handler?"
A: "Handlers deal in plain content. Encoding is a property of this one
   exchange, decided by this client's header, so it is applied once when
   the bytes are produced and Content-Length is measured after it."

Q: "How is Brotli different from gzip?"
A: "Brotli (br) compresses web content 15-25% better but needs a third
   party codec. The token is recognised here and declined, so clients that
   list it first still fall through to gzip."

=============================================================================
"""

from enum import Enum
from typing import Optional
import gzip


class ContentEncoding(Enum):
    """Encodings that can appear in Accept-Encoding / Content-Encoding."""
    GZIP = "gzip"
    COMPRESS = "compress"
    DEFLATE = "deflate"
    IDENTITY = "identity"
    BR = "br"

    @property
    def is_supported(self) -> bool:
        """Only gzip is produced. The others parse but are declined."""
        return self in SUPPORTED_ENCODINGS

    @classmethod
    def from_token(cls, token: str) -> Optional["ContentEncoding"]:
        """Parse one list element, ignoring parameters and case."""
        coding = token.split(";", 1)[0].strip().lower()
        try:
            return cls(coding)
        except ValueError:
            return None


SUPPORTED_ENCODINGS = frozenset({ContentEncoding.GZIP})


def negotiate_encoding(accept_encoding: Optional[str]) -> Optional[ContentEncoding]:
    """
    Pick the encoding for a response.

    Args:
        accept_encoding: Raw Accept-Encoding header value, or None.

    Returns:
        The first listed encoding that is both known and supported,
        or None when nothing qualifies.

    Example:
        negotiate_encoding("deflate, gzip")   # ContentEncoding.GZIP
        negotiate_encoding("br, identity")    # None
    """
    if not accept_encoding:
        return None

    for token in accept_encoding.split(","):
        encoding = ContentEncoding.from_token(token)
        if encoding is not None and encoding.is_supported:
            return encoding

    return None


def encode(content: bytes, encoding: ContentEncoding) -> bytes:
    """
    Encode a body. Pure: same input, same output, nothing mutated.

    gzip output uses mtime=0 so repeated encodes of the same content are
    byte-identical.

    Raises:
        ValueError: The encoding is not one we can produce.
    """
    if encoding is ContentEncoding.GZIP:
        return gzip.compress(content, mtime=0)
    if encoding is ContentEncoding.IDENTITY:
        return content
    raise ValueError(f"Unsupported content encoding: {encoding.value}")
