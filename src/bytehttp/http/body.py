"""
Message bodies.

An HttpBody holds the raw content and, once an encoding has been chosen,
the encoded form. Whatever goes on the wire (value()) and whatever
Content-Length measures (len()) is the encoded form when there is one.
"""

from dataclasses import dataclass, replace
from typing import Optional

from .encoding import ContentEncoding, encode


@dataclass(frozen=True)
class HttpBody:
    content: bytes
    compressed: Optional[bytes] = None

    @classmethod
    def from_text(cls, text: str) -> "HttpBody":
        return cls(text.encode("utf-8"))

    def encoded(self, encoding: ContentEncoding) -> "HttpBody":
        """
        Return a copy whose compressed form is `content` run through
        `encoding`. The receiver is left as it was.
        """
        return replace(self, compressed=encode(self.content, encoding))

    def value(self) -> bytes:
        """Bytes to transmit."""
        if self.compressed is not None:
            return self.compressed
        return self.content

    def __len__(self) -> int:
        return len(self.value())
