"""
=============================================================================
HEADER FIELDS
=============================================================================

A header is a single `name: value` line. Headers are kept as an ordered
list, not a dict:

    User-Agent: curl/8.4.0         Header("User-Agent", "curl/8.4.0")
    Accept-Encoding: gzip          Header("Accept-Encoding", "gzip")
    Accept-Encoding: br            Header("Accept-Encoding", "br")

Repeated names stay as separate entries in arrival order and are never
merged. Lookups return the FIRST match.

=============================================================================
CASE SENSITIVITY
=============================================================================

RFC 7230 says header names are case-insensitive, and get_header() honours
that. find_header() is an exact-case lookup; the /user-agent route uses it
and only answers to the literal name "User-Agent".

=============================================================================
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import HTTPParseError, ParseErrorKind


SEPARATOR = ": "


@dataclass(frozen=True)
class Header:
    """One header field."""

    name: str
    value: str

    @classmethod
    def parse(cls, line: str) -> "Header":
        """
        Split a header line on its first ": ".

            "Host: localhost:4221"  →  Header("Host", "localhost:4221")
            "X-Empty: "             →  Header("X-Empty", "")
            "Host:localhost"        →  HTTPParseError (no ": ")

        Raises:
            HTTPParseError: The line has no ": " separator.
        """
        name, sep, value = line.partition(SEPARATOR)
        if not sep:
            raise HTTPParseError(
                f"Malformed header line: {line!r}",
                kind=ParseErrorKind.MALFORMED_HEADER,
            )
        return cls(name, value)

    def to_line(self) -> str:
        """Wire form including the trailing CRLF."""
        return f"{self.name}{SEPARATOR}{self.value}\r\n"


def find_header(headers: Iterable[Header], name: str) -> Optional[Header]:
    """First header whose name matches exactly (case-sensitive)."""
    for header in headers:
        if header.name == name:
            return header
    return None


def get_header(headers: Iterable[Header], name: str) -> Optional[Header]:
    """First header whose name matches ignoring case."""
    wanted = name.lower()
    for header in headers:
        if header.name.lower() == wanted:
            return header
    return None
