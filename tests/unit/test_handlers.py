"""
Unit tests for the endpoint handlers.
"""

import os
import sys
from pathlib import Path

import pytest

from bytehttp.config import ServerConfig
from bytehttp.handlers import FileHandler, echo, root, user_agent
from bytehttp.http.body import HttpBody
from bytehttp.http.errors import (
    ForbiddenError,
    IOFailureError,
    MethodNotAllowedError,
    NotFoundError,
)
from bytehttp.http.headers import Header
from bytehttp.http.protocol import HTTPMethod
from bytehttp.http.request import HTTPRequest, RequestLine
from bytehttp.http.status_codes import HTTPStatus


def make_request(target, method=HTTPMethod.GET, headers=None, body=None):
    return HTTPRequest(
        RequestLine(method, target),
        headers=headers or [],
        body=HttpBody(body) if body is not None else None,
    )


class TestRoot:
    """Tests for the / handler."""

    def test_empty_ok(self):
        """Test / answers an empty 200."""
        response = root(make_request("/"))

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"


class TestUserAgent:
    """Tests for the /user-agent handler."""

    def test_echoes_header(self):
        """Test the User-Agent value becomes the body."""
        request = make_request("/user-agent", headers=[Header("User-Agent", "test-agent")])
        response = user_agent(request)

        assert response.status == HTTPStatus.OK
        assert response.body.content == b"test-agent"

    def test_missing_header(self):
        """Test 400 without a User-Agent header."""
        response = user_agent(make_request("/user-agent"))

        assert response.status == HTTPStatus.BAD_REQUEST

    def test_lookup_is_exact_case(self):
        """Test a lowercase header name is not accepted."""
        request = make_request("/user-agent", headers=[Header("user-agent", "curl")])

        assert user_agent(request).status == HTTPStatus.BAD_REQUEST

    def test_empty_value(self):
        """Test an empty header value is echoed as an empty body."""
        request = make_request("/user-agent", headers=[Header("User-Agent", "")])
        response = user_agent(request)

        assert response.status == HTTPStatus.OK
        assert response.body.content == b""


class TestEcho:
    """Tests for the /echo handler."""

    @pytest.mark.parametrize("target, expected", [
        ("/echo/abc", b"abc"),
        ("/echo/x", b"x"),
        ("/echo/a/b", b"a/b"),
        ("/echoes", b"s"),
    ])
    def test_echoes_after_prefix(self, target, expected):
        """Test everything after the sixth character is echoed."""
        response = echo(make_request(target))

        assert response.status == HTTPStatus.OK
        assert response.body.content == expected

    @pytest.mark.parametrize("target", ["/echo", "/echo/"])
    def test_too_short(self, target):
        """Test targets shorter than seven characters are rejected."""
        assert echo(make_request(target)).status == HTTPStatus.BAD_REQUEST


class TestFileHandler:
    """Tests for FileHandler."""

    @pytest.fixture
    def handler(self, tmp_path: Path) -> FileHandler:
        return FileHandler(ServerConfig(directory=str(tmp_path)))

    def test_get_existing_file(self, handler: FileHandler, tmp_path: Path):
        """Test GET returns the file as octet-stream."""
        (tmp_path / "notes.txt").write_bytes(b"hello")

        response = handler.handle(make_request("/files/notes.txt"))

        assert response.status == HTTPStatus.OK
        assert response.headers == [
            Header("Content-Type", "application/octet-stream"),
            Header("Content-Length", "5"),
        ]
        assert response.body.content == b"hello"

    def test_get_missing_file(self, handler: FileHandler):
        """Test GET of a missing file raises NotFoundError."""
        with pytest.raises(NotFoundError):
            handler.handle(make_request("/files/missing.txt"))

    def test_get_is_idempotent(self, handler: FileHandler, tmp_path: Path):
        """Test repeated GETs produce byte-identical responses."""
        (tmp_path / "a.bin").write_bytes(b"\x00\x01\x02")

        first = handler.handle(make_request("/files/a.bin")).to_bytes()
        second = handler.handle(make_request("/files/a.bin")).to_bytes()

        assert first == second

    def test_post_creates_file(self, handler: FileHandler, tmp_path: Path):
        """Test POST writes the body and answers 201."""
        request = make_request("/files/new.txt", HTTPMethod.POST, body=b"hello")

        response = handler.handle(request)

        assert response.status == HTTPStatus.CREATED
        assert (tmp_path / "new.txt").read_bytes() == b"hello"

    def test_post_without_body(self, handler: FileHandler, tmp_path: Path):
        """Test POST with no body creates an empty file."""
        handler.handle(make_request("/files/empty", HTTPMethod.POST))

        assert (tmp_path / "empty").read_bytes() == b""

    def test_post_existing_file(self, handler: FileHandler, tmp_path: Path):
        """Test POST never overwrites."""
        (tmp_path / "new.txt").write_bytes(b"original")
        request = make_request("/files/new.txt", HTTPMethod.POST, body=b"other")

        with pytest.raises(MethodNotAllowedError):
            handler.handle(request)

        assert (tmp_path / "new.txt").read_bytes() == b"original"

    def test_post_into_missing_directory(self, handler: FileHandler):
        """Test an OS-level write failure becomes IOFailureError."""
        request = make_request("/files/no/such/dir.txt", HTTPMethod.POST, body=b"x")

        with pytest.raises(IOFailureError) as exc_info:
            handler.handle(request)

        assert exc_info.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert exc_info.value.body

    def test_get_directory(self, handler: FileHandler, tmp_path: Path):
        """Test GET of a directory is a read failure, not a missing file."""
        (tmp_path / "sub").mkdir()

        with pytest.raises(IOFailureError) as exc_info:
            handler.handle(make_request("/files/sub"))

        assert exc_info.value.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
        assert exc_info.value.body

    def test_nul_byte_in_name(self, handler: FileHandler):
        """Test a NUL byte in the name is forbidden."""
        with pytest.raises(ForbiddenError):
            handler.handle(make_request("/files/a\x00b"))

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_get_unreadable_file(self, handler: FileHandler, tmp_path: Path):
        """Test an OS-level read failure becomes IOFailureError."""
        path = tmp_path / "secret"
        path.write_bytes(b"x")
        path.chmod(0)
        try:
            with pytest.raises(IOFailureError):
                handler.handle(make_request("/files/secret"))
        finally:
            path.chmod(0o600)

    @pytest.mark.parametrize("method", [HTTPMethod.PUT, HTTPMethod.DELETE])
    def test_other_methods(self, handler: FileHandler, method):
        """Test methods other than GET and POST are rejected."""
        with pytest.raises(MethodNotAllowedError):
            handler.handle(make_request("/files/a.txt", method))

    @pytest.mark.parametrize("target", ["/files", "/files/"])
    def test_too_short(self, handler: FileHandler, target):
        """Test targets shorter than eight characters are rejected."""
        assert handler.handle(make_request(target)).status == HTTPStatus.BAD_REQUEST

    @pytest.mark.parametrize("target", [
        "/files/../secret",
        "/files/../../etc/passwd",
        "/files/.",
    ])
    def test_path_traversal_blocked(self, handler: FileHandler, target):
        """Test names resolving outside the directory are forbidden."""
        with pytest.raises(ForbiddenError):
            handler.handle(make_request(target))

    def test_subdirectory_allowed(self, handler: FileHandler, tmp_path: Path):
        """Test names inside a subdirectory resolve normally."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "f").write_bytes(b"ok")

        assert handler.handle(make_request("/files/sub/f")).body.content == b"ok"
