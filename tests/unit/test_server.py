"""
Unit tests for HTTPServer request handling, without a listening socket.
"""

import gzip
import logging
import socket
from pathlib import Path

import pytest

from bytehttp import HTTPServer, ServerConfig, create_app
from bytehttp.core import Connection
from bytehttp.http.response import ok


def split_response(raw: bytes):
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode().split("\r\n")
    return lines[0], lines[1:], body


class TestRoutes:
    """End-to-end behavior of the standard routes."""

    def test_root(self, app: HTTPServer):
        """Test GET / is an empty 200."""
        response = app.handle_bytes(b"GET / HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 200 OK\r\n\r\n"

    def test_echo(self, app: HTTPServer):
        """Test GET /echo/abc."""
        raw = app.handle_bytes(b"GET /echo/abc HTTP/1.1\r\nHost: x\r\n\r\n").to_bytes()

        assert raw == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Type: text/plain\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"abc"
        )

    def test_echo_gzip(self, app: HTTPServer):
        """Test GET /echo/ab with Accept-Encoding: gzip."""
        raw = app.handle_bytes(
            b"GET /echo/ab HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"
        ).to_bytes()
        status, headers, body = split_response(raw)

        assert status == "HTTP/1.1 200 OK"
        assert "Content-Encoding: gzip" in headers
        assert f"Content-Length: {len(body)}" in headers
        assert gzip.decompress(body) == b"ab"

    def test_echo_unsupported_encoding(self, app: HTTPServer):
        """Test unsupported encodings leave the body uncompressed."""
        raw = app.handle_bytes(
            b"GET /echo/ab HTTP/1.1\r\nAccept-Encoding: invalid-encoding\r\n\r\n"
        ).to_bytes()
        _, headers, body = split_response(raw)

        assert not any(h.startswith("Content-Encoding") for h in headers)
        assert body == b"ab"

    def test_accept_encoding_name_case(self, app: HTTPServer):
        """Test the Accept-Encoding header name is matched case-insensitively."""
        raw = app.handle_bytes(
            b"GET /echo/ab HTTP/1.1\r\naccept-encoding: gzip\r\n\r\n"
        ).to_bytes()

        assert b"Content-Encoding: gzip\r\n" in raw

    def test_not_found(self, app: HTTPServer):
        """Test unknown targets are an empty 404."""
        raw = app.handle_bytes(b"GET /nonexistent HTTP/1.1\r\n\r\n").to_bytes()

        assert raw == b"HTTP/1.1 404 Not Found\r\n\r\n"

    def test_user_agent(self, app: HTTPServer):
        """Test GET /user-agent echoes the header."""
        response = app.handle_bytes(
            b"GET /user-agent HTTP/1.1\r\nUser-Agent: test-agent\r\n\r\n"
        )

        assert response.body.content == b"test-agent"

    @pytest.mark.parametrize("target", [b"/echo", b"/files"])
    def test_boundaries(self, app: HTTPServer, target: bytes):
        """Test /echo and /files without a name are 400."""
        response = app.handle_bytes(b"GET " + target + b" HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    def test_file_upload_and_download(self, app: HTTPServer, config: ServerConfig):
        """Test POST then GET of /files/new.txt."""
        post = b"POST /files/new.txt HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello"

        assert app.handle_bytes(post).to_bytes() == b"HTTP/1.1 201 Created\r\n\r\n"
        assert (Path(config.directory) / "new.txt").read_bytes() == b"hello"
        assert app.handle_bytes(post).to_bytes() == b"HTTP/1.1 405 Method Not Allowed\r\n\r\n"

        first = app.handle_bytes(b"GET /files/new.txt HTTP/1.1\r\n\r\n").to_bytes()
        second = app.handle_bytes(b"GET /files/new.txt HTTP/1.1\r\n\r\n").to_bytes()

        status, headers, body = split_response(first)
        assert status == "HTTP/1.1 200 OK"
        assert "Content-Type: application/octet-stream" in headers
        assert body == b"hello"
        assert first == second

    def test_file_download_gzip(self, app: HTTPServer, config: ServerConfig):
        """Test a gzipped download reports its compressed length."""
        (Path(config.directory) / "data.txt").write_bytes(b"payload " * 20)

        raw = app.handle_bytes(
            b"GET /files/data.txt HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"
        ).to_bytes()
        _, headers, body = split_response(raw)

        assert f"Content-Length: {len(body)}" in headers
        assert gzip.decompress(body) == b"payload " * 20

    def test_file_traversal(self, app: HTTPServer):
        """Test escaping the directory is 403."""
        response = app.handle_bytes(b"GET /files/../../etc/passwd HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 403 Forbidden\r\n\r\n"

    def test_file_get_directory(self, app: HTTPServer, config: ServerConfig):
        """Test GET of a directory answers 500 with the error text."""
        (Path(config.directory) / "sub").mkdir()

        response = app.handle_bytes(b"GET /files/sub HTTP/1.1\r\n\r\n")
        status, headers, body = split_response(response.to_bytes())

        assert status == "HTTP/1.1 500 Internal Server Error"
        assert body
        assert f"Content-Length: {len(body)}" in headers

    def test_file_nul_byte(self, app: HTTPServer):
        """Test a NUL byte in a file name is 403."""
        response = app.handle_bytes(b"GET /files/a\x00b HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 403 Forbidden\r\n\r\n"

    def test_file_write_failure_body(self, app: HTTPServer):
        """Test an I/O failure answers 500 with the error text."""
        response = app.handle_bytes(b"POST /files/missing/dir/x HTTP/1.1\r\n\r\nx")
        _, headers, body = split_response(response.to_bytes())

        assert response.status == 500
        assert body
        assert f"Content-Length: {len(body)}" in headers


class TestErrorHandling:
    """Malformed input and failures never escape handle_bytes()."""

    @pytest.mark.parametrize("raw", [
        b"GET /\r\n\r\n",
        b"GET / HTTP/1.1\r\nBadHeader\r\n\r\n",
        b"\r\n\r\n",
        b"GET /\xff HTTP/1.1\r\n\r\n",
    ])
    def test_parse_errors_are_400(self, app: HTTPServer, raw: bytes):
        """Test malformed requests are answered with an empty 400."""
        assert app.handle_bytes(raw).to_bytes() == b"HTTP/1.1 400 Bad Request\r\n\r\n"

    @pytest.mark.parametrize("version", [b"HTTP/2", b"HTTP/3"])
    def test_unsupported_version(self, app: HTTPServer, version: bytes):
        """Test HTTP/2 and HTTP/3 request lines get 505."""
        response = app.handle_bytes(b"GET / " + version + b"\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 505 HTTP Version Not Supported\r\n\r\n"

    def test_lenient_unknown_method(self, app: HTTPServer):
        """Test unknown methods are served as GET by default."""
        assert app.handle_bytes(b"BREW /echo/tea HTTP/1.1\r\n\r\n").body.content == b"tea"

    def test_strict_unknown_method(self, config: ServerConfig):
        """Test strict parsing answers unknown methods with 405."""
        config.strict_parsing = True
        app = create_app(config)

        response = app.handle_bytes(b"BREW / HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 405 Method Not Allowed\r\n\r\n"

    def test_handler_exception_is_500(self, config: ServerConfig, caplog):
        """Test an unexpected handler error is logged and answered 500."""
        server = HTTPServer(config)

        @server.router.exact("/boom")
        def boom(request):
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="bytehttp.server"):
            response = server.handle_bytes(b"GET /boom HTTP/1.1\r\n\r\n")

        assert response.to_bytes() == b"HTTP/1.1 500 Internal Server Error\r\n\r\n"
        assert "boom" in caplog.text

    def test_middleware_added_later_is_used(self, config: ServerConfig):
        """Test use() after a request rebuilds the chain."""
        from bytehttp.middleware import CompressionMiddleware

        server = HTTPServer(config)
        server.router.add_route(lambda target: True, lambda request: ok("x"))
        raw = b"GET / HTTP/1.1\r\nAccept-Encoding: gzip\r\n\r\n"

        assert server.handle_bytes(raw).encoding is None
        server.use(CompressionMiddleware())
        assert server.handle_bytes(raw).encoding is not None


class TestHandleConnection:
    """handle_connection() over a socket pair."""

    def test_round_trip(self, app: HTTPServer, caplog):
        """Test one request in, one response out, then close."""
        server_sock, client_sock = socket.socketpair()
        client_sock.settimeout(5.0)
        conn = Connection(socket=server_sock, address=("127.0.0.1", 12345), timeout=5.0)

        client_sock.sendall(b"GET /echo/hi HTTP/1.1\r\n\r\n")
        with caplog.at_level(logging.INFO, logger="bytehttp.server"):
            app.handle_connection(conn)

        data = b""
        while True:
            chunk = client_sock.recv(4096)
            if not chunk:
                break
            data += chunk
        client_sock.close()

        assert data.endswith(b"\r\n\r\nhi")
        assert "Response: 200 -> 127.0.0.1:12345" in caplog.text

    def test_client_sends_nothing(self, app: HTTPServer):
        """Test a client closing without a request gets no response."""
        server_sock, client_sock = socket.socketpair()
        client_sock.settimeout(5.0)
        conn = Connection(socket=server_sock, address=("127.0.0.1", 1), timeout=5.0)

        client_sock.shutdown(socket.SHUT_WR)
        app.handle_connection(conn)

        assert client_sock.recv(4096) == b""
        client_sock.close()

    def test_truncated_to_buffer_size(self, config: ServerConfig):
        """Test only buffer_size bytes are read."""
        config.buffer_size = 64
        app = create_app(config)
        server_sock, client_sock = socket.socketpair()
        client_sock.settimeout(5.0)
        conn = Connection(
            socket=server_sock,
            address=("127.0.0.1", 1),
            buffer_size=config.buffer_size,
            timeout=5.0,
        )

        text = "x" * 200
        client_sock.sendall(f"GET /echo/{text} HTTP/1.1\r\n\r\n".encode())
        app.handle_connection(conn)

        data = client_sock.recv(4096)
        client_sock.close()

        # The request line was cut off, so the request is malformed
        assert data == b"HTTP/1.1 400 Bad Request\r\n\r\n"
