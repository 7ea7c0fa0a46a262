"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the pieces together: accept a connection, read once, parse, route,
serialize, write once, close.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         One Connection                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   handle_connection(conn)                                            │
    │        │   conn.read_request()     one recv(buffer_size)             │
    │        ▼                                                             │
    │   handle_bytes(data)                                                 │
    │        │   RequestParser.parse()   HTTPParseError → 400/405/413/505  │
    │        │   version check           HTTP/2, HTTP/3 → 505              │
    │        │   Logging → Compression → Router.handle                     │
    │        │                           unexpected exception → 500        │
    │        ▼                                                             │
    │   conn.send_response(response.to_bytes())                            │
    │        │   "Response: 200 -> 127.0.0.1:53211"                        │
    │        ▼                                                             │
    │   conn.close()                                                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

handle_bytes() never raises and never touches a socket, so every status
the server can produce is testable without a network.

=============================================================================
ERROR HANDLING
=============================================================================

    Where                   What                       Client sees
    ─────────────────────   ────────────────────────   ──────────────────
    parser                  HTTPParseError             its status, no body
    handler                 HTTPError (raised)         its status (router)
    handler                 any other exception        500, logged with
                                                       traceback
    connection read/write   OSError                    nothing; logged,
                                                       connection dropped

No error on one connection can stop the accept loop.

=============================================================================
"""

import logging
from typing import Optional, Callable, Tuple

from .config import ServerConfig
from .core import SocketServer, Connection
from .handlers import FileHandler, echo, root, user_agent
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, Router, exact, prefix,
    error_response, internal_error, version_not_supported,
)
from .middleware import (
    CompressionMiddleware, LoggingMiddleware, Middleware, MiddlewarePipeline,
)


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    HTTP/1.1 server, one request per connection.

    =========================================================================
    USAGE
    =========================================================================

        server = HTTPServer(ServerConfig(port=4221))

        @server.router.exact("/")
        def index(request):
            return ok()

        server.use(LoggingMiddleware())
        server.run()   # blocks until SIGINT/SIGTERM or shutdown()

    create_app() builds one with the standard routes already registered.

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Defaults if not provided.

        Raises:
            ValueError: The configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser(
            strict=self.config.strict_parsing,
            max_request_size=self.config.max_request_size,
        )
        self._router = Router()
        self._middleware = MiddlewarePipeline()

        # middleware.wrap(router.handle), built lazily so middleware added
        # after construction is included
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """Add middleware. First added is outermost."""
        self._middleware.add(middleware)
        self._handler = None
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def ready(self):
        """threading.Event set once the socket is listening."""
        return self._socket_server.ready

    @property
    def bound_address(self) -> Optional[Tuple[str, int]]:
        return self._socket_server.bound_address

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: The listening address could not be bound.
        """
        self._setup_logging()
        mode = "thread per connection" if self.config.threaded else "sequential"
        logger.info(
            f"Starting HTTP server on {self.config.host}:{self.config.port} "
            f"({mode}, directory={self.config.directory})"
        )

        try:
            self._socket_server.start(self.handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self.shutdown()
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. Safe to call from any thread."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("bytehttp").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def handle_connection(self, conn: Connection):
        """
        Serve one connection: read once, answer once, close.

        Socket errors are logged and the connection abandoned; they never
        reach the accept loop.
        """
        with conn:
            try:
                data = conn.read_request()
            except OSError as e:
                logger.error(f"[{conn.id}] Request error: {e}")
                return

            if data is None:
                return

            response = self.handle_bytes(data, conn.address)
            if conn.send_response(response.to_bytes()):
                logger.info(f"Response: {int(response.status)} -> {conn.peer}")

    def handle_bytes(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPResponse:
        """
        Turn raw request bytes into the response to send.

        Never raises: every failure becomes an error response.
        """
        try:
            request = self._parser.parse(data, client_address)
        except HTTPParseError as e:
            logger.debug(f"Rejected request from {client_address[0]}: {e.kind.value}: {e}")
            return error_response(e)

        if not request.version.is_supported:
            logger.debug(f"Unsupported version {request.version.value}")
            return version_not_supported()

        if self._handler is None:
            self._handler = self._middleware.wrap(self._router.handle)

        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.request_line.to_line()}: {e}")
            return internal_error()


def create_app(config: Optional[ServerConfig] = None) -> HTTPServer:
    """
    Create the server with its standard routes and middleware.

        exact("/")             → root
        exact("/user-agent")   → user_agent
        prefix("/echo")        → echo
        prefix("/files")       → FileHandler(config).handle

    Example:
        app = create_app(ServerConfig(directory="/srv/files"))
        app.run()
    """
    server = HTTPServer(config)

    server.router.add_route(exact("/"), root)
    server.router.add_route(exact("/user-agent"), user_agent)
    server.router.add_route(prefix("/echo"), echo)
    server.router.add_route(prefix("/files"), FileHandler(server.config).handle, name="files")

    server.use(LoggingMiddleware(log_format=server.config.log_format))
    server.use(CompressionMiddleware())

    return server
