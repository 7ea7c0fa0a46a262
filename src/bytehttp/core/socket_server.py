"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Binds the listening socket, accepts clients and hands each one to a
connection handler. Knows nothing about HTTP.

=============================================================================
THE SOCKET LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      Server Socket Lifecycle                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   socket()  ──►  bind(0.0.0.0:4221)  ──►  listen(backlog)            │
    │                                               │                      │
    │                                               ▼                      │
    │                                   ┌──────────────────────┐           │
    │                                   │  accept() loop       │           │
    │                                   │  (1s timeout so the  │◄──┐       │
    │                                   │   loop sees shutdown)│   │       │
    │                                   └──────────┬───────────┘   │       │
    │                                              │               │       │
    │                                              ▼               │       │
    │                                   handler(Connection)  ──────┘       │
    │                                   inline, or on its own thread       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
CONCURRENCY
=============================================================================

    sequential (default)   one connection at a time, in accept order;
                           a stalled client blocks everyone behind it
    threaded               one daemon thread per connection

An exception escaping one connection's handler is logged and the loop
moves on. Only shutdown() or a failed bind stops the server.

=============================================================================
INTERVIEW QUESTIONS ABOUT SOCKETS
=============================================================================

Q: "What does SO_REUSEADDR do?"
A: "Lets the server rebind its port while old connections sit in
   TIME_WAIT. Without it a quick restart fails with 'Address already in
   use'."

Q: "Why does accept() have a timeout?"
A: "A blocking accept() never returns if nobody connects, so the loop
   would never notice shutdown(). A 1 second timeout bounds how long
   shutdown can take."

Q: "Why only install signal handlers on the main thread?"
A: "signal.signal() raises ValueError anywhere else. Tests run the server
   on a background thread and stop it with shutdown() instead."

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


ConnectionHandler = Callable[[Connection], None]

ACCEPT_TIMEOUT = 1.0


class SocketServer:
    """
    Low-level TCP socket server.

        def handle_connection(conn: Connection):
            ...

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown

    From another thread, wait on `ready` before connecting and read the
    actual port from `bound_address` (useful with port=0).
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._shutdown_event = threading.Event()
        self._original_handlers: dict = {}
        self._bound_address: Optional[Tuple[str, int]] = None
        self.ready = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """Configured (host, port)."""
        return (self.config.host, self.config.port)

    @property
    def bound_address(self) -> Optional[Tuple[str, int]]:
        """Actual (host, port) after bind, None before."""
        return self._bound_address

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Allow rebinding while old connections are in TIME_WAIT
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Send small responses immediately
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        sock.settimeout(ACCEPT_TIMEOUT)
        return sock

    def _setup_signals(self):
        """
        Turn SIGTERM and SIGINT into a graceful shutdown.

        Only possible on the main thread; elsewhere the caller is expected
        to call shutdown() itself.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, signal handlers not installed")
            return

        def shutdown_handler(signum, frame):
            signal_name = signal.Signals(signum).name
            logger.info(f"Received {signal_name}, initiating shutdown...")
            self.shutdown()

        self._original_handlers[signal.SIGTERM] = signal.signal(signal.SIGTERM, shutdown_handler)
        self._original_handlers[signal.SIGINT] = signal.signal(signal.SIGINT, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: ConnectionHandler):
        """
        Bind, listen and run the accept loop. Blocks until shutdown().

        Raises:
            OSError: The address could not be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._bound_address = self._socket.getsockname()[:2]

        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        host, port = self._bound_address
        logger.info(f"Listening from {host}:{port}")
        self.ready.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: ConnectionHandler):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if not self._running:
                    break
                logger.error(f"Accept error: {e}")
                continue

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
            conn = Connection(
                socket=client_socket,
                address=client_address[:2],
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
            )

            if self.config.threaded:
                thread = threading.Thread(
                    target=self._serve,
                    args=(connection_handler, conn),
                    name=f"conn-{conn.id}",
                    daemon=True,
                )
                thread.start()
            else:
                self._serve(connection_handler, conn)

    def _serve(self, connection_handler: ConnectionHandler, conn: Connection):
        """Run the handler for one connection; its failures stay with it."""
        try:
            connection_handler(conn)
        except Exception:
            logger.exception(f"[{conn.id}] Unhandled error on connection from {conn.peer}")
            conn.close()

    def shutdown(self):
        """Stop the accept loop. Idempotent and thread-safe."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self):
        self._restore_signals()
        if self._socket:
            self._socket.close()
            self._socket = None
        self.ready.clear()
        logger.info("Socket server stopped")

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Block until shutdown() has been called.

        Returns:
            True if shutdown happened, False on timeout.
        """
        return self._shutdown_event.wait(timeout)
