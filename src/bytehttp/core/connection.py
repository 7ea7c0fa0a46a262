"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for the lifetime of one request.

=============================================================================
ONE READ, ONE WRITE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Lifecycle                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    accept()                                                          │
    │       │                                                              │
    │       ▼                                                              │
    │    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSING ──► CLOSED  │
    │              │                          │                            │
    │         recv(buffer_size)          sendall(response)                 │
    │         exactly once                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no keep-alive and no pipelining. The request is whatever the
first recv() returns: a request longer than buffer_size is truncated, and
a body still in flight when the read happens is simply not seen. Content-
Length is not consulted.

=============================================================================
INTERVIEW QUESTIONS ABOUT CONNECTIONS
=============================================================================

Q: "Is one recv() enough to get a whole HTTP request?"
A: "Not in general. TCP is a byte stream and may deliver the request in
   several segments. It works for small requests from well-behaved
   clients, which is the trade-off this server makes. A robust reader
   loops until \\r\\n\\r\\n and then reads Content-Length more bytes."

Q: "Why shutdown(SHUT_WR) before close()?"
A: "It sends FIN after the response so the client sees a clean end of
   stream, and the drain keeps unread request bytes from turning the
   close into a RST that could discard the response."

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    An accepted client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current lifecycle state.
        buffer_size: Size of the single receive.
        timeout: Socket timeout in seconds, None for blocking.
    """

    socket: socket.socket
    address: Tuple[str, int]
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    buffer_size: int = 1024
    timeout: Optional[float] = None

    def __post_init__(self):
        # settimeout(None) puts the socket in blocking mode
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def peer(self) -> str:
        """"ip:port" for log lines."""
        return f"{self.client_ip}:{self.client_port}"

    @property
    def age(self) -> float:
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with a single recv() of buffer_size bytes.

        Returns:
            The bytes received, or None if the client closed without
            sending anything.

        Raises:
            OSError: The read failed or timed out (socket.timeout is an
                     OSError).
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)
        if not data:
            logger.debug(f"[{self.id}] Client closed before sending a request")
            return None

        if len(data) == self.buffer_size:
            logger.debug(f"[{self.id}] Read filled the buffer; request may be truncated")
        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response with sendall().

        Returns:
            True if the send succeeded, False if the connection was lost.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """
        Close gracefully: FIN, drain, release the descriptor.

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError as e:
            logger.debug(f"[{self.id}] shutdown: {e}")

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError as e:
            logger.debug(f"[{self.id}] drain: {e}")

        self.socket.close()
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        """
        Allows:

            with Connection(sock, addr) as conn:
                data = conn.read_request()
                conn.send_response(response)
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
