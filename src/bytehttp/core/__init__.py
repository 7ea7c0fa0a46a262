"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing underneath the HTTP layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • Creates the TCP listening socket, binds 0.0.0.0:4221             │
    │  • Runs the accept() loop                                           │
    │  • Handles SIGTERM/SIGINT when running on the main thread           │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ One Connection per client
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  ─────────────────────────────────────────────────────────────────  │
    │  • One fixed-size recv() for the request                            │
    │  • sendall() for the response                                       │
    │  • Graceful close (FIN, drain, close)                               │
    └─────────────────────────────────────────────────────────────────────┘

Nothing here parses HTTP. The HTTPServer passes a callback that receives
each Connection.

=============================================================================
"""

from .socket_server import SocketServer, ConnectionHandler
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",       # TCP accept loop
    "ConnectionHandler",  # Callback type the accept loop invokes
    "Connection",         # Client socket wrapper
    "ConnectionState",    # Connection lifecycle states
]
