"""
=============================================================================
BYTEHTTP - Minimal HTTP/1.1 Server on Raw Bytes
=============================================================================

Accepts TCP connections, parses each request from a single fixed-size
read, routes it by target, and writes back one response, gzip-compressed
when the client asks for it.

=============================================================================
PROJECT OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       BYTEHTTP ARCHITECTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. RAW SOCKETS                          core/                     │
    │      - Bind 0.0.0.0:4221, accept loop                               │
    │      - One recv(), one sendall() per connection                     │
    │                                                                      │
    │   2. HTTP/1.1 WIRE FORMAT                 http/                     │
    │      - Fallible request parsing (no crash on bad input)             │
    │      - Response serialization with header defaulting               │
    │      - Accept-Encoding negotiation, gzip                            │
    │                                                                      │
    │   3. ROUTING                              http/router.py            │
    │      - Ordered (predicate, handler) table                           │
    │                                                                      │
    │   4. ENDPOINTS                            handlers/                 │
    │      - /, /user-agent, /echo/<text>, /files/<name>                  │
    │                                                                      │
    │   5. MIDDLEWARE                           middleware/               │
    │      - Access logging, content negotiation                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    bytehttp/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m bytehttp)
    ├── server.py            # HTTPServer, create_app()
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets
    │   ├── socket_server.py # Accept loop
    │   └── connection.py    # Client socket wrapper
    ├── http/                # Protocol, no I/O
    │   ├── request.py       # RequestParser, HTTPRequest
    │   ├── response.py      # HTTPResponse, ResponseBuilder
    │   ├── router.py        # Router
    │   ├── encoding.py      # Content negotiation
    │   └── ...
    ├── handlers/            # Endpoints
    └── middleware/          # Logging, compression

=============================================================================
QUICK START
=============================================================================

    from bytehttp import ServerConfig, create_app

    app = create_app(ServerConfig(directory="/tmp/files"))
    app.run()

    $ curl -v http://localhost:4221/echo/abc
    $ curl --data-binary @notes.txt http://localhost:4221/files/notes.txt

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_app
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
