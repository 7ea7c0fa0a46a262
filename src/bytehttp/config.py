"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every knob the server has, resolved once at startup and passed by
reference to whatever needs it. Handlers never scan argv or the
environment per request.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m bytehttp --directory /srv/files                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── BYTEHTTP_DIRECTORY=/srv/files python -m bytehttp           │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
INTERVIEW QUESTIONS ABOUT CONFIGURATION
=============================================================================

Q: "How do you validate configuration?"
A: "Eagerly, at startup. A bad port or log level should stop the process
   before it binds, not surface on the first request."

Q: "Why is the receive buffer so small?"
A: "Each request is read with exactly one recv() of buffer_size bytes.
   Anything beyond it is truncated. 1 KB is plenty for the endpoints
   served here; raise it for larger uploads."

=============================================================================
"""

import os
from dataclasses import dataclass, fields
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")

ENV_PREFIX = "BYTEHTTP_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    HTTP SETTINGS
    - strict_parsing, max_request_size

    CONCURRENCY
    - threaded

    FILE STORAGE
    - directory

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces
    - "127.0.0.1" - Localhost only
    """

    port: int = 4221
    """The port number to listen on. 0 picks a free port (tests)."""

    backlog: int = 128
    """Maximum number of queued connections."""

    buffer_size: int = 1024
    """
    Size of the single receive per connection, in bytes.
    Requests longer than this are truncated.
    """

    timeout: Optional[float] = None
    """
    Client socket timeout in seconds.
    None = blocking: a stalled client holds its handler indefinitely.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    strict_parsing: bool = False
    """
    Reject unknown methods (405) and versions (505) instead of treating
    them as GET and HTTP/1.1.
    """

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """Requests larger than this are answered 413."""

    # ─────────────────────────────────────────────────────────────────────
    # CONCURRENCY
    # ─────────────────────────────────────────────────────────────────────

    threaded: bool = False
    """
    Handle each connection on its own thread.
    False = one connection at a time, in accept order.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILE STORAGE
    # ─────────────────────────────────────────────────────────────────────

    directory: str = "/tmp/bytehttp"
    """Base directory for GET and POST /files/<name>."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'json' or 'text'."""

    def get(self, name: str) -> Optional[str]:
        """
        Look up an option by name as a string.

        Returns None for unknown names and for options that are unset.

            config.get("directory")   # "/tmp/bytehttp"
            config.get("missing")     # None
        """
        if name not in {f.name for f in fields(self)}:
            return None
        value = getattr(self, name)
        if value is None:
            return None
        return str(value)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        BYTEHTTP_HOST         Server host (default: 0.0.0.0)
        BYTEHTTP_PORT         Server port (default: 4221)
        BYTEHTTP_DIRECTORY    File storage directory (default: /tmp/bytehttp)
        BYTEHTTP_BUFFER_SIZE  Receive buffer in bytes (default: 1024)
        BYTEHTTP_TIMEOUT      Client timeout in seconds (default: none)
        BYTEHTTP_STRICT       Strict request parsing (default: false)
        BYTEHTTP_THREADED     Thread per connection (default: false)
        BYTEHTTP_LOG_LEVEL    Logging level (default: INFO)
        BYTEHTTP_LOG_FORMAT   Access log format (default: text)

        =====================================================================
        """
        defaults = cls()
        timeout = os.getenv(f"{ENV_PREFIX}TIMEOUT")
        return cls(
            host=os.getenv(f"{ENV_PREFIX}HOST", defaults.host),
            port=int(os.getenv(f"{ENV_PREFIX}PORT", str(defaults.port))),
            directory=os.getenv(f"{ENV_PREFIX}DIRECTORY", defaults.directory),
            buffer_size=int(os.getenv(f"{ENV_PREFIX}BUFFER_SIZE", str(defaults.buffer_size))),
            timeout=float(timeout) if timeout else None,
            strict_parsing=_env_bool(os.getenv(f"{ENV_PREFIX}STRICT", "false")),
            threaded=_env_bool(os.getenv(f"{ENV_PREFIX}THREADED", "false")),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level),
            log_format=os.getenv(f"{ENV_PREFIX}LOG_FORMAT", defaults.log_format),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 64:
            raise ValueError("buffer_size must be >= 64")

        if self.max_request_size < self.buffer_size:
            raise ValueError("max_request_size must be >= buffer_size")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.directory:
            raise ValueError("directory must not be empty")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.log_format}")
