"""
=============================================================================
COMMAND LINE INTERFACE
=============================================================================

    python -m bytehttp --directory /tmp/files
    bytehttp --port 8080 --threaded

Settings come from BYTEHTTP_* environment variables first (see
ServerConfig.from_env); any flag given on the command line wins.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .server import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bytehttp",
        description="Minimal HTTP/1.1 server on raw sockets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Endpoints:
  GET  /                  200, empty body
  GET  /user-agent        echoes the User-Agent header
  GET  /echo/<text>       echoes <text>
  GET  /files/<name>      downloads <name> from --directory
  POST /files/<name>      uploads the request body as <name>

Examples:
  python -m bytehttp                             # 0.0.0.0:4221
  python -m bytehttp --directory /tmp/files      # file storage root
  python -m bytehttp --port 8080 --threaded      # thread per connection
  python -m bytehttp --strict -l DEBUG           # reject unknown methods
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 0.0.0.0)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 4221)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FEATURE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Directory for /files uploads and downloads (default: /tmp/bytehttp)"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Reject unknown methods (405) and HTTP versions (505)"
    )

    parser.add_argument(
        "--threaded",
        action="store_true",
        default=None,
        help="Handle each connection on its own thread"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=list(LOG_LEVELS),
        type=str.upper,
        default=None,
        help="Logging level (default: INFO)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"bytehttp {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment configuration with command-line overrides applied."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.directory is not None:
        config.directory = args.directory
    if args.strict is not None:
        config.strict_parsing = args.strict
    if args.threaded is not None:
        config.threaded = args.threaded
    if args.log_level is not None:
        config.log_level = args.log_level

    return config


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = create_app(config)
        server.run()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
