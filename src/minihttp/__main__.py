"""
=============================================================================
COMMAND LINE ENTRY POINT
=============================================================================

    python -m minihttp                          # 0.0.0.0:4221
    python -m minihttp --directory /tmp/data    # base dir for /files/
    python -m minihttp --port 8080 --workers 8  # bounded worker pool

Settings come from MINIHTTP_* environment variables first; flags given on
the command line override them.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                              # Run with defaults
  python -m minihttp --directory /tmp/data        # Serve /files/ from /tmp/data
  python -m minihttp --port 3000 --workers 8      # Custom port, 8 worker threads
  python -m minihttp --directory . --confine-files
        """
    )

    parser.add_argument(
        "--directory", "-d",
        default=None,
        help="Base directory for /files/ (default: names used as given)"
    )

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

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Worker pool size (default: one thread per connection)"
    )

    parser.add_argument(
        "--confine-files",
        action="store_true",
        default=None,
        help="Answer 404 for /files/ names that resolve outside --directory"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def main(argv=None):
    """
    Main CLI entry point.

    Exit codes: 0 on clean shutdown, 1 if the server could not start,
    2 for invalid arguments.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = ServerConfig.from_env().with_overrides(
        host=args.host,
        port=args.port,
        directory=args.directory,
        max_workers=args.workers,
        confine_files=args.confine_files,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    try:
        server = HTTPServer(config)
    except ValueError as e:
        parser.error(str(e))

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
