"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All runtime settings live in one frozen dataclass, built once at startup
and handed to every connection task.

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
    │      └── python -m minihttp --directory /tmp/data                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── MINIHTTP_PORT=3000 python -m minihttp                     │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The config is FROZEN. Worker threads read it concurrently and nothing may
change it after the listener starts. Use with_overrides() to derive a new
one instead.

=============================================================================
"""

import os
from dataclasses import dataclass, replace
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout

    FILES
    - directory, confine_files

    THREADING
    - max_workers

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to. All interfaces by default.
    """

    port: int = 4221
    """
    The port number to listen on. 0 asks the OS for a free port.
    """

    backlog: int = 5
    """
    Maximum number of queued connections waiting for accept().
    """

    buffer_size: int = 1024
    """
    Size of the single read per connection, in bytes.
    Anything the client sends beyond this is never seen.
    """

    timeout: Optional[float] = 30.0
    """
    Per-connection socket timeout in seconds. None blocks forever.
    A read that times out is answered with 400.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    directory: str = ""
    """
    Base directory for /files/. Empty means file names are used as given,
    relative to the working directory.
    """

    confine_files: bool = False
    """
    Reject /files/ names that resolve outside `directory` (404).
    Off by default: names are joined to the directory unchecked.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREADING
    # ─────────────────────────────────────────────────────────────────────

    max_workers: Optional[int] = None
    """
    None = one new thread per connection.
    N    = a bounded pool of N worker threads.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    log_format: str = "text"
    """
    Access log format: 'text' or 'json'.
    """

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        MINIHTTP_HOST       Server host (default: 0.0.0.0)
        MINIHTTP_PORT       Server port (default: 4221)
        MINIHTTP_DIRECTORY  Base directory for /files/ (default: "")
        MINIHTTP_WORKERS    Worker pool size (default: thread per connection)
        MINIHTTP_LOG_LEVEL  Logging level (default: INFO)

        =====================================================================
        """
        workers = os.getenv("MINIHTTP_WORKERS")
        return cls(
            host=os.getenv("MINIHTTP_HOST", "0.0.0.0"),
            port=int(os.getenv("MINIHTTP_PORT", "4221")),
            directory=os.getenv("MINIHTTP_DIRECTORY", ""),
            max_workers=int(workers) if workers else None,
            log_level=os.getenv("MINIHTTP_LOG_LEVEL", "INFO").upper(),
        )

    def with_overrides(self, **changes) -> "ServerConfig":
        """
        Return a copy with some fields replaced.

        None values are ignored, so argparse results can be passed
        straight through:

            config = ServerConfig.from_env().with_overrides(port=args.port)
        """
        changes = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **changes)

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad value fails before the first
        connection is accepted.

        Raises:
            ValueError: If any value is out of range.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log format: {self.log_format}")
