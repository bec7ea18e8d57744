"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for exactly one request/response
exchange.

=============================================================================
ONE READ, ONE WRITE, ONE CLOSE
=============================================================================

Each connection does:

    recv(buffer_size)   ONE read; whatever arrived is the request
    sendall(response)   ONE write; sendall() loops until every byte is out
    close()             exactly once, from the `with conn:` block

There is no buffering across reads and no keep-alive. A request larger
than the buffer is truncated; a request split across TCP segments is seen
only as far as the first segment.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    READING ──────► PARSED ──────► ROUTED ──────► SERIALIZED ──────► CLOSED
       │               │              │                ▲
       │               │              │                │
       └───────────────┴──────────────┴────────────────┘
              read failure / 400 / 404 / 500 go straight
              to SERIALIZED with an error status

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional
import uuid


logger = logging.getLogger(__name__)


# Bounds on reading leftover client bytes while closing
DRAIN_TIMEOUT = 0.5
DRAIN_MAX_BYTES = 64 * 1024


class ConnectionState(Enum):
    """Lifecycle states of a connection task."""
    READING = "reading"          # Accepted, waiting for the request bytes
    PARSED = "parsed"            # Request line and headers parsed
    ROUTED = "routed"            # A handler produced a response
    SERIALIZED = "serialized"    # Response bytes built (and written)
    CLOSED = "closed"            # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when the connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.READING
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    buffer_size: int = 1024
    timeout: Optional[float] = 30.0

    def __post_init__(self):
        """Apply the per-connection timeout to the client socket."""
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with a single recv().

        Returns:
            The bytes received (possibly b"" if the client closed without
            sending), or None if the read failed or timed out.
        """
        self.state = ConnectionState.READING

        try:
            return self.socket.recv(self.buffer_size)
        except socket.timeout:
            logger.debug(f"[{self.id}] Read timed out")
            return None
        except OSError as e:
            logger.debug(f"[{self.id}] Read failed: {e}")
            return None

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall(), which keeps writing until every byte is sent or an
        error occurs. A failed write is not retried.

        Returns:
            True if the send succeeded, False if the connection was lost.
        """
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Safe to call more than once.

        Sends FIN first, then briefly drains anything the client still had
        in flight so the close does not turn into a reset that could discard
        the response before the client reads it.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def _drain(self):
        """
        Discard leftover request bytes until EOF, within a total budget of
        DRAIN_MAX_BYTES and DRAIN_TIMEOUT seconds.
        """
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0

        try:
            while drained < DRAIN_MAX_BYTES:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self.socket.settimeout(remaining)
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # Includes socket.timeout

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allow `with conn:` so the socket is closed on every path:

            with conn:
                data = conn.read_request()
                conn.send_response(response)
            # closed here
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
