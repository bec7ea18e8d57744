"""
=============================================================================
CORE NETWORKING
=============================================================================

    socket_server.py  → SocketServer: bind, listen, accept loop
    connection.py     → Connection: one read, one write, one close
    workers.py        → ConnectionDispatcher: thread per connection or pool

    SocketServer.accept()
         │
         ▼
    Connection ──► ConnectionDispatcher.dispatch() ──► worker thread
                                                        │
                                                        ▼
                                              HTTPServer.process_connection

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .workers import ConnectionDispatcher

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ConnectionDispatcher",
]
