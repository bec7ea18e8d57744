"""
=============================================================================
CONNECTION DISPATCH
=============================================================================

Hands each accepted connection to its own worker so the accept loop never
waits on a client.

=============================================================================
TWO MODES
=============================================================================

    max_workers=None (default)          max_workers=N
    ──────────────────────────          ─────────────
    accept() ─► Thread(task).start()    accept() ─► executor.submit(task)
                 │                                    │
                 └─ detached daemon thread            └─ one of N pooled
                    per connection                       threads; extra
                                                         connections queue

Thread-per-connection matches the simplest possible server: there is no
limit and no queue. The bounded pool caps the number of threads when
that matters more than latency under bursts.

Tasks share nothing but the read-only config. Whatever a task raises is
logged here and never reaches the accept loop.

=============================================================================
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from .connection import Connection


logger = logging.getLogger(__name__)


ConnectionTask = Callable[[Connection], None]


class ConnectionDispatcher:
    """
    Starts one connection task per accepted connection.

    Usage:
        dispatcher = ConnectionDispatcher(server.process_connection)
        listener.start(dispatcher.dispatch)
        ...
        dispatcher.shutdown()
    """

    def __init__(
        self,
        task: ConnectionTask,
        max_workers: Optional[int] = None,
        on_rejected: Optional[ConnectionTask] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            task: Function that fully handles (and closes) one connection.
            max_workers: None for a thread per connection, or a pool size.
            on_rejected: Called with a connection that could not be
                         scheduled (after shutdown). Defaults to closing it.
        """
        self.task = task
        self.max_workers = max_workers
        self.on_rejected = on_rejected or (lambda conn: conn.close())

        self._executor: Optional[ThreadPoolExecutor] = None
        if max_workers is not None:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix="minihttp-worker",
            )

        self._shutdown = False

    def dispatch(self, conn: Connection) -> bool:
        """
        Schedule a connection task.

        Returns:
            True if the task was scheduled, False if it was rejected.
        """
        if self._shutdown:
            self._reject(conn)
            return False

        if self._executor is None:
            thread = threading.Thread(
                target=self._run,
                args=(conn,),
                name=f"minihttp-conn-{conn.id}",
                daemon=True,
            )
            thread.start()
            return True

        try:
            self._executor.submit(self._run, conn)
        except RuntimeError:
            # Executor already shut down
            self._reject(conn)
            return False
        return True

    def _run(self, conn: Connection):
        """Run the task, keeping its failures inside the worker."""
        try:
            self.task(conn)
        except Exception:
            logger.exception(f"[{conn.id}] Connection task failed")
            conn.close()

    def _reject(self, conn: Connection):
        logger.warning(f"[{conn.id}] Rejecting connection from {conn.client_ip}: dispatcher is shut down")
        try:
            self.on_rejected(conn)
        except Exception:
            logger.exception(f"[{conn.id}] Rejection handler failed")
            conn.close()

    def shutdown(self, wait: bool = True):
        """
        Stop accepting new tasks.

        In-flight tasks always run to completion. With a pool and
        wait=True this blocks until they have; detached threads are
        never joined.
        """
        self._shutdown = True
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
