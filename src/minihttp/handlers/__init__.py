"""
=============================================================================
BUILT-IN HANDLERS
=============================================================================

    basic.py  → echo, user-agent, index
    files.py  → GET/POST /files/

register_builtin_routes() installs them on a router in match order.
Order matters: the first matching route wins.

=============================================================================
"""

from ..config import ServerConfig
from ..http.router import Router
from .basic import echo, user_agent, index, ECHO_PREFIX
from .files import FileHandler, FILES_PREFIX


def register_builtin_routes(router: Router, config: ServerConfig) -> Router:
    """
    Register the built-in route table.

    Args:
        router: Router to populate.
        config: Server configuration, captured by the file handler.

    Returns:
        The same router, for chaining.
    """
    files = FileHandler(config)

    router.route(ECHO_PREFIX)(echo)
    router.get(FILES_PREFIX)(files.read)
    router.post(FILES_PREFIX)(files.write)
    router.route("/user-agent")(user_agent)
    router.route("/", exact=True)(index)

    return router


__all__ = [
    "register_builtin_routes",
    "FileHandler",
    "echo",
    "user_agent",
    "index",
]
