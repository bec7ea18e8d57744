"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes files under the configured directory:

    GET  /files/{name}   → 200 + file bytes (application/octet-stream)
    POST /files/{name}   → 201, request body written to the file

=============================================================================
PATH CONSTRUCTION
=============================================================================

The name is everything after "/files/", taken verbatim:

    directory=""          name="a.txt"   → "a.txt"
    directory="/tmp/d"    name="a.txt"   → "/tmp/d/a.txt"
    directory="/tmp/d"    name="x/../y"  → "/tmp/d/x/../y"

There is NO traversal check by default. With confine_files=True the path
is resolved and anything outside the directory is answered with 404:

    full_path = (root / name).resolve()
    full_path.relative_to(root)     # raises ValueError when outside

=============================================================================
ERRORS
=============================================================================

"Cannot open" is always 404, whatever the cause (including names open()
rejects outright, such as ones with a NUL byte). For POST the target is
opened BEFORE anything is written, so a 404 never leaves a partial file
behind. A write error after a successful open propagates and becomes 500.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import ServerConfig
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ok, created, not_found, OCTET_STREAM


logger = logging.getLogger(__name__)


FILES_PREFIX = "/files/"


class FileHandler:
    """
    Handler for the /files/ routes.

    Holds the read-only config; safe to share between worker threads.

    Usage:
        files = FileHandler(config)
        router.get("/files/")(files.read)
        router.post("/files/")(files.write)
    """

    def __init__(self, config: ServerConfig):
        """
        Initialize the file handler.

        Args:
            config: Server configuration (directory, confine_files).
        """
        self.directory = config.directory
        self.confine_files = config.confine_files

    def resolve(self, target: str) -> Optional[str]:
        """
        Map a request target onto a filesystem path.

        Returns:
            The path to open, or None if confine_files rejects it.
        """
        name = target[len(FILES_PREFIX):]
        path = self.directory + "/" + name if self.directory else name

        if self.confine_files:
            root = Path(self.directory or ".").resolve()
            try:
                Path(path).resolve().relative_to(root)
            except ValueError:
                logger.warning(f"Path traversal attempt: {name}")
                return None

        return path

    def read(self, request: HTTPRequest) -> HTTPResponse:
        """
        Serve a file's bytes.

        Returns:
            200 with the content as application/octet-stream, or 404.
        """
        path = self.resolve(request.target)
        if path is None:
            return not_found()

        try:
            with open(path, "rb") as f:
                content = f.read()
        except (OSError, ValueError) as e:
            logger.debug(f"Cannot read {path}: {e}")
            return not_found()

        return ok(content, OCTET_STREAM)

    def write(self, request: HTTPRequest) -> HTTPResponse:
        """
        Write the request body to a file, truncating or creating it.

        Returns:
            201 Created with no content, or 404 if the file cannot be opened.
        """
        path = self.resolve(request.target)
        if path is None:
            return not_found()

        try:
            f = open(path, "wb")
        except (OSError, ValueError) as e:
            logger.debug(f"Cannot open {path} for writing: {e}")
            return not_found()

        with f:
            f.write(request.body)

        logger.info(f"Wrote {len(request.body)} bytes to {path}")
        return created()
