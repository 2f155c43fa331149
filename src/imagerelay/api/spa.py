"""Static file serving for the single-page application.

:class:`SPAStaticFiles` is Starlette's ``StaticFiles`` with one addition:
when a ``GET``/``HEAD`` request misses and its path does not start with
``/api``, the application's ``index.html`` is returned instead of a 404 so
that client-side routes survive a page reload.

Resolution order for a request that reaches the mount:

1. An existing file under the public directory is served as-is (correct
   MIME type, conditional headers, ranges).
2. ``/api...`` paths and non-GET methods keep the normal 404/405.
3. Anything else receives the entry page, or a plain-text 500 if the entry
   page cannot be read.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from starlette.exceptions import HTTPException
from starlette.responses import HTMLResponse, PlainTextResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

_FALLBACK_METHODS = ("GET", "HEAD")


class SPAStaticFiles(StaticFiles):
    """StaticFiles that falls back to the entry page for client-side routes.

    Args:
        directory: Directory holding the built application.
        index_path: Entry page returned for unmatched routes.
        api_prefix: Paths starting with this prefix never fall back.
    """

    def __init__(
        self,
        *,
        directory: Path,
        index_path: Path,
        api_prefix: str = "/api",
    ) -> None:
        super().__init__(directory=directory, check_dir=False)
        self.index_path = index_path
        self.api_prefix = api_prefix

    async def check_config(self) -> None:
        # A missing public directory must still produce the entry-page error
        # rather than a startup-style RuntimeError on every request.
        if not os.path.isdir(self.directory):
            logger.warning("Public directory not found: %s", self.directory)
            return
        await super().check_config()

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except HTTPException as exc:
            if exc.status_code != 404 or not self._falls_back(scope):
                raise
        return self.entry_page(scope["path"])

    def _falls_back(self, scope: Scope) -> bool:
        return scope["method"] in _FALLBACK_METHODS and not scope["path"].startswith(
            self.api_prefix
        )

    def entry_page(self, request_path: str) -> Response:
        """Return the entry page, or a plain-text 500 if it cannot be read."""
        logger.debug("Fallback route triggered for path: %s. Sending index.html.", request_path)
        try:
            content = self.index_path.read_bytes()
        except OSError as exc:
            logger.error("Error sending index.html: %s", exc)
            return PlainTextResponse("Error loading application.", status_code=500)
        return HTMLResponse(content=content)
