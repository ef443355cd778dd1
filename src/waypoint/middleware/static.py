"""Static file serving middleware.

Serves files from a directory for matching URL prefixes. Falls through to
the next step in the chain for non-matching paths and missing files, so
routes and the 404 handling behind it still apply.
"""

import mimetypes
from pathlib import Path

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.chain import Chain


class StaticFiles:
    """Middleware that serves static files from a directory.

    Security: resolves symlinks and verifies the final path is within the
    configured directory. Anything that escapes it gets a 403.

    Usage::

        router.use(StaticFiles("./public", prefix="/static"))

        # Root-level serving with directory index files
        router.use(StaticFiles("./site", prefix="/", cache_control="no-cache"))
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
        enable_cache: bool = True,
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control if enable_cache else "no-cache"

        # Root prefix "/" normalizes to ""
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def directory(self) -> Path:
        return self._directory

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        """Serve a static file or fall through."""
        if request.method not in ("GET", "HEAD"):
            chain.next(request, response)
            return

        path = request.path
        if self._prefix:
            if not path.startswith(self._prefix + "/") and path != self._prefix:
                chain.next(request, response)
                return
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        try:
            file_path = (self._directory / relative).resolve() if relative else self._directory
        except (OSError, ValueError):
            # Unresolvable, e.g. an embedded NUL byte
            chain.next(request, response)
            return
        if not file_path.is_relative_to(self._directory):
            response.set_status(403)
            response.text("Forbidden")
            return

        if file_path.is_dir():
            file_path = file_path / self._index

        if not file_path.is_file():
            chain.next(request, response)
            return

        self._serve_file(file_path, request, response)

    def _serve_file(self, file_path: Path, request: Request, response: Response) -> None:
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/") or content_type in ("application/javascript", "application/json"):
            content_type = f"{content_type}; charset=utf-8"

        response.set_status(200)
        response.set_header("Content-Type", content_type)
        response.set_header("Cache-Control", self._cache_control)
        if request.method == "HEAD":
            response.body.clear()
            return
        response.set_body(file_path.read_bytes())
