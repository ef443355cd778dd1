"""Server facade — owns a Router and turns it into a WSGI application.

The Server is where request-time errors stop. ``Router.handle`` lets
errors propagate; ``Server.handle`` never raises. Anything that reaches
it is mapped to a default response: ``RouteNotFound`` to 404, other
``HTTPError`` to its status, everything else to 500.
"""

from __future__ import annotations

import logging
import threading
import traceback
from collections.abc import Callable, Iterable
from typing import Any, TypeAlias

from waypoint.config import ServerConfig
from waypoint.errors import HTTPError, RouteNotFound
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.router import Router

logger = logging.getLogger("waypoint.server")

StartResponse: TypeAlias = "Callable[[str, list[tuple[str, str]]], Any]"


class Server:
    """A WSGI application around a ``Router``.

    Usage::

        server = Server()
        server.router.get("/", lambda ctx: ctx.text("hello"))
        server.run()                     # dev server, or hand `server` to any WSGI host

    The router is frozen on the first request (or on ``freeze()``), after
    which no routes or middlewares can be added.
    """

    __slots__ = ("_freeze_lock", "_frozen", "config", "router")

    def __init__(self, router: Router | None = None, config: ServerConfig | None = None) -> None:
        self.router = router if router is not None else Router()
        self.config = config or ServerConfig()
        self._frozen = False
        self._freeze_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Server(host={self.config.host!r}, port={self.config.port}, router={self.router!r})"

    # -- Lifecycle --

    def freeze(self) -> None:
        """Freeze the router. Thread-safe and idempotent."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self.router.freeze()
            self._frozen = True
            if self.config.show_routes_on_startup:
                logger.info("\n%s", self.router.format_routes())

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with the standard library's single-threaded WSGI server.

        Meant for development. Production deployments should pass the
        Server to a real WSGI host.
        """
        from wsgiref.simple_server import make_server

        self.freeze()
        _host = host or self.config.host
        _port = port or self.config.port
        with make_server(_host, _port, self) as httpd:
            logger.info("Serving on http://%s:%d", _host, _port)
            try:
                httpd.serve_forever()
            except KeyboardInterrupt:
                logger.info("Shutting down")

    # -- Request handling --

    def handle(self, request: Request) -> Response:
        """Run *request* through the router; always return a response."""
        self.freeze()
        response = Response()
        try:
            self.router.handle(request, response, server=self)
        except RouteNotFound:
            logger.debug("404 %s %s", request.method, request.path)
            return self._fallback(404, self.config.not_found_body)
        except HTTPError as exc:
            logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
            fallback = self._fallback(exc.status, exc.detail or Response(status=exc.status).reason)
            for name, value in exc.headers:
                fallback.set_header(name, value)
            return fallback
        except Exception as exc:
            logger.exception("500 %s %s", request.method, request.path)
            body = self.config.internal_error_body
            if self.config.debug:
                body = f"{body}\n\n{''.join(traceback.format_exception(exc))}"
            return self._fallback(500, body)
        return response

    @staticmethod
    def _fallback(status: int, body: str) -> Response:
        response = Response(status=status)
        response.text(body)
        return response

    def __call__(self, environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        """WSGI entry point."""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length > self.config.max_content_length:
            response = self._fallback(413, "Payload Too Large")
        else:
            response = self.handle(Request.from_wsgi(environ))

        start_response(f"{response.status} {response.reason}", response.header_items())
        if environ.get("REQUEST_METHOD", "").upper() == "HEAD":
            return [b""]
        return [bytes(response.body)]
