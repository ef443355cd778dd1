"""Router — per-method route table with first-match dispatch.

Routes are registered during setup, then the router is frozen and only
read while serving. Matching walks the method's routes in registration
order and returns the first one whose segments all match: first match,
not best match. Register specific routes before general ones::

    router.get("/users/:id([0-9]+)", show_user_by_id)   # tried first
    router.get("/users/:name", show_user_by_name)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

from waypoint.config import RouterConfig
from waypoint.context import Context
from waypoint.errors import ConfigurationError, RegexEngineError, RouteNotFound, RouterFrozenError
from waypoint.http.response import Response
from waypoint.middleware.chain import run_chain
from waypoint.middleware.protocol import check_handler, takes_context
from waypoint.routing.group import RouteGroup
from waypoint.routing.pattern import ParamSegment, compile_pattern, split_path
from waypoint.routing.registrar import Registrar
from waypoint.routing.route import CompiledRoute, RouteMatch

if TYPE_CHECKING:
    from waypoint.http.request import Request
    from waypoint.middleware.protocol import Handler, Middleware, Terminal
    from waypoint.server import Server

logger = logging.getLogger("waypoint.routing")

HTTP_METHODS: frozenset[str] = frozenset(
    {"CONNECT", "DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT", "TRACE"}
)


class MiddlewareList:
    """The router's global middleware list.

    Append-only during setup (``router.middlewares.use(mw)``); frozen
    together with the router.
    """

    __slots__ = ("_frozen", "_items")

    def __init__(self) -> None:
        self._items: list[Middleware] = []
        self._frozen = False

    def use(self, *middlewares: Middleware) -> None:
        """Append global middlewares. They run before any route middleware."""
        if self._frozen:
            msg = "Cannot add middleware after the router has been frozen."
            raise RouterFrozenError(msg)
        for middleware in middlewares:
            if not callable(middleware):
                msg = f"Middleware {middleware!r} is not callable."
                raise ConfigurationError(msg)
            self._items.append(middleware)

    def snapshot(self) -> tuple[Middleware, ...]:
        return tuple(self._items)

    def freeze(self) -> None:
        self._frozen = True

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


class Router(Registrar):
    """Route table, global middlewares, registration, and dispatch.

    Usage::

        router = Router()
        router.middlewares.use(ErrorMiddleware())
        router.get("/users/:id([0-9]+)", show_user)
        router.freeze()

        match = router.dispatch("GET", "/users/42")   # path_params == {"id": "42"}
        response = router.handle(request)

    Thread safety:
        Registration is single-threaded setup. After ``freeze()`` the table
        and the global middleware tuple are never written again, so any
        number of threads may dispatch concurrently without locks.
    """

    __slots__ = ("_config", "_frozen", "_globals", "_middlewares", "_routes")

    def __init__(self, config: RouterConfig | None = None) -> None:
        self._config: RouterConfig = config or RouterConfig()
        self._routes: dict[str, list[CompiledRoute]] = {}
        self._middlewares = MiddlewareList()
        self._globals: tuple[Middleware, ...] | None = None
        self._frozen = False

    def __repr__(self) -> str:
        return f"Router(routes={len(self.routes)}, middlewares={len(self._middlewares)}, frozen={self._frozen})"

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def middlewares(self) -> MiddlewareList:
        return self._middlewares

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> list[CompiledRoute]:
        """Every registered route, in registration order within each method."""
        return [route for table in self._routes.values() for route in table]

    # -- Registration --

    def use(self, *middlewares: Middleware) -> None:
        """Append global middlewares (same as ``router.middlewares.use``)."""
        self._middlewares.use(*middlewares)

    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        middlewares: Sequence[Middleware] = (),
    ) -> CompiledRoute:
        """Compile *path* and append a route for *method*.

        Raises ``PatternCompileError`` for a malformed template or regex,
        ``ConfigurationError`` for an unknown method or a bad handler, and
        ``RouterFrozenError`` once the router is frozen.
        """
        self._check_not_frozen()
        method = method.upper()
        if method not in HTTP_METHODS:
            msg = f"Unknown HTTP method {method!r} for route {path!r}."
            raise ConfigurationError(msg)
        check_handler(handler)
        for middleware in middlewares:
            if not callable(middleware):
                msg = f"Middleware {middleware!r} for route {method} {path!r} is not callable."
                raise ConfigurationError(msg)

        pattern = compile_pattern(path, allow_duplicate_params=self._config.allow_duplicate_params)
        route = CompiledRoute(
            method=method,
            pattern=pattern,
            handler=handler,
            middlewares=tuple(middlewares),
            takes_context=takes_context(handler),
        )
        self._routes.setdefault(method, []).append(route)
        logger.debug("registered %s %s (%d middleware)", method, path, len(route.middlewares))
        return route

    def group(self, prefix: str, middlewares: Sequence[Middleware] = ()) -> RouteGroup:
        """Return a view that registers under *prefix* with *middlewares* prepended."""
        return RouteGroup(self, prefix, middlewares)

    def freeze(self) -> None:
        """Make the route table and global middlewares read-only. Idempotent."""
        if self._frozen:
            return
        self._middlewares.freeze()
        self._globals = self._middlewares.snapshot()
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot register routes after the router has been frozen. "
                "Register routes and middleware before serving requests."
            )
            raise RouterFrozenError(msg)

    # -- Dispatch --

    def dispatch(self, method: str, path: str) -> RouteMatch:
        """Find the first route matching *method* and *path*.

        Returns a ``RouteMatch`` with a fresh ``path_params`` dict.
        Raises ``RouteNotFound`` when no route matches. A query string on
        *path* is ignored.
        """
        method = method.upper()
        parts = split_path(path)
        for route in self._routes.get(method, ()):
            try:
                params = route.pattern.match(parts)
            except RegexEngineError:
                logger.warning("regex failure matching %s %s against %s", method, path, route.path, exc_info=True)
                continue
            if params is not None:
                return RouteMatch(route=route, path_params=params)
        raise RouteNotFound(method, path, f"No route matches {method} {path!r}")

    def handle(
        self,
        request: Request,
        response: Response | None = None,
        server: Server | None = None,
    ) -> Response:
        """Dispatch *request* and run its chain; return the response.

        Errors raised by middlewares or the handler propagate to the caller
        unless a middleware catches them. When no route matches, the request
        runs through the global middlewares only (terminal raises
        ``RouteNotFound``), or, with
        ``RouterConfig(not_found_through_globals=False)``, ``RouteNotFound``
        is raised without running any middleware.
        """
        if response is None:
            response = Response()
        global_middlewares = self._globals if self._globals is not None else self._middlewares.snapshot()

        try:
            match = self.dispatch(request.method, request.path)
        except RouteNotFound:
            logger.debug("no route for %s %s", request.method, request.path)
            if not self._config.not_found_through_globals:
                raise
            run_chain(global_middlewares, (), _raise_not_found, request, response)
            return response

        request.path_params = match.path_params
        context = Context(request=request, response=response, router=self, server=server)
        run_chain(
            global_middlewares,
            match.route.middlewares,
            self._terminal(match.route, context),
            request,
            response,
        )
        return response

    def _terminal(self, route: CompiledRoute, context: Context) -> Terminal:
        handler = route.handler

        if route.takes_context:

            def call_with_context(request: Request, response: Response) -> None:
                ctx = context
                if request is not ctx.request or response is not ctx.response:
                    ctx = Context(request=request, response=response, router=ctx.router, server=ctx.server)
                handler(ctx)

            return call_with_context

        def call_with_pair(request: Request, response: Response) -> None:
            handler(request, response)

        return call_with_pair

    # -- Introspection --

    def format_routes(self) -> str:
        """Render the route table for startup logs."""
        routes = self.routes
        if not routes:
            return "No routes registered"
        rule = "=" * 80
        lines = [
            "Registered routes:",
            rule,
            f"  {'METHOD':<8} | {'PATH':<40} | DETAILS",
            rule,
        ]
        for route in routes:
            details = []
            if route.pattern.has_params:
                details.append("params")
            if route.middlewares:
                details.append(f"middleware x{len(route.middlewares)}")
            lines.append(f"  {route.method:<8} | {route.path:<40} | {', '.join(details) or '-'}")
            for segment in route.segments:
                if isinstance(segment, ParamSegment):
                    lines.append(f"           |   param {segment}")
        lines.append(rule)
        lines.append(f"  Total: {len(routes)} route(s)")
        return "\n".join(lines)


def _raise_not_found(request: Request, response: Response) -> None:
    raise RouteNotFound(request.method, request.path, f"No route matches {request.method} {request.path!r}")
