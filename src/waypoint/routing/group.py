"""Route groups — prefix- and middleware-composing views over a Router.

A group is not a separate routing structure. Registering through it
appends to the router's own route table with the group prefix prepended
to the path and the group middlewares prepended to the route middlewares.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from waypoint.routing.registrar import Registrar, join_path

if TYPE_CHECKING:
    from waypoint.middleware.protocol import Handler, Middleware
    from waypoint.routing.route import CompiledRoute
    from waypoint.routing.router import Router


class RouteGroup(Registrar):
    """A view over *router* that registers under *prefix* with *middlewares*.

    Usage::

        api = router.group("/api/v1", [require_token])
        api.get("/users", list_users)          # GET /api/v1/users, [require_token]

        admin = api.group("/admin", [audit])   # /api/v1/admin, [require_token, audit]
        admin.get("/stats", stats)

    Middlewares added with ``use()`` apply to routes registered on the group
    afterwards only. Routes already registered keep the middleware list
    they were registered with, and so do subgroups created earlier.
    """

    __slots__ = ("_middlewares", "_prefix", "_router")

    def __init__(self, router: Router, prefix: str, middlewares: Sequence[Middleware] = ()) -> None:
        self._router = router
        self._prefix = prefix
        self._middlewares: tuple[Middleware, ...] = tuple(middlewares)

    def __repr__(self) -> str:
        return f"RouteGroup(prefix={self._prefix!r}, middlewares={len(self._middlewares)})"

    @property
    def router(self) -> Router:
        return self._router

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._middlewares

    def use(self, *middlewares: Middleware) -> None:
        """Append group middlewares for routes registered from now on."""
        self._router._check_not_frozen()
        self._middlewares = (*self._middlewares, *middlewares)

    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        middlewares: Sequence[Middleware] = (),
    ) -> CompiledRoute:
        """Register on the underlying router at ``prefix + path``."""
        return self._router.add_route(
            method,
            join_path(self._prefix, path),
            handler,
            (*self._middlewares, *middlewares),
        )

    def group(self, prefix: str, middlewares: Sequence[Middleware] = ()) -> RouteGroup:
        """Create a nested group; prefixes and middlewares concatenate, outer first."""
        return RouteGroup(
            self._router,
            join_path(self._prefix, prefix),
            (*self._middlewares, *middlewares),
        )
