"""Shared registration surface for Router and RouteGroup.

Both expose the same ``get``/``post``/... and ``mount`` sugar; each only
implements ``add_route`` and ``group``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, TypeAlias

from waypoint.errors import ConfigurationError

if TYPE_CHECKING:
    from waypoint.middleware.protocol import Handler, Middleware
    from waypoint.routing.group import RouteGroup
    from waypoint.routing.route import CompiledRoute

RouteEntry: TypeAlias = "tuple[str, str, Handler]"


def join_path(prefix: str, path: str) -> str:
    """Join a mount/group prefix and a sub-path with exactly one slash."""
    prefix = prefix.rstrip("/")
    if not path or path == "/":
        return prefix or "/"
    return f"{prefix}/{path.lstrip('/')}"


def route_entries(entries: Iterable[RouteEntry] | Any) -> list[RouteEntry]:
    """Normalize mount input: an iterable of triples or an object with ``routes``."""
    if not isinstance(entries, (list, tuple)) and hasattr(entries, "routes"):
        entries = entries.routes
    result: list[RouteEntry] = []
    for entry in entries:
        if not isinstance(entry, (list, tuple)) or len(entry) != 3:
            msg = f"Mount entries must be (method, path, handler) triples, got {entry!r}."
            raise ConfigurationError(msg)
        method, path, handler = entry
        result.append((method, path, handler))
    return result


class Registrar(ABC):
    """Method-named registration helpers over ``add_route``."""

    __slots__ = ()

    @abstractmethod
    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        middlewares: Sequence[Middleware] = (),
    ) -> CompiledRoute:
        """Register one route and return it."""

    @abstractmethod
    def group(self, prefix: str, middlewares: Sequence[Middleware] = ()) -> RouteGroup:
        """Return a nested registration view under *prefix*."""

    def get(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for GET at *path*, with optional route middlewares."""
        return self.add_route("GET", path, handler, middlewares)

    def post(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for POST at *path*, with optional route middlewares."""
        return self.add_route("POST", path, handler, middlewares)

    def put(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for PUT at *path*, with optional route middlewares."""
        return self.add_route("PUT", path, handler, middlewares)

    def delete(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for DELETE at *path*, with optional route middlewares."""
        return self.add_route("DELETE", path, handler, middlewares)

    def patch(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for PATCH at *path*, with optional route middlewares."""
        return self.add_route("PATCH", path, handler, middlewares)

    def head(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for HEAD at *path*, with optional route middlewares."""
        return self.add_route("HEAD", path, handler, middlewares)

    def options(self, path: str, handler: Handler, middlewares: Sequence[Middleware] = ()) -> CompiledRoute:
        """Register *handler* for OPTIONS at *path*, with optional route middlewares."""
        return self.add_route("OPTIONS", path, handler, middlewares)

    def mount(
        self,
        prefix: str,
        entries: Iterable[RouteEntry] | Any,
        middlewares: Sequence[Middleware] = (),
    ) -> list[CompiledRoute]:
        """Register ``(method, subpath, handler)`` triples under *prefix*.

        Sugar over repeated ``add_route`` calls: each entry becomes a normal
        route at ``prefix + subpath``, in entry order. *entries* may also be
        any object (typically a module) with a ``routes`` attribute::

            router.mount("/api", [
                ("GET", "/users", list_users),
                ("POST", "/users", create_user),
            ])

            from myapp.routes import admin
            router.mount("/admin", admin)
        """
        return [
            self.add_route(method, join_path(prefix, path), handler, middlewares)
            for method, path, handler in route_entries(entries)
        ]
