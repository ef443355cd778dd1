"""Waypoint — a small synchronous HTTP routing and middleware core.

Routes are matched first-hit in registration order; each request runs
through ``globals + route middlewares + handler`` as a plain call stack.

Basic usage::

    from waypoint import Router, Server

    router = Router()
    router.get("/users/:id([0-9]+)", lambda ctx: ctx.json({"id": ctx.param("id")}))

    Server(router).run()

Redis sessions (``pip install waypoint[redis]``)::

    from waypoint.sessions import RedisBackend, SessionStore
    store = SessionStore(RedisBackend.from_url("redis://localhost:6379/0"))
"""

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "ConfigurationError",
    "Context",
    "HTTPError",
    "Middleware",
    "PatternCompileError",
    "Request",
    "Response",
    "RouteGroup",
    "RouteNotFound",
    "Router",
    "RouterConfig",
    "RouterFrozenError",
    "Server",
    "ServerConfig",
    "WaypointError",
]

_LAZY = {
    "Chain": "waypoint.middleware.chain",
    "ConfigurationError": "waypoint.errors",
    "Context": "waypoint.context",
    "HTTPError": "waypoint.errors",
    "Middleware": "waypoint.middleware.protocol",
    "PatternCompileError": "waypoint.errors",
    "Request": "waypoint.http.request",
    "Response": "waypoint.http.response",
    "RouteGroup": "waypoint.routing.group",
    "RouteNotFound": "waypoint.errors",
    "Router": "waypoint.routing.router",
    "RouterConfig": "waypoint.config",
    "RouterFrozenError": "waypoint.errors",
    "Server": "waypoint.server",
    "ServerConfig": "waypoint.config",
    "WaypointError": "waypoint.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import waypoint`` cheap while providing a flat top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module 'waypoint' has no attribute {name!r}"
        raise AttributeError(msg)
    import importlib

    return getattr(importlib.import_module(module_name), name)
