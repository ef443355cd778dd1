"""Waypoint exception hierarchy.

Shared across the pattern compiler, Router, chain, middleware, and Server
so every module raises and catches the same types.

Registration-time errors (``ConfigurationError`` and its subclasses) are
fatal to startup. Request-time errors propagate synchronously up the
middleware chain until a middleware or the Server translates them.
"""

from dataclasses import dataclass


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a route, middleware, or config value is invalid.

    Always raised during registration, never while serving.
    """


class PatternCompileError(ConfigurationError):
    """A route template or its regex constraint could not be compiled."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid route template {template!r}: {reason}")


class RouterFrozenError(ConfigurationError):
    """A route or middleware was registered after the router was frozen."""


class RegexEngineError(WaypointError):
    """The regex engine failed while matching a path segment.

    The router treats this as a no-match for the route being tried.
    """


class ChainError(WaypointError):
    """A middleware misused its chain cursor (e.g. called ``next`` twice)."""


@dataclass(frozen=True, slots=True)
class HTTPError(WaypointError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. ``ErrorMiddleware``
    and the Server translate these into responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFound(HTTPError):  # noqa: N818
    """404 — no registered route matches the request method and path."""

    def __init__(self, method: str = "", path: str = "", detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
        # HTTPError is frozen; set the extra attributes past its __setattr__
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "path", path)


class Unauthorized(HTTPError):  # noqa: N818
    """401 — credentials are missing or invalid."""

    def __init__(self, detail: str = "Unauthorized", realm: str = "") -> None:
        headers = (("WWW-Authenticate", f'Bearer realm="{realm}"'),) if realm else ()
        super().__init__(status=401, detail=detail, headers=headers)


class Forbidden(HTTPError):  # noqa: N818
    """403 — the request is understood but refused."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)
