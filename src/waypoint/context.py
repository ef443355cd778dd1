"""Per-request handler context.

``Context`` bundles the request, response, router, and server so a
handler can take one argument instead of threading them through by hand.
It owns none of them and lives exactly as long as the request.

Usage::

    def show_user(ctx: Context) -> None:
        ctx.json({"id": ctx.param("id")})

    router.get("/users/:id([0-9]+)", show_user)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from waypoint.http.request import Request
    from waypoint.http.response import Response
    from waypoint.routing.router import Router
    from waypoint.server import Server


@dataclass(frozen=True, slots=True)
class Context:
    """Request, response, router, and server for one request.

    ``server`` is ``None`` when the router is driven directly rather than
    through a ``Server``.
    """

    request: Request
    response: Response
    router: Router
    server: Server | None = None

    # -- Request shortcuts --

    @property
    def state(self) -> dict[str, Any]:
        """The request's side-channel dict shared with middlewares."""
        return self.request.state

    def param(self, name: str, default: str | None = None) -> str | None:
        return self.request.path_params.get(name, default)

    def query(self, name: str, default: str | None = None) -> str | None:
        return self.request.query.get(name, default)

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.request.headers.get(name, default)

    # -- Response shortcuts --

    def set_status(self, status: int) -> None:
        self.response.set_status(status)

    def text(self, content: str, status: int | None = None) -> None:
        if status is not None:
            self.response.set_status(status)
        self.response.text(content)

    def html(self, content: str, status: int | None = None) -> None:
        if status is not None:
            self.response.set_status(status)
        self.response.html(content)

    def json(self, data: Any, status: int | None = None) -> None:
        if status is not None:
            self.response.set_status(status)
        self.response.json(data)
