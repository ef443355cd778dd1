"""Per-request middleware chain.

The chain for one request is ``globals ++ route middlewares ++ [handler]``.
Execution is a plain call stack: each middleware receives a cursor bound
to the next position, and ``cursor.next()`` recurses one level deeper.
When the handler returns (or raises), control unwinds back through every
middleware that called ``next``, in reverse order.

A chain is built per request and never shared across requests.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from waypoint.errors import ChainError

if TYPE_CHECKING:
    from waypoint.http.request import Request
    from waypoint.http.response import Response
    from waypoint.middleware.protocol import Middleware, Terminal


class Chain:
    """Cursor over the remaining middlewares plus the terminal handler.

    Each cursor may be advanced once. A middleware that calls ``next``
    twice gets a ``ChainError`` rather than running the downstream chain
    again.
    """

    __slots__ = ("_called", "_index", "_middlewares", "_terminal")

    def __init__(
        self,
        middlewares: tuple[Middleware, ...],
        terminal: Terminal,
        index: int = 0,
    ) -> None:
        self._middlewares = middlewares
        self._terminal = terminal
        self._index = index
        self._called = False

    @property
    def position(self) -> int:
        """Index of the step ``next`` will run (``len(middlewares)`` is the handler)."""
        return self._index

    @property
    def remaining(self) -> tuple[Middleware, ...]:
        """Middlewares that have not run yet, excluding the handler."""
        return self._middlewares[self._index :]

    def next(self, request: Request, response: Response) -> None:
        """Run the rest of the chain, returning once it has completed."""
        if self._called:
            msg = f"next() called more than once at chain position {self._index}"
            raise ChainError(msg)
        self._called = True

        if self._index < len(self._middlewares):
            middleware = self._middlewares[self._index]
            middleware(request, response, Chain(self._middlewares, self._terminal, self._index + 1))
        else:
            self._terminal(request, response)


def build_chain(
    global_middlewares: Sequence[Middleware],
    route_middlewares: Sequence[Middleware],
    terminal: Terminal,
) -> Chain:
    """Build the chain for one request, positioned at its first step."""
    return Chain((*global_middlewares, *route_middlewares), terminal)


def run_chain(
    global_middlewares: Sequence[Middleware],
    route_middlewares: Sequence[Middleware],
    terminal: Terminal,
    request: Request,
    response: Response,
) -> None:
    """Build and execute a chain front to back."""
    build_chain(global_middlewares, route_middlewares, terminal).next(request, response)
