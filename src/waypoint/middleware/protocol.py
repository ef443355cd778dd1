"""Middleware and handler protocols.

A middleware is any callable matching::

    def my_mw(request: Request, response: Response, chain: Chain) -> None: ...

No base class required. The router checks the shape, not the lineage.
Calling ``chain.next(request, response)`` runs the rest of the chain and
returns when it is done; not calling it ends the chain right there, and
whatever the middleware wrote to the response is the final response.

A handler is the terminal step. It takes either a single ``Context`` or
the two-argument ``(request, response)`` form.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

from waypoint.errors import ConfigurationError

if TYPE_CHECKING:
    from waypoint.context import Context
    from waypoint.http.request import Request
    from waypoint.http.response import Response
    from waypoint.middleware.chain import Chain


class Middleware(Protocol):
    """Protocol for waypoint middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def timing(request, response, chain):
            start = time.monotonic()
            chain.next(request, response)
            response.set_header("X-Time", f"{time.monotonic() - start:.3f}")

        # Class middleware
        class RequireJSON:
            def __call__(self, request, response, chain):
                ...
    """

    def __call__(self, request: Request, response: Response, chain: Chain) -> None: ...


ContextHandler: TypeAlias = "Callable[[Context], Any]"
RequestHandler: TypeAlias = "Callable[[Request, Response], Any]"
Handler: TypeAlias = "ContextHandler | RequestHandler"

# The terminal step of a chain, after handler arity has been resolved
Terminal: TypeAlias = "Callable[[Request, Response], None]"


def takes_context(handler: Callable[..., Any]) -> bool:
    """True if *handler* wants a single ``Context`` argument.

    Handlers with one positional parameter get a Context; handlers with two
    get ``(request, response)``. Anything else is a registration error,
    reported by the caller.
    """
    return _positional_arity(handler) == 1


def _positional_arity(handler: Callable[..., Any]) -> int:
    try:
        sig = inspect.signature(handler)
    except (TypeError, ValueError):
        return 2
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            if param.default is inspect.Parameter.empty:
                count += 1
    return count


def check_handler(handler: Callable[..., Any]) -> None:
    """Raise ``ConfigurationError`` unless *handler* accepts one or two positional arguments."""
    if not callable(handler):
        msg = f"Handler {handler!r} is not callable."
        raise ConfigurationError(msg)
    arity = _positional_arity(handler)
    if arity not in (1, 2):
        msg = (
            f"Handler {getattr(handler, '__qualname__', handler)!r} takes {arity} "
            "required positional arguments; expected (context) or (request, response)."
        )
        raise ConfigurationError(msg)
