"""CompiledRoute and RouteMatch frozen dataclasses."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from waypoint.routing.pattern import CompiledPattern, ParamSegment, Segment

if TYPE_CHECKING:
    from waypoint.middleware.protocol import Middleware


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A registered route.

    Created at registration and owned by the route table. Never mutated
    or removed while serving.
    """

    method: str
    pattern: CompiledPattern
    handler: Callable[..., Any]
    middlewares: tuple[Middleware, ...] = ()
    takes_context: bool = True

    @property
    def path(self) -> str:
        return self.pattern.template

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self.pattern.segments

    @property
    def params(self) -> tuple[ParamSegment, ...]:
        return tuple(s for s in self.pattern.segments if isinstance(s, ParamSegment))


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful dispatch."""

    route: CompiledRoute
    path_params: dict[str, str]
