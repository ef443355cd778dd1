"""Routing — compiled route templates, per-method route tables, groups.

Routes are registered during setup, compiled once, and matched first-hit
in registration order while serving.
"""

from waypoint.routing.group import RouteGroup
from waypoint.routing.pattern import CompiledPattern, LiteralSegment, ParamSegment, compile_pattern
from waypoint.routing.regex import RegexMatcher
from waypoint.routing.route import CompiledRoute, RouteMatch
from waypoint.routing.router import HTTP_METHODS, MiddlewareList, Router

__all__ = [
    "HTTP_METHODS",
    "CompiledPattern",
    "CompiledRoute",
    "LiteralSegment",
    "MiddlewareList",
    "ParamSegment",
    "RegexMatcher",
    "RouteGroup",
    "RouteMatch",
    "Router",
    "compile_pattern",
]
