"""Route template compilation.

A template like ``/users/:id([0-9]+)/posts/:slug`` is split on ``/`` into
segments once, at registration. Empty tokens from leading, trailing, or
doubled slashes are discarded. Segment kinds never change after this.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

import re2

from waypoint.errors import PatternCompileError
from waypoint.routing.regex import RegexMatcher


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    """Static segment: ``/users`` must equal ``users`` exactly."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class ParamSegment:
    """Parameter segment: ``:id`` or ``:id([0-9]+)``.

    Without a matcher any non-empty segment is accepted. With one, the
    whole segment must match the constraint.
    """

    name: str
    matcher: RegexMatcher | None = None

    @property
    def pattern(self) -> str | None:
        return self.matcher.pattern if self.matcher is not None else None

    def __str__(self) -> str:
        if self.matcher is None:
            return f":{self.name}"
        return f":{self.name}({self.matcher.pattern})"


Segment: TypeAlias = "LiteralSegment | ParamSegment"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A compiled route template."""

    template: str
    segments: tuple[Segment, ...]

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.segments if isinstance(s, ParamSegment))

    @property
    def has_params(self) -> bool:
        return any(isinstance(s, ParamSegment) for s in self.segments)

    def match(self, parts: list[str]) -> dict[str, str] | None:
        """Match already-split path *parts*; return captured params or None.

        Segment counts must be equal. Literals compare exactly; params
        capture the segment text after checking any constraint.
        """
        if len(parts) != len(self.segments):
            return None
        params: dict[str, str] = {}
        for segment, part in zip(self.segments, parts, strict=True):
            if isinstance(segment, LiteralSegment):
                if segment.text != part:
                    return None
                continue
            if segment.matcher is not None and not segment.matcher.fullmatch(part):
                return None
            params[segment.name] = part
        return params


def split_path(path: str) -> list[str]:
    """Split a request path into non-empty segments, ignoring any query string."""
    path = path.partition("?")[0]
    return [part for part in path.split("/") if part]


def _parse_param(template: str, token: str) -> ParamSegment:
    """Parse ``:name`` or ``:name(regex)`` into a ParamSegment."""
    definition = token[1:]
    open_idx = definition.find("(")
    if open_idx == -1:
        if ")" in definition:
            raise PatternCompileError(template, f"unbalanced ')' in {token!r}")
        name, regex = definition, None
    else:
        close_idx = definition.rfind(")")
        if close_idx < open_idx:
            raise PatternCompileError(template, f"missing ')' in {token!r}")
        if close_idx != len(definition) - 1:
            raise PatternCompileError(template, f"unexpected text after ')' in {token!r}")
        name, regex = definition[:open_idx], definition[open_idx + 1 : close_idx]

    if not name:
        raise PatternCompileError(template, f"parameter in {token!r} has no name")
    if not name.isidentifier():
        raise PatternCompileError(template, f"parameter name {name!r} in {token!r} is not an identifier")
    if regex is None or regex == "":
        return ParamSegment(name=name)
    try:
        matcher = RegexMatcher(regex)
    except re2.error as e:
        raise PatternCompileError(template, f"invalid regex {regex!r} for :{name}: {e}") from e
    return ParamSegment(name=name, matcher=matcher)


def compile_pattern(template: str, *, allow_duplicate_params: bool = False) -> CompiledPattern:
    """Compile a route template into a CompiledPattern.

    Examples::

        "/users"                -> [LiteralSegment("users")]
        "/users/:id"            -> [LiteralSegment("users"), ParamSegment("id")]
        "/users/:id([0-9]+)"    -> [..., ParamSegment("id", RegexMatcher("[0-9]+"))]

    Raises ``PatternCompileError`` for malformed parameters, invalid regex,
    and (unless *allow_duplicate_params*) repeated parameter names. With
    duplicates allowed, the last occurrence wins at match time.
    """
    segments: list[Segment] = []
    seen: set[str] = set()
    for token in template.split("/"):
        if not token:
            continue
        if not token.startswith(":"):
            segments.append(LiteralSegment(token))
            continue
        segment = _parse_param(template, token)
        if segment.name in seen and not allow_duplicate_params:
            raise PatternCompileError(template, f"duplicate parameter name {segment.name!r}")
        seen.add(segment.name)
        segments.append(segment)
    return CompiledPattern(template=template, segments=tuple(segments))
