"""Regex constraints for path parameters.

Constraints are compiled with ``google-re2``, which guarantees linear-time
matching, so a hostile path segment cannot trigger catastrophic
backtracking. RE2 does not support backreferences or lookaround; patterns
using them are rejected at compile time like any other malformed regex.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import re2

from waypoint.errors import RegexEngineError


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """A constraint compiled once and full-matched many times.

    Matching is anchored at both ends: ``[0-9]+`` accepts ``"123"`` but not
    ``"12a"`` or ``"a12"``. Explicit ``^``/``$`` anchors in the pattern are
    harmless.

    Raises:
        re2.error: If the pattern is not valid RE2 syntax. The pattern
            compiler wraps this in ``PatternCompileError``.
    """

    pattern: str
    _compiled: re2.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", re2.compile(self.pattern))

    def fullmatch(self, value: str) -> bool:
        """True if *value* matches the whole pattern."""
        try:
            return self._compiled.fullmatch(value) is not None
        except re2.error as e:
            msg = f"regex {self.pattern!r} failed on {value!r}: {e}"
            raise RegexEngineError(msg) from e
