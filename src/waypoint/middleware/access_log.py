"""Access log middleware.

One line per request on the ``waypoint.access`` logger, written after the
rest of the chain has finished::

    GET     /users/42 -> 200 (3ms)
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Literal, TypeAlias

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.chain import Chain

logger = logging.getLogger("waypoint.access")

AccessLogLevel: TypeAlias = Literal["minimal", "standard", "detailed"]

_RESET = "\x1b[0m"
_METHOD_COLORS = {
    "GET": "\x1b[32m",
    "POST": "\x1b[34m",
    "PUT": "\x1b[33m",
    "DELETE": "\x1b[31m",
}


def _status_color(status: int) -> str:
    if status >= 500:
        return "\x1b[31m"
    if status >= 400:
        return "\x1b[33m"
    if status >= 300:
        return "\x1b[36m"
    if status >= 200:
        return "\x1b[32m"
    return _RESET


@dataclass(frozen=True, slots=True)
class AccessLogConfig:
    """Access log configuration.

    ``level``: ``minimal`` logs method and path, ``standard`` adds status
    and duration, ``detailed`` also adds the User-Agent.
    """

    level: AccessLogLevel = "standard"
    use_colors: bool = False
    show_request_count: bool = False


class AccessLogMiddleware:
    """Log each request after the chain completes.

    Errors from further down the chain are logged as ``500 ERROR`` and
    re-raised unchanged. Put an ``ErrorMiddleware`` after this one if the
    logged status should reflect the rendered error response.
    """

    __slots__ = ("_count", "_lock", "config")

    def __init__(self, config: AccessLogConfig | None = None) -> None:
        self.config = config or AccessLogConfig()
        self._count = 0
        self._lock = threading.Lock()

    @property
    def request_count(self) -> int:
        return self._count

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        start = time.perf_counter()
        with self._lock:
            self._count += 1
            count = self._count

        try:
            chain.next(request, response)
        except Exception as exc:
            elapsed = _elapsed_ms(start)
            error = f"500 ERROR ({elapsed}ms) | Error: {type(exc).__name__}"
            if self.config.use_colors:
                error = f"{_status_color(500)}{error}{_RESET}"
            logger.info("%s -> %s", self._prefix(request, count), error)
            raise

        line = self._prefix(request, count)
        cfg = self.config
        if cfg.level != "minimal":
            status = str(response.status)
            if cfg.use_colors:
                status = f"{_status_color(response.status)}{status}{_RESET}"
            line = f"{line} -> {status} ({_elapsed_ms(start)}ms)"
        if cfg.level == "detailed":
            user_agent = request.headers.get("user-agent")
            if user_agent:
                line = f"{line} | UA: {user_agent}"
        logger.info("%s", line)

    def _prefix(self, request: Request, count: int) -> str:
        method = f"{request.method:<7}"
        if self.config.use_colors:
            method = f"{_METHOD_COLORS.get(request.method, _RESET)}{method}{_RESET}"
        prefix = f"{method} {request.uri}"
        if self.config.show_request_count:
            prefix = f"[#{count}] {prefix}"
        return prefix


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
