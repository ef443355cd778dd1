"""Error middleware — turns exceptions from the rest of the chain into responses.

Register it first among the global middlewares so it wraps everything
else, including the 404 raised for unrouted requests::

    router.use(ErrorMiddleware(ErrorConfig(format="json")))
"""

import html
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, TypeAlias

from waypoint.errors import HTTPError, RouteNotFound
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.chain import Chain

logger = logging.getLogger("waypoint.server")

ErrorFormat: TypeAlias = Literal["json", "html", "text"]

# (status, message, request, response); writes the error response itself
ErrorHandler: TypeAlias = Callable[[int, str, Request, Response], None]


@dataclass(frozen=True, slots=True)
class ErrorConfig:
    """Error middleware configuration.

    ``custom_handler`` replaces the built-in rendering. If it raises, the
    built-in rendering is used instead.
    """

    format: ErrorFormat = "json"
    not_found_message: str | None = None
    internal_error_message: str | None = None
    custom_handler: ErrorHandler | None = None
    log_exceptions: bool = True


_HTML_PAGE = """\
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{status} Error</title>
    <style>
        body {{ font-family: Arial, sans-serif; background-color: #f5f5f5; margin: 0;
               display: flex; justify-content: center; align-items: center; height: 100vh; }}
        .error-container {{ background-color: white; padding: 40px; border-radius: 8px;
                            box-shadow: 0 2px 10px rgba(0,0,0,0.1); text-align: center; max-width: 500px; }}
        .error-code {{ font-size: 72px; font-weight: bold; color: #e74c3c; margin: 0; }}
        .error-message {{ font-size: 24px; color: #333; margin: 20px 0; }}
    </style>
</head>
<body>
    <div class="error-container">
        <div class="error-code">{status}</div>
        <div class="error-message">{message}</div>
    </div>
</body>
</html>
"""


def render_error(response: Response, status: int, message: str, fmt: ErrorFormat = "json") -> None:
    """Write the default error body for *status* in the given format."""
    response.set_status(status)
    if fmt == "html":
        response.html(_HTML_PAGE.format(status=status, message=html.escape(message)))
    elif fmt == "text":
        response.text(f"Error {status}: {message}")
    else:
        response.json(json.dumps({"error": {"code": status, "message": message}}, separators=(",", ":")))


class ErrorMiddleware:
    """Catch errors raised further down the chain and render them.

    - ``RouteNotFound`` becomes a 404 (custom message if configured)
    - any other ``HTTPError`` keeps its status, detail, and headers
    - everything else becomes a 500 and is logged with its traceback

    Whatever the failed step already wrote (headers, cookies, body) is
    discarded before the error is rendered.
    """

    __slots__ = ("config",)

    def __init__(self, config: ErrorConfig | None = None) -> None:
        self.config = config or ErrorConfig()

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        try:
            chain.next(request, response)
        except RouteNotFound:
            response.reset()
            logger.debug("404 %s %s", request.method, request.path)
            self._respond(404, self.config.not_found_message or "Not Found", request, response)
        except HTTPError as exc:
            response.reset()
            for name, value in exc.headers:
                response.set_header(name, value)
            message = exc.detail or response_reason(exc.status)
            self._respond(exc.status, message, request, response)
        except Exception:
            response.reset()
            if self.config.log_exceptions:
                logger.exception("500 %s %s", request.method, request.path)
            self._respond(500, self.config.internal_error_message or "Internal Server Error", request, response)

    def _respond(self, status: int, message: str, request: Request, response: Response) -> None:
        handler = self.config.custom_handler
        if handler is not None:
            try:
                handler(status, message, request, response)
            except Exception:
                logger.exception("Custom error handler failed for %d %s", status, request.path)
            else:
                return
        render_error(response, status, message, self.config.format)


def response_reason(status: int) -> str:
    """Reason phrase for *status*, e.g. ``"Not Found"``."""
    return Response(status=status).reason
