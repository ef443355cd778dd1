"""CORS middleware.

Adds the ``Access-Control-*`` headers to every response and answers
``OPTIONS`` preflight requests itself.
"""

from dataclasses import dataclass

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.chain import Chain


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    Defaults allow any origin with the common methods and headers.
    Narrow them for anything public::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_credentials=True,
        )
    """

    allow_origins: tuple[str, ...] = ("*",)
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type", "Authorization")
    allow_credentials: bool = False
    max_age: int | None = None


class CORSMiddleware:
    """Cross-Origin Resource Sharing.

    - ``OPTIONS`` requests get a 204 with the CORS headers; ``next`` is not called
    - other requests get the headers set, then continue down the chain
    - with an explicit origin list, only listed origins are echoed back
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _allow_origin(self, origin: str | None) -> str | None:
        cfg = self.config
        if "*" in cfg.allow_origins:
            # Browsers reject "*" together with credentials
            if cfg.allow_credentials and origin:
                return origin
            return "*"
        if origin in cfg.allow_origins:
            return origin
        return None

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        cfg = self.config
        allowed = self._allow_origin(request.headers.get("origin"))
        if allowed is not None:
            response.set_header("Access-Control-Allow-Origin", allowed)
            if allowed != "*":
                response.set_header("Vary", "Origin")
            response.set_header("Access-Control-Allow-Methods", ", ".join(cfg.allow_methods))
            response.set_header("Access-Control-Allow-Headers", ", ".join(cfg.allow_headers))
            if cfg.allow_credentials:
                response.set_header("Access-Control-Allow-Credentials", "true")
            if cfg.max_age is not None:
                response.set_header("Access-Control-Max-Age", str(cfg.max_age))

        if request.method == "OPTIONS":
            response.set_status(204)
            response.body.clear()
            return

        chain.next(request, response)
