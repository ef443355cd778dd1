"""Router and server configuration.

Configs are frozen dataclasses — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Routing behaviour. Immutable after creation.

    ``not_found_through_globals`` decides whether a request that matches no
    route still runs through the global middlewares (with a terminal that
    raises ``RouteNotFound``) or fails straight out of ``Router.handle``.
    Route and group middlewares never run for unmatched requests.
    """

    not_found_through_globals: bool = True
    allow_duplicate_params: bool = False


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server facade configuration.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(host="0.0.0.0", port=3000, show_routes_on_startup=True)
    """

    host: str = "127.0.0.1"
    port: int = 8000

    # Append the traceback to uncaught 500 bodies. Development only.
    debug: bool = False

    # Log the route table when the server freezes
    show_routes_on_startup: bool = False

    # Bodies of the fallback responses when nothing handled the request
    not_found_body: str = "Not Found"
    internal_error_body: str = "Internal Server Error"

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    @classmethod
    def from_env(
        cls,
        prefix: str = "WAYPOINT_",
        environ: Mapping[str, str] | None = None,
    ) -> ServerConfig:
        """Build a config from ``{prefix}{FIELD}`` environment variables.

        Unset variables keep their defaults. Booleans accept
        ``1``/``true``/``yes``/``on`` (case-insensitive).
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue
            default = f.default
            if isinstance(default, bool):
                overrides[f.name] = raw.strip().lower() in ("1", "true", "yes", "on")
            elif isinstance(default, int):
                overrides[f.name] = int(raw)
            else:
                overrides[f.name] = raw
        return cls(**overrides)
