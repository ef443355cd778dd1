"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw(request: Request, response: Response, chain: Chain) -> None

Built-in middleware:
    AccessLogMiddleware -- One log line per request on ``waypoint.access``
    BasicAuth -- HTTP Basic credentials under a path prefix
    BearerAuth -- Bearer token under a path prefix
    CORSMiddleware -- Cross-Origin Resource Sharing
    ErrorMiddleware -- Render errors as JSON, HTML, or text
    SessionMiddleware -- Server-side sessions keyed by a (signed) cookie
    StaticFiles -- Serve static files from a directory
"""

from waypoint.middleware.access_log import AccessLogConfig, AccessLogMiddleware
from waypoint.middleware.auth import BasicAuth, BearerAuth
from waypoint.middleware.chain import Chain, build_chain, run_chain
from waypoint.middleware.cors import CORSConfig, CORSMiddleware
from waypoint.middleware.errors import ErrorConfig, ErrorMiddleware
from waypoint.middleware.protocol import Middleware
from waypoint.middleware.sessions import SessionConfig, SessionMiddleware, get_session
from waypoint.middleware.static import StaticFiles

__all__ = [
    "AccessLogConfig",
    "AccessLogMiddleware",
    "BasicAuth",
    "BearerAuth",
    "CORSConfig",
    "CORSMiddleware",
    "Chain",
    "ErrorConfig",
    "ErrorMiddleware",
    "Middleware",
    "SessionConfig",
    "SessionMiddleware",
    "StaticFiles",
    "build_chain",
    "get_session",
    "run_chain",
]
