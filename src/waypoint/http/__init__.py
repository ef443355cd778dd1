"""HTTP types — mutable per-request Request and Response.

Both are owned by a single in-flight request and discarded when it
completes.
"""

from waypoint.http.headers import Headers
from waypoint.http.request import Request
from waypoint.http.response import Response

__all__ = ["Headers", "Request", "Response"]
