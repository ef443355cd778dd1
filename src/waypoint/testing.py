"""Test client for waypoint applications.

Uses the same Request and Response types as production and goes through
``Server.handle``, so the default 404/500 mapping applies. No sockets,
no WSGI translation.
"""

import json as json_module
from collections.abc import Mapping

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.routing.router import Router
from waypoint.server import Server


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Synchronous test client.

    Usage::

        client = TestClient(router)
        response = client.get("/users/42")
        assert response.status == 200

    Cookies from ``Set-Cookie`` are remembered and sent back on later
    requests, so session flows work across calls.
    """

    __slots__ = ("cookies", "server")

    def __init__(self, app: Server | Router) -> None:
        self.server = app if isinstance(app, Server) else Server(app)
        self.cookies: dict[str, str] = {}

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Send a request and return the final response."""
        merged = dict(headers or {})
        if self.cookies and not any(k.lower() == "cookie" for k in merged):
            merged["Cookie"] = "; ".join(f"{k}={v}" for k, v in self.cookies.items())
        response = self.server.handle(Request.build(method, path, headers=merged, body=body))
        for cookie in response.cookies:
            if cookie.max_age == 0:
                self.cookies.pop(cookie.name, None)
            else:
                self.cookies[cookie.name] = cookie.value
        return response

    def get(self, path: str, *, headers: Mapping[str, str] | None = None) -> Response:
        """Send a GET request."""
        return self.request("GET", path, headers=headers)

    def head(self, path: str, *, headers: Mapping[str, str] | None = None) -> Response:
        """Send a HEAD request."""
        return self.request("HEAD", path, headers=headers)

    def post(
        self,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
        json: object | None = None,
    ) -> Response:
        """Send a POST request, optionally with a JSON body."""
        extra_headers: dict[str, str] = {}
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            extra_headers["Content-Type"] = "application/json"
        return self.request("POST", path, headers={**extra_headers, **(headers or {})}, body=body)

    def put(self, path: str, *, headers: Mapping[str, str] | None = None, body: bytes = b"") -> Response:
        """Send a PUT request."""
        return self.request("PUT", path, headers=headers, body=body)

    def patch(self, path: str, *, headers: Mapping[str, str] | None = None, body: bytes = b"") -> Response:
        """Send a PATCH request."""
        return self.request("PATCH", path, headers=headers, body=body)

    def delete(self, path: str, *, headers: Mapping[str, str] | None = None) -> Response:
        """Send a DELETE request."""
        return self.request("DELETE", path, headers=headers)

    def options(self, path: str, *, headers: Mapping[str, str] | None = None) -> Response:
        """Send an OPTIONS request."""
        return self.request("OPTIONS", path, headers=headers)


def body_text(response: Response) -> str:
    """Decode a response body for assertions."""
    return bytes(response.body).decode("utf-8")
