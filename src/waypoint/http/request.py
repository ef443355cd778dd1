"""Per-request HTTP request.

A request is owned by exactly one in-flight dispatch. Middlewares may read
and mutate it; the router fills ``path_params`` after a match. ``state`` is
the side channel middlewares use to hand data to each other (the session
middleware stores the session there).
"""

from __future__ import annotations

import json as json_module
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from waypoint.http.cookies import parse_cookies
from waypoint.http.headers import Headers
from waypoint.http.query import parse_query, split_target


@dataclass(slots=True)
class Request:
    """A parsed HTTP request.

    ``uri`` is the raw request target (path plus query string); ``path`` is
    the part before ``?``. Build one with ``Request.build()`` or
    ``Request.from_wsgi()`` rather than the constructor.
    """

    method: str
    uri: str
    path: str
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    query: dict[str, str] = field(default_factory=dict)
    path_params: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)
    client: tuple[str, int] | None = None

    # -- Accessors --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a request header, case-insensitively."""
        return self.headers.get(name, default)

    def query_param(self, name: str, default: str | None = None) -> str | None:
        """Return a query string parameter."""
        return self.query.get(name, default)

    def param(self, name: str, default: str | None = None) -> str | None:
        """Return a path parameter captured by the router."""
        return self.path_params.get(name, default)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    def text(self, encoding: str = "utf-8") -> str:
        """Decode the body as text."""
        return self.body.decode(encoding)

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)

    # -- Factories --

    @classmethod
    def build(
        cls,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        body: bytes = b"",
        client: tuple[str, int] | None = None,
    ) -> Request:
        """Create a Request from already-parsed request-line parts."""
        path, query_string = split_target(target)
        hdrs = Headers(headers)
        return cls(
            method=method.upper(),
            uri=target,
            path=path or "/",
            headers=hdrs,
            body=body,
            query=parse_query(query_string),
            cookies=parse_cookies(hdrs.get("cookie", "")),
            client=client,
        )

    @classmethod
    def from_wsgi(cls, environ: Mapping[str, Any]) -> Request:
        """Create a Request from a WSGI environ dict."""
        headers: list[tuple[str, str]] = []
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers.append((key[5:].replace("_", "-").title(), value))
        if environ.get("CONTENT_TYPE"):
            headers.append(("Content-Type", environ["CONTENT_TYPE"]))
        if environ.get("CONTENT_LENGTH"):
            headers.append(("Content-Length", environ["CONTENT_LENGTH"]))

        body = b""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length > 0:
            body = environ["wsgi.input"].read(length)

        # PEP 3333 hands PATH_INFO over as latin-1 decoded bytes
        path = environ.get("PATH_INFO", "").encode("latin-1").decode("utf-8", "replace") or "/"
        query_string = environ.get("QUERY_STRING", "")
        target = f"{path}?{query_string}" if query_string else path

        client = None
        if environ.get("REMOTE_ADDR"):
            client = (environ["REMOTE_ADDR"], int(environ.get("REMOTE_PORT") or 0))

        return cls.build(
            environ.get("REQUEST_METHOD", "GET"),
            target,
            headers=headers,
            body=body,
            client=client,
        )
