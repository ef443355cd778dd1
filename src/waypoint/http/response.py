"""Per-request HTTP response.

Unlike a value-style response, this one is a mutable buffer shared by
every middleware in the chain and the handler: each writes status,
headers, and body in place. Whatever is in it when the chain returns is
what the Server serializes.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from waypoint.http.cookies import SetCookie
from waypoint.http.headers import Headers


@dataclass(slots=True)
class Response:
    """A mutable HTTP response.

    Usage::

        response.set_status(201)
        response.json({"id": 7})
    """

    status: int = 200
    headers: Headers = field(default_factory=Headers)
    body: bytearray = field(default_factory=bytearray)
    cookies: list[SetCookie] = field(default_factory=list)

    # -- Status and headers --

    def set_status(self, status: int) -> None:
        self.status = int(status)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def reason(self) -> str:
        """The reason phrase for ``status`` ("Unknown" for non-standard codes)."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    # -- Body --

    def set_body(self, body: str | bytes) -> None:
        """Replace the body buffer."""
        data = body.encode("utf-8") if isinstance(body, str) else body
        self.body.clear()
        self.body.extend(data)

    def write(self, chunk: str | bytes) -> None:
        """Append to the body buffer."""
        self.body.extend(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)

    def text(self, content: str) -> None:
        self.set_header("Content-Type", "text/plain; charset=utf-8")
        self.set_body(content)

    def html(self, content: str) -> None:
        self.set_header("Content-Type", "text/html; charset=utf-8")
        self.set_body(content)

    def json(self, data: Any) -> None:
        """Serialize *data* as the JSON body.

        ``str`` and ``bytes`` are taken as already-encoded JSON documents.
        """
        if isinstance(data, (str, bytes)):
            payload = data
        else:
            payload = json_module.dumps(data, separators=(",", ":"), ensure_ascii=False)
        self.set_header("Content-Type", "application/json")
        self.set_body(payload)

    def reset(self) -> None:
        """Discard status, headers, body, and cookies written so far."""
        self.status = 200
        self.headers.clear()
        self.body.clear()
        self.cookies.clear()

    def redirect(self, location: str, status: int = 302) -> None:
        self.set_status(status)
        self.set_header("Location", location)
        self.body.clear()

    # -- Cookies --

    def set_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str | None = "lax",
    ) -> None:
        """Attach a Set-Cookie directive."""
        self.cookies.append(
            SetCookie(
                name=name,
                value=value,
                max_age=max_age,
                path=path,
                domain=domain,
                secure=secure,
                httponly=httponly,
                samesite=samesite,
            )
        )

    def delete_cookie(self, name: str, path: str = "/") -> None:
        """Expire a cookie on the client (Max-Age=0)."""
        self.cookies.append(SetCookie(name=name, value="", max_age=0, path=path))

    # -- Serialization --

    def header_items(self) -> list[tuple[str, str]]:
        """All response headers, including Content-Length and Set-Cookie lines."""
        items = [(name, value) for name, value in self.headers.raw() if name.lower() != "content-length"]
        if "content-type" not in self.headers and self.body:
            items.append(("Content-Type", "text/plain; charset=utf-8"))
        items.append(("Content-Length", str(len(self.body))))
        items.extend(("Set-Cookie", cookie.to_header_value()) for cookie in self.cookies)
        return items
