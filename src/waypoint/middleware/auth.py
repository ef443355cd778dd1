"""HTTP authentication middleware — Bearer token and Basic credentials.

Both are scoped to a path prefix: requests outside it pass straight
through, requests inside it must authenticate or get a 401 with a
``WWW-Authenticate`` challenge. Credentials are compared with
``hmac.compare_digest``.

Usage::

    router.use(BearerAuth("/api", token=os.environ["API_TOKEN"]))
    router.use(BasicAuth("/admin", username="admin", password=admin_pw))
"""

import base64
import binascii
import hmac

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.chain import Chain


def _in_scope(path: str, prefix: str) -> bool:
    return path.startswith(prefix)


def _equal(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class BearerAuth:
    """Require ``Authorization: Bearer <token>`` under *path_prefix*."""

    __slots__ = ("path_prefix", "realm", "token")

    def __init__(self, path_prefix: str, token: str, realm: str = "Restricted") -> None:
        self.path_prefix = path_prefix
        self.token = token
        self.realm = realm

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        if not _in_scope(request.path, self.path_prefix):
            chain.next(request, response)
            return

        header = request.headers.get("authorization", "")
        scheme, _, provided = header.partition(" ")
        if scheme == "Bearer" and provided and _equal(provided, self.token):
            chain.next(request, response)
            return

        response.set_status(401)
        response.set_header("WWW-Authenticate", f'Bearer realm="{self.realm}"')
        response.text("Invalid or missing token")


class BasicAuth:
    """Require HTTP Basic credentials under *path_prefix*."""

    __slots__ = ("password", "path_prefix", "realm", "username")

    def __init__(self, path_prefix: str, username: str, password: str, realm: str = "Restricted") -> None:
        self.path_prefix = path_prefix
        self.username = username
        self.password = password
        self.realm = realm

    def _check(self, header: str) -> bool:
        scheme, _, encoded = header.partition(" ")
        if scheme != "Basic" or not encoded:
            return False
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return False
        username, sep, password = decoded.partition(":")
        if not sep:
            return False
        # Evaluate both so timing does not reveal which one failed
        user_ok = _equal(username, self.username)
        password_ok = _equal(password, self.password)
        return user_ok and password_ok

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        if not _in_scope(request.path, self.path_prefix):
            chain.next(request, response)
            return

        if self._check(request.headers.get("authorization", "")):
            chain.next(request, response)
            return

        response.set_status(401)
        response.set_header("WWW-Authenticate", f'Basic realm="{self.realm}", charset="UTF-8"')
        response.text("Authentication required")
