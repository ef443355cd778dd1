"""Session middleware — server-side sessions keyed by a cookie.

The cookie carries only the session id. With ``SessionConfig.secret_key``
set, the id is signed with ``itsdangerous`` and a tampered or expired
cookie is treated as no cookie at all.

The session is stored in ``request.state["session"]``, accessible via
``get_session(request)`` from any later middleware or handler.
"""

import logging
from dataclasses import dataclass

from itsdangerous import BadData, URLSafeTimedSerializer

from waypoint.errors import ConfigurationError
from waypoint.http.cookies import SetCookie
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.chain import Chain
from waypoint.sessions.session import Session
from waypoint.sessions.store import SessionStore

logger = logging.getLogger("waypoint.sessions")

SESSION_STATE_KEY = "session"


def get_session(request: Request) -> Session | None:
    """Return the request's session.

    ``None`` when ``SessionMiddleware`` is not installed, or when
    ``auto_create`` is off and the client sent no valid session cookie.
    """
    return request.state.get(SESSION_STATE_KEY)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session middleware configuration."""

    cookie_name: str = "session_id"
    max_age: int = 3600  # 1 hour
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = "lax"
    auto_create: bool = True
    secret_key: str | None = None


class SessionMiddleware:
    """Load or create the request's session and save it afterwards.

    Usage::

        store = SessionStore()            # MemoryBackend by default
        router.use(SessionMiddleware(store, SessionConfig(secret_key="...")))

        def dashboard(ctx):
            session = get_session(ctx.request)
            session.set("visits", session.get("visits", 0) + 1)

    The session is saved after the rest of the chain returns normally.
    ``Set-Cookie`` is only sent when a new session was created.
    """

    __slots__ = ("_serializer", "config", "store")

    def __init__(self, store: SessionStore | None = None, config: SessionConfig | None = None) -> None:
        self.store = store if store is not None else SessionStore()
        self.config = config or SessionConfig()
        try:
            cfg = self.config
            SetCookie(cfg.cookie_name, "", path=cfg.path, domain=cfg.domain, secure=cfg.secure, samesite=cfg.samesite)
        except ValueError as e:
            msg = f"Invalid session cookie settings: {e}"
            raise ConfigurationError(msg) from e
        self._serializer = (
            URLSafeTimedSerializer(self.config.secret_key, salt="waypoint.session")
            if self.config.secret_key
            else None
        )

    def _session_id(self, request: Request) -> str | None:
        value = request.cookies.get(self.config.cookie_name)
        if not value:
            return None
        if self._serializer is None:
            return value
        try:
            session_id = self._serializer.loads(value, max_age=self.config.max_age)
        except BadData:
            logger.debug("rejected session cookie with a bad or expired signature")
            return None
        return session_id if isinstance(session_id, str) else None

    def _cookie_value(self, session: Session) -> str:
        if self._serializer is None:
            return session.id
        return self._serializer.dumps(session.id)

    def __call__(self, request: Request, response: Response, chain: Chain) -> None:
        session: Session | None = None
        session_id = self._session_id(request)
        if session_id is not None:
            session = self.store.get(session_id)

        created = False
        if session is None and self.config.auto_create:
            session = self.store.create()
            session.set_expires(self.config.max_age)
            created = True

        if session is not None:
            request.state[SESSION_STATE_KEY] = session

        chain.next(request, response)

        if session is None:
            return
        self.store.save(session)
        if created:
            cfg = self.config
            response.set_cookie(
                cfg.cookie_name,
                self._cookie_value(session),
                max_age=cfg.max_age,
                path=cfg.path,
                domain=cfg.domain,
                secure=cfg.secure,
                httponly=cfg.httponly,
                samesite=cfg.samesite,
            )
