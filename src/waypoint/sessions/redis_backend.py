"""Redis session backend.

Sessions are stored as JSON objects under ``{prefix}{session_id}`` with a
``SETEX`` TTL taken from the session's own expiry, so Redis drops expired
sessions by itself.

``redis`` is an optional dependency, needed only for
``RedisBackend.from_url``. Any client object with ``get``/``setex``/
``delete``/``close`` works when passed in directly.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from waypoint.errors import ConfigurationError
from waypoint.sessions.backend import SessionBackend
from waypoint.sessions.session import DEFAULT_TTL, Session

logger = logging.getLogger("waypoint.sessions")


class RedisBackend(SessionBackend):
    """Sessions in Redis.

    Usage::

        backend = RedisBackend.from_url("redis://localhost:6379/0")
        store = SessionStore(backend)
    """

    def __init__(self, client: Any, *, prefix: str = "session:", default_ttl: int = DEFAULT_TTL) -> None:
        self.client = client
        self.prefix = prefix
        self.default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: str = "redis://127.0.0.1:6379/0", **kwargs: Any) -> RedisBackend:
        """Connect with ``redis.Redis.from_url``."""
        try:
            import redis
        except ImportError:
            msg = (
                "RedisBackend.from_url requires the 'redis' package. "
                "Install it with: pip install waypoint[redis]"
            )
            raise ConfigurationError(msg) from None
        return cls(redis.Redis.from_url(url, decode_responses=True), **kwargs)

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    def create(self) -> Session:
        session = Session.new(self.default_ttl)
        self.save(session)
        return session

    def get(self, session_id: str) -> Session | None:
        raw = self.client.get(self._key(session_id))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("discarding unreadable session %s", session_id)
            return None
        if not isinstance(payload, dict):
            return None

        data = payload.get("data", {})
        expires_at = payload.get("expires_at")
        if not isinstance(data, dict) or not isinstance(expires_at, (int, float)):
            return None
        session = Session(id=session_id, data=data, expires_at=float(expires_at))
        return session if session.is_valid() else None

    def save(self, session: Session) -> None:
        ttl = int(session.expires_at - time.time())
        if ttl <= 0:
            # Already expired; make sure a stale copy does not linger
            self.remove(session.id)
            return
        payload = json.dumps({"data": session.data, "expires_at": session.expires_at}, separators=(",", ":"))
        self.client.setex(self._key(session.id), ttl, payload)

    def remove(self, session_id: str) -> bool:
        return bool(self.client.delete(self._key(session_id)))

    def close(self) -> None:
        self.client.close()
