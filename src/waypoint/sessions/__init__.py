"""Server-side sessions: the Session model, storage backends, and the store.

The middleware that attaches sessions to requests lives in
``waypoint.middleware.sessions``.
"""

from waypoint.sessions.backend import SessionBackend
from waypoint.sessions.memory import MemoryBackend
from waypoint.sessions.redis_backend import RedisBackend
from waypoint.sessions.session import Session, generate_session_id
from waypoint.sessions.store import SessionStore

__all__ = [
    "MemoryBackend",
    "RedisBackend",
    "Session",
    "SessionBackend",
    "SessionStore",
    "generate_session_id",
]
