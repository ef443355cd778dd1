"""In-process session backend."""

import logging
import threading

from waypoint.sessions.backend import SessionBackend
from waypoint.sessions.session import DEFAULT_TTL, Session

logger = logging.getLogger("waypoint.sessions")


class MemoryBackend(SessionBackend):
    """Sessions in a dict guarded by a lock.

    Lost on restart and not shared between processes. Fine for
    development and single-process deployments.
    """

    def __init__(self, default_ttl: int = DEFAULT_TTL) -> None:
        self.default_ttl = default_ttl
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self) -> Session:
        session = Session.new(self.default_ttl)
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None or not session.is_valid():
            return None
        return session

    def save(self, session: Session) -> None:
        with self._lock:
            self._sessions[session.id] = session

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def cleanup(self) -> int:
        with self._lock:
            expired = [sid for sid, session in self._sessions.items() if not session.is_valid()]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.debug("removed %d expired session(s)", len(expired))
        return len(expired)

    def close(self) -> None:
        with self._lock:
            self._sessions.clear()
