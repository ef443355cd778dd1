"""SessionStore — the object the session middleware talks to."""

from waypoint.sessions.backend import SessionBackend
from waypoint.sessions.memory import MemoryBackend
from waypoint.sessions.session import Session


class SessionStore:
    """Thin facade over a ``SessionBackend``; defaults to ``MemoryBackend``."""

    __slots__ = ("backend",)

    def __init__(self, backend: SessionBackend | None = None) -> None:
        self.backend = backend if backend is not None else MemoryBackend()

    def create(self) -> Session:
        return self.backend.create()

    def get(self, session_id: str) -> Session | None:
        return self.backend.get(session_id)

    def save(self, session: Session) -> None:
        self.backend.save(session)

    def remove(self, session_id: str) -> bool:
        return self.backend.remove(session_id)

    def cleanup(self) -> int:
        return self.backend.cleanup()

    def close(self) -> None:
        self.backend.close()
