"""Session storage backend interface."""

from abc import ABC, abstractmethod

from waypoint.sessions.session import Session


class SessionBackend(ABC):
    """Where sessions live between requests.

    Implementations must be safe to call from several request threads at
    once. ``get`` returns ``None`` for unknown and expired ids alike.
    """

    @abstractmethod
    def create(self) -> Session:
        """Create, store, and return a new empty session."""

    @abstractmethod
    def get(self, session_id: str) -> Session | None:
        """Return the live session for *session_id*, if any."""

    @abstractmethod
    def save(self, session: Session) -> None:
        """Persist *session* (insert or overwrite)."""

    @abstractmethod
    def remove(self, session_id: str) -> bool:
        """Delete a session; return whether it existed."""

    def cleanup(self) -> int:
        """Drop expired sessions; return how many were removed."""
        return 0

    def close(self) -> None:
        """Release connections or other resources held by the backend."""
