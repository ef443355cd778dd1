"""Session — a server-side key/value bag with an expiry time."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field
from typing import Any

DEFAULT_TTL = 3600

# Random bytes per id; the id itself is twice as long in hex
SESSION_ID_BYTES = 32

_MISSING = object()


def generate_session_id() -> str:
    """Return a new random, URL-safe session id (64 hex characters)."""
    return secrets.token_hex(SESSION_ID_BYTES)


@dataclass(slots=True)
class Session:
    """Session data keyed by ``id``.

    ``expires_at`` is a Unix timestamp. Values must be JSON-serializable
    when the session lives in a backend that serializes (Redis).
    """

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    expires_at: float = field(default_factory=lambda: time.time() + DEFAULT_TTL)

    @classmethod
    def new(cls, ttl: int = DEFAULT_TTL) -> Session:
        return cls(id=generate_session_id(), expires_at=time.time() + ttl)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def remove(self, key: str) -> bool:
        """Delete *key*; return whether it was present."""
        return self.data.pop(key, _MISSING) is not _MISSING

    def is_valid(self) -> bool:
        """True until ``expires_at`` has passed."""
        return time.time() < self.expires_at

    def set_expires(self, seconds: int) -> None:
        """Expire *seconds* from now."""
        self.expires_at = time.time() + seconds

    def ttl(self) -> int:
        """Whole seconds left before expiry (0 once expired)."""
        return max(0, int(self.expires_at - time.time()))
