"""Session management: signed session ids and an in-memory TTL store."""

from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config


class SessionSigner:
    """Sign and verify session IDs using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._serializer = URLSafeTimedSerializer(
            secret_key or config.security.secret_key,
            salt="set-session",
        )

    def sign(self, session_id: str) -> str:
        """Create a signed token from a session ID."""
        return self._serializer.dumps(session_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract session_id from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to session_ttl)

        Returns:
            The session ID if valid, None otherwise
        """
        try:
            return self._serializer.loads(token, max_age=max_age or config.session_ttl)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_session_signer: SessionSigner | None = None


def get_session_signer() -> SessionSigner:
    """Get or create the session signer."""
    global _session_signer
    if _session_signer is None:
        _session_signer = SessionSigner()
    return _session_signer


class InMemorySessionStore:
    """
    In-memory session store.

    Sessions live only as long as the process; expired entries are dropped
    lazily on access or in bulk by cleanup_expired().
    """

    def __init__(self, ttl: int | None = None) -> None:
        self._ttl = ttl or config.session_ttl
        self._sessions: dict[str, tuple[dict[str, Any], datetime]] = {}

    def create(self, data: dict[str, Any] | None = None) -> str:
        """Create a session and return its signed token."""
        token = get_session_signer().sign(str(uuid4()))
        self.set(token, data or {})
        return token

    def get(self, session_id: str) -> dict[str, Any] | None:
        """Get session data, or None if unknown or expired."""
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        data, expiry = entry
        if expiry < datetime.now():
            self.delete(session_id)
            return None
        return data

    def set(self, session_id: str, data: dict[str, Any]) -> None:
        """Store session data and refresh its expiry."""
        expiry = datetime.now() + timedelta(seconds=self._ttl)
        self._sessions[session_id] = (data, expiry)

    def touch(self, session_id: str) -> None:
        """Refresh a session's expiry, creating it if missing."""
        self.set(session_id, self.get(session_id) or {})

    def delete(self, session_id: str) -> None:
        """Delete session."""
        self._sessions.pop(session_id, None)

    def exists(self, session_id: str) -> bool:
        """Check if session exists."""
        return self.get(session_id) is not None

    def cleanup_expired(self) -> list[str]:
        """Remove expired sessions and return their ids."""
        now = datetime.now()
        expired = [sid for sid, (_, expiry) in self._sessions.items() if expiry < now]
        for sid in expired:
            del self._sessions[sid]
        return expired

    def __len__(self) -> int:
        return len(self._sessions)


# Global session store instance
_session_store: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get or create the session store."""
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
    return _session_store


def extract_session_id(token: str) -> str | None:
    """
    Extract the raw session ID from a signed token.

    Args:
        token: The signed session token

    Returns:
        The raw session ID if valid, None otherwise
    """
    return get_session_signer().unsign(token)
