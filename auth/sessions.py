"""
auth/sessions.py -- Server-side session registry with absolute expiry.

Why server-side and not a signed JWT: logout must invalidate a token for
every caller the moment destroy() returns. A stateless token stays valid
until its exp claim no matter what the server does.

Tokens: secrets.token_urlsafe(32) -- 256 bits from the OS CSPRNG, so tokens
are unguessable. The token is the only handle; it carries no data.

Expiry: absolute, fixed at issue time (created_at + ttl). resolve() never
honors an expired token. Expired records are dropped lazily on access and
in bulk by purge_expired(), which the API lifespan runs periodically.

Thread safety: every read and write goes through one lock. FastAPI runs
sync handlers in a thread pool, so concurrent resolve/destroy calls are real.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from auth.errors import ExpiredSession, MissingSession
from auth.models import Session, SessionSnapshot

logger = logging.getLogger("authgate.sessions")

TOKEN_BYTES = 32


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Issues, resolves and destroys session tokens.

    Usage:
        sessions = SessionManager(ttl_seconds=1200)
        token = sessions.issue(snapshot)
        snapshot = sessions.resolve(token)   # raises MissingSession / ExpiredSession
        sessions.destroy(token)
    """

    def __init__(self, ttl_seconds: int = 1200, clock: Callable[[], datetime] = _utcnow) -> None:
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def issue(self, snapshot: SessionSnapshot) -> str:
        now = self._clock()
        session = Session(
            token=secrets.token_urlsafe(TOKEN_BYTES),
            snapshot=snapshot,
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._lock:
            self._sessions[session.token] = session
        logger.debug("Session issued for account id=%d", snapshot.account_id)
        return session.token

    def resolve(self, token: str) -> SessionSnapshot:
        """Return the snapshot bound to token.

        Raises MissingSession if the token is unknown (never issued, destroyed
        or already purged) and ExpiredSession if its lifetime has elapsed.
        """
        if not token:
            raise MissingSession()
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                raise MissingSession()
            if session.is_expired(self._clock()):
                del self._sessions[token]
                raise ExpiredSession()
            return session.snapshot

    def get(self, token: str) -> Session | None:
        """Return the raw session record, expired or not, without side effects."""
        with self._lock:
            return self._sessions.get(token)

    def destroy(self, token: str) -> None:
        """Remove token. Removing an unknown token is not an error."""
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self) -> int:
        """Drop every expired session. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
            for token in expired:
                del self._sessions[token]
        if expired:
            logger.info("Purged %d expired sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
