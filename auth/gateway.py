"""
auth/gateway.py -- The single entry point the presentation layer talks to.

AuthGateway wires the account service, session manager and role gates
into the six operations a front end needs:

    register(identity, password)  -> account id
    login(identity, password)     -> session token
    authenticate(token)           -> SessionSnapshot
    logout(token)                 -> None
    is_privileged(snapshot)       -> bool
    is_fully_privileged(snapshot) -> bool

Failures are raised as the typed exceptions in auth/errors.py.

Every collaborator is injected. Nothing here is a module-level singleton;
the API builds one gateway per process in its lifespan and stores it on
app.state.
"""

from __future__ import annotations

from auth import policy
from auth.models import SessionSnapshot
from auth.passwords import PasswordHasher
from auth.service import AccountService
from auth.sessions import SessionManager
from auth.store import AccountStore
from core.config import Settings


class AuthGateway:
    def __init__(self, accounts: AccountService, sessions: SessionManager) -> None:
        self.accounts = accounts
        self.sessions = sessions

    @classmethod
    def from_settings(cls, settings: Settings, store: AccountStore | None = None) -> AuthGateway:
        """Build a gateway (and, unless given, its store) from configuration."""
        store = store or AccountStore(settings.database_url)
        service = AccountService(
            store,
            PasswordHasher(rounds=settings.bcrypt_rounds),
            min_password_length=settings.min_password_length,
        )
        return cls(service, SessionManager(ttl_seconds=settings.session_ttl_seconds))

    @property
    def store(self) -> AccountStore:
        return self.accounts.store

    def register(self, identity: str, password: str) -> int:
        return self.accounts.register(identity, password)

    def login(self, identity: str, password: str) -> str:
        snapshot = self.accounts.login(identity, password)
        return self.sessions.issue(snapshot)

    def authenticate(self, token: str) -> SessionSnapshot:
        return self.sessions.resolve(token)

    def logout(self, token: str) -> None:
        self.sessions.destroy(token)

    @staticmethod
    def is_privileged(snapshot: SessionSnapshot) -> bool:
        return policy.is_privileged(snapshot)

    @staticmethod
    def is_fully_privileged(snapshot: SessionSnapshot) -> bool:
        return policy.is_fully_privileged(snapshot)

    def close(self) -> None:
        self.store.close()
