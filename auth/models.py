"""
auth/models.py -- Domain types for authentication entities.

Pattern: Data class (pure data container, zero logic). Dataclasses own domain
shape; the store, service and session manager do the work.

Role and Status are closed enumerations rather than free-form strings so the
admin / administrator distinction and the active / blocked distinction are
exhaustive. Both subclass str so they round-trip through SQL and JSON as
their plain values.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Privilege tier. admin and administrator are distinct tiers, not synonyms."""

    USER = "user"
    ADMIN = "admin"
    ADMINISTRATOR = "administrator"


class Status(str, Enum):
    ACTIVE = "active"
    BLOCKED = "blocked"


@dataclass
class Account:
    """A stored credential record.

    identity is the normalized (trimmed, lowercased) login name and is unique
    across all accounts. password_hash is the bcrypt output; the clear password
    is never kept anywhere.
    """

    identity: str
    password_hash: str
    role: Role = Role.USER
    status: Status = Status.ACTIVE
    id: int | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only copy of the account fields captured at login time.

    May go stale relative to the store (e.g. the account is blocked after
    login). Authorization decisions read the snapshot, not the live record.
    """

    account_id: int
    identity: str
    role: Role
    status: Status

    @classmethod
    def from_account(cls, account: Account) -> SessionSnapshot:
        if account.id is None:
            raise ValueError("Cannot snapshot an account that has not been persisted.")
        return cls(
            account_id=account.id,
            identity=account.identity,
            role=account.role,
            status=account.status,
        )


@dataclass(frozen=True)
class Session:
    """A server-side session record owned by the SessionManager."""

    token: str
    snapshot: SessionSnapshot
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
