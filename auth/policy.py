"""
auth/policy.py -- Role gates over a SessionSnapshot.

Two tiers above a plain user:
  admin          -- privileged (sees the admin panel)
  administrator  -- privileged and fully privileged (also system settings)

Both gates are pure functions of the snapshot: no I/O, no live re-read of
the account. A role change made after login takes effect on next login.
"""

from __future__ import annotations

from auth.models import Role, SessionSnapshot

PRIVILEGED_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.ADMINISTRATOR})
FULL_PRIVILEGE_ROLES: frozenset[Role] = frozenset({Role.ADMINISTRATOR})


def is_privileged(snapshot: SessionSnapshot) -> bool:
    return snapshot.role in PRIVILEGED_ROLES


def is_fully_privileged(snapshot: SessionSnapshot) -> bool:
    """Exact match on the top tier only. admin is not enough."""
    return snapshot.role in FULL_PRIVILEGE_ROLES
