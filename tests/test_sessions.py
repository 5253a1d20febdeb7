"""Unit tests for auth/sessions.py -- SessionManager.

Expiry is absolute: a session issued at T is dead at T + TTL no matter how
often it was resolved in between.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from auth.errors import ExpiredSession, MissingSession
from auth.models import Role, SessionSnapshot, Status
from auth.sessions import SessionManager

SESSION_TTL = 1200

SNAPSHOT = SessionSnapshot(account_id=1, identity="alice", role=Role.USER, status=Status.ACTIVE)


def test_issue_then_resolve(sessions: SessionManager) -> None:
    token = sessions.issue(SNAPSHOT)
    assert sessions.resolve(token) == SNAPSHOT


def test_tokens_are_long_and_unique(sessions: SessionManager) -> None:
    tokens = {sessions.issue(SNAPSHOT) for _ in range(200)}
    assert len(tokens) == 200
    # token_urlsafe(32) -> 43 base64url characters (256 bits)
    assert all(len(t) >= 43 for t in tokens)


def test_session_record_times(sessions: SessionManager, clock) -> None:
    token = sessions.issue(SNAPSHOT)
    record = sessions.get(token)
    assert record.created_at == clock.now
    assert (record.expires_at - record.created_at).total_seconds() == SESSION_TTL


@pytest.mark.parametrize("token", ["", "nonexistent-token"])
def test_unknown_token_is_missing(sessions: SessionManager, token: str) -> None:
    with pytest.raises(MissingSession):
        sessions.resolve(token)


def test_valid_just_before_expiry(sessions: SessionManager, clock) -> None:
    token = sessions.issue(SNAPSHOT)
    clock.advance(SESSION_TTL - 1)
    assert sessions.resolve(token) == SNAPSHOT


def test_expired_at_ttl(sessions: SessionManager, clock) -> None:
    token = sessions.issue(SNAPSHOT)
    clock.advance(SESSION_TTL)
    with pytest.raises(ExpiredSession):
        sessions.resolve(token)


def test_expired_session_is_dropped_on_access(sessions: SessionManager, clock) -> None:
    token = sessions.issue(SNAPSHOT)
    clock.advance(SESSION_TTL + 1)
    with pytest.raises(ExpiredSession):
        sessions.resolve(token)
    assert sessions.get(token) is None
    with pytest.raises(MissingSession):
        sessions.resolve(token)


def test_expiry_does_not_slide(sessions: SessionManager, clock) -> None:
    token = sessions.issue(SNAPSHOT)
    clock.advance(SESSION_TTL - 10)
    sessions.resolve(token)
    clock.advance(10)
    with pytest.raises(ExpiredSession):
        sessions.resolve(token)


def test_destroy_then_resolve_is_missing(sessions: SessionManager) -> None:
    token = sessions.issue(SNAPSHOT)
    sessions.destroy(token)
    with pytest.raises(MissingSession):
        sessions.resolve(token)


def test_destroy_is_idempotent(sessions: SessionManager) -> None:
    token = sessions.issue(SNAPSHOT)
    sessions.destroy(token)
    sessions.destroy(token)
    sessions.destroy("never-issued")


def test_destroy_only_affects_its_token(sessions: SessionManager) -> None:
    keep = sessions.issue(SNAPSHOT)
    drop = sessions.issue(SNAPSHOT)
    sessions.destroy(drop)
    assert sessions.resolve(keep) == SNAPSHOT


def test_purge_expired(sessions: SessionManager, clock) -> None:
    old = [sessions.issue(SNAPSHOT) for _ in range(3)]
    clock.advance(SESSION_TTL / 2)
    fresh = sessions.issue(SNAPSHOT)
    clock.advance(SESSION_TTL / 2)
    assert sessions.purge_expired() == 3
    assert len(sessions) == 1
    assert sessions.resolve(fresh) == SNAPSHOT
    assert all(sessions.get(t) is None for t in old)


def test_purge_with_nothing_expired(sessions: SessionManager) -> None:
    sessions.issue(SNAPSHOT)
    assert sessions.purge_expired() == 0


def test_snapshot_is_a_copy() -> None:
    with pytest.raises(AttributeError):
        SNAPSHOT.role = Role.ADMINISTRATOR


def test_concurrent_issue_and_destroy(sessions: SessionManager) -> None:
    def cycle(_: int) -> bool:
        token = sessions.issue(SNAPSHOT)
        sessions.resolve(token)
        sessions.destroy(token)
        try:
            sessions.resolve(token)
        except MissingSession:
            return True
        return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        assert all(pool.map(cycle, range(200)))
    assert len(sessions) == 0
