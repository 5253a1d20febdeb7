"""Unit tests for core/config.py -- Settings validation."""

import pytest

from core.config import Settings, get_settings


def test_defaults() -> None:
    s = Settings(_env_file=None)
    assert s.session_ttl_seconds == 1200
    assert s.min_password_length == 8
    assert s.session_cookie_name == "session_token"


def test_env_override(monkeypatch) -> None:
    monkeypatch.setenv("SESSION_TTL_SECONDS", "60")
    monkeypatch.setenv("BCRYPT_ROUNDS", "6")
    s = Settings(_env_file=None)
    assert s.session_ttl_seconds == 60
    assert s.bcrypt_rounds == 6


@pytest.mark.parametrize("rounds", [3, 17])
def test_bcrypt_rounds_out_of_bounds(rounds: int) -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, bcrypt_rounds=rounds)


def test_password_floor_cannot_be_lowered() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, min_password_length=7)


def test_password_floor_can_be_raised() -> None:
    assert Settings(_env_file=None, min_password_length=14).min_password_length == 14


@pytest.mark.parametrize("field", ["session_ttl_seconds", "session_purge_interval_seconds"])
def test_non_positive_intervals_rejected(field: str) -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, **{field: 0})


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
