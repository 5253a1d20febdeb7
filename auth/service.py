"""
auth/service.py -- Registration and login business rules.

AccountService orchestrates the AccountStore and the PasswordHasher. It owns
the identity normalization rule and the password policy, and it is the only
place that decides which typed outcome a failed attempt maps to.

Enumeration resistance:
  An unknown identity and a wrong password both raise InvalidCredentials
  with the same message, and both pay for one bcrypt verify (the unknown
  case runs PasswordHasher.dummy_verify). Do NOT return early before the
  verify -- that re-introduces a timing oracle.

  AccountBlocked is deliberately specific: the account holder may be told
  their account is blocked.

No partial writes: register() only touches the store through a single
INSERT, and login() only writes last_login after every check has passed.

Markup escaping is NOT done here. Identities are stored raw (trimmed and
lowercased); escaping is the presentation layer's job at output time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from auth.errors import AccountBlocked, InvalidCredentials, InvalidIdentity, PasswordTooLong, WeakPassword
from auth.models import SessionSnapshot, Status
from auth.passwords import BCRYPT_MAX_BYTES, PasswordHasher
from auth.store import AccountStore

logger = logging.getLogger("authgate.auth")

MAX_IDENTITY_LENGTH = 255


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_identity(raw: str) -> str:
    """Trim surrounding whitespace and lowercase.

    Raises InvalidIdentity if nothing is left or the result is too long for
    the accounts.identity column.
    """
    identity = (raw or "").strip().lower()
    if not identity or len(identity) > MAX_IDENTITY_LENGTH:
        raise InvalidIdentity()
    return identity


class AccountService:
    def __init__(
        self,
        store: AccountStore,
        hasher: PasswordHasher,
        min_password_length: int = 8,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.min_password_length = min_password_length
        self._clock = clock

    def check_password_policy(self, password: str) -> None:
        if len(password) < self.min_password_length:
            raise WeakPassword(f"Password must be at least {self.min_password_length} characters.")
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise PasswordTooLong()

    def register(self, raw_identity: str, raw_password: str) -> int:
        """Create a new account and return its ID.

        Raises InvalidIdentity, WeakPassword, PasswordTooLong or
        DuplicateIdentity. Nothing is written unless every check passes.
        """
        identity = normalize_identity(raw_identity)
        self.check_password_policy(raw_password)
        password_hash = self.hasher.hash(raw_password)
        account_id = self.store.create(identity, password_hash)
        logger.info("Registered account id=%d", account_id)
        return account_id

    def login(self, raw_identity: str, raw_password: str) -> SessionSnapshot:
        """Check credentials and return a snapshot of the account.

        Raises InvalidCredentials for an unknown identity or a wrong password
        (indistinguishable), AccountBlocked for a blocked account.
        """
        try:
            identity = normalize_identity(raw_identity)
        except InvalidIdentity:
            self.hasher.dummy_verify(raw_password)
            raise InvalidCredentials() from None

        account = self.store.find_by_identity(identity)
        if account is None:
            self.hasher.dummy_verify(raw_password)
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials()

        if account.status is Status.BLOCKED:
            logger.info("Login refused: account id=%d is blocked", account.id)
            raise AccountBlocked()

        if not self.hasher.verify(raw_password, account.password_hash):
            logger.info("Login failed: invalid credentials")
            raise InvalidCredentials()

        self.store.touch_last_login(account.id, self._clock())
        logger.info("Login succeeded for account id=%d", account.id)
        return SessionSnapshot.from_account(account)
