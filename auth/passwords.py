"""
auth/passwords.py -- bcrypt password hashing and verification.

Security design decisions:
  bcrypt directly, no passlib wrapper. passlib's wrap-bug detection feeds
  bcrypt a password longer than 72 bytes, which bcrypt 4.x+ rejects.

  Cost factor: configurable via Settings.bcrypt_rounds (4..16). Every call
  pays it on purpose; that is what slows offline brute force. Callers on an
  event loop must run these methods in a worker thread (FastAPI does this for
  sync `def` route handlers).

  72-byte limit: bcrypt only reads the first 72 bytes of input. hash()
  refuses longer input so two passwords sharing a 72-byte prefix can never
  collide; verify() returns False for such input since no stored hash can
  match it.

  Timing equalization: dummy_verify() runs a full verify against a hash
  computed once per hasher, so a login for an unknown identity costs the
  same as a login with a wrong password.
"""

from __future__ import annotations

import bcrypt

from auth.errors import CorruptHash, PasswordTooLong

BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted, adaptive one-way hashing.

    Identical plaintexts hash to different outputs because gensalt() draws a
    fresh random salt on every call.
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, plaintext: str) -> str:
        """Return a bcrypt hash of the given plaintext password."""
        encoded = plaintext.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise PasswordTooLong()
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True if plaintext matches hashed.

        Never raises on a mismatch. Raises CorruptHash when the stored hash is
        not a well-formed bcrypt string.
        """
        if not isinstance(hashed, str) or not hashed:
            raise CorruptHash()
        encoded = plaintext.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
        except ValueError as exc:
            raise CorruptHash() from exc

    def dummy_verify(self, plaintext: str) -> None:
        """Spend one verify's worth of work and discard the result."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("authgate-timing-dummy")
        self.verify(plaintext, self._dummy_hash)
