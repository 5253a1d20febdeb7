"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for AuthGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. session_ttl_seconds -> SESSION_TTL_SECONDS).

  @model_validator(mode="after"): Cross-field validation once all fields are
      resolved. Enforces the bcrypt cost window and the password floor.

Security notes:
  bcrypt_rounds is bounded to 4..16. Below 4 bcrypt refuses to run; above 16
  a single login costs several seconds, which turns the hasher into a DoS lever.

  min_password_length may be raised but never lowered below 8.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("authgate.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'auth' / 'authgate.db'}"

MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 16
PASSWORD_FLOOR = 8


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    # 12 rounds keeps a single hash in the low hundreds of milliseconds.
    bcrypt_rounds: int = 12
    min_password_length: int = PASSWORD_FLOOR

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    # Absolute lifetime, not sliding. 20 minutes.
    session_ttl_seconds: int = 1200
    session_purge_interval_seconds: int = 300
    session_cookie_name: str = "session_token"
    secure_cookies: bool = False

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_bounds(self) -> "Settings":
        """Reject configurations that would weaken or break authentication."""
        if not MIN_BCRYPT_ROUNDS <= self.bcrypt_rounds <= MAX_BCRYPT_ROUNDS:
            raise ValueError(f"BCRYPT_ROUNDS must be between {MIN_BCRYPT_ROUNDS} and {MAX_BCRYPT_ROUNDS}.")
        if self.min_password_length < PASSWORD_FLOOR:
            raise ValueError(f"MIN_PASSWORD_LENGTH must be at least {PASSWORD_FLOOR}.")
        if self.session_ttl_seconds <= 0:
            raise ValueError("SESSION_TTL_SECONDS must be positive.")
        if self.session_purge_interval_seconds <= 0:
            raise ValueError("SESSION_PURGE_INTERVAL_SECONDS must be positive.")
        if self.debug and not self.secure_cookies:
            logger.warning("Running in DEBUG mode with insecure (non-HTTPS) session cookies.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
