"""
auth/store.py -- SQLAlchemy Core persistence layer for accounts.

Pattern: Repository + Data Mapper.
AccountStore is the repository; _row_to_account is the mapper.
Service and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  Identity uniqueness is enforced by the UNIQUE constraint on
  accounts.identity, never by a read-then-write check. Two concurrent
  registrations of the same identity race at the INSERT; the loser gets an
  IntegrityError, which create() translates to DuplicateIdentity.

DB path: auth/authgate.db by default (see core.config.Settings.database_url).

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from auth.errors import AccountNotFound, DuplicateIdentity
from auth.models import Account, Role, Status
from core.config import get_settings

logger = logging.getLogger("authgate.store")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_accounts = Table(
    "accounts",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("identity", String(255), nullable=False, unique=True),  # normalized
    Column("password_hash", Text, nullable=False),
    Column("role", String(30), nullable=False, server_default=Role.USER.value),
    Column("status", String(30), nullable=False, server_default=Status.ACTIVE.value),
    Column("created_at", String(32), nullable=False),
    Column("last_login", String(32)),  # ISO 8601 UTC, NULL until first login
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_iso(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat()


def _from_iso(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AccountStore:
    """Repository for Account records.

    Usage:
        store = AccountStore("sqlite:///accounts.db")
        account_id = store.create("alice", hasher.hash("correct horse"))
        account = store.find_by_identity("alice")
        store.close()

    Callers pass identities already normalized by the account service; the
    store compares them byte-for-byte.
    """

    def __init__(self, db_url: str | None = None) -> None:
        db_url = db_url or get_settings().database_url
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, identity: str, password_hash: str) -> int:
        """Insert a new account and return its assigned database ID.

        New accounts always start as role=user, status=active, last_login=NULL.
        Raises DuplicateIdentity if the identity is already taken.
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _accounts.insert().values(
                        identity=identity,
                        password_hash=password_hash,
                        role=Role.USER.value,
                        status=Status.ACTIVE.value,
                        created_at=_now_iso(),
                    )
                )
                conn.commit()
        except IntegrityError as exc:
            raise DuplicateIdentity() from exc
        account_id = result.inserted_primary_key[0]
        logger.info("Account created id=%d", account_id)
        return account_id

    def touch_last_login(self, account_id: int, timestamp: datetime) -> None:
        """Stamp last_login for the given account. Idempotent.

        Raises AccountNotFound if no row matched.
        """
        self._update(account_id, last_login=_to_iso(timestamp))

    def set_status(self, account_id: int, status: Status) -> None:
        """Administrative action: block or re-activate an account."""
        self._update(account_id, status=Status(status).value)
        logger.info("Account id=%d status set to %s", account_id, Status(status).value)

    def set_role(self, account_id: int, role: Role) -> None:
        """Administrative action: change an account's privilege tier."""
        self._update(account_id, role=Role(role).value)
        logger.info("Account id=%d role set to %s", account_id, Role(role).value)

    def _update(self, account_id: int, **fields) -> None:
        with self.engine.connect() as conn:
            result = conn.execute(_accounts.update().where(_accounts.c.id == account_id).values(**fields))
            conn.commit()
        if result.rowcount == 0:
            raise AccountNotFound()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_identity(self, identity: str) -> Account | None:
        """Look up an account by exact normalized identity. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.identity == identity)).fetchone()
        return _row_to_account(row) if row is not None else None

    def get_by_id(self, account_id: int) -> Account | None:
        """Look up an account by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_accounts.select().where(_accounts.c.id == account_id)).fetchone()
        return _row_to_account(row) if row is not None else None

    def list_accounts(self) -> list[Account]:
        """Return all accounts ordered by identity."""
        with self.engine.connect() as conn:
            rows = conn.execute(_accounts.select().order_by(_accounts.c.identity)).fetchall()
        return [_row_to_account(r) for r in rows]

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        with self.engine.connect() as conn:
            conn.execute(_accounts.select().limit(1)).fetchall()
        return True

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_account(row) -> Account:
    return Account(
        id=row.id,
        identity=row.identity,
        password_hash=row.password_hash,
        role=Role(row.role),
        status=Status(row.status),
        created_at=_from_iso(row.created_at),
        last_login=_from_iso(row.last_login),
    )
