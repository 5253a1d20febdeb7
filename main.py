#!/usr/bin/env python3
"""
AuthGate -- operator CLI for the account store.

Status and role changes are administrative actions outside the HTTP API.
This script is where they happen.

Usage:
  python main.py create-user alice
  python main.py create-user root --role administrator
  python main.py set-status alice blocked
  python main.py set-status alice active
  python main.py set-role alice admin
  python main.py list-users
  python main.py --db sqlite:///other.db list-users

Environment variables:
  DATABASE_URL   SQLAlchemy URL of the account database (see core/config.py).
  BCRYPT_ROUNDS  bcrypt cost used by create-user.
"""

import argparse
import getpass
import sys
from typing import Optional

from auth.errors import AccountNotFound, AuthGatewayError
from auth.models import Role, Status
from auth.passwords import PasswordHasher
from auth.service import AccountService, normalize_identity
from auth.store import AccountStore
from core.config import get_settings


def _read_password() -> Optional[str]:
    password = getpass.getpass("Password: ")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        print("  [!] Passwords do not match.")
        return None
    return password


def _require_account_id(store: AccountStore, raw_identity: str) -> int:
    account = store.find_by_identity(normalize_identity(raw_identity))
    if account is None:
        raise AccountNotFound()
    return account.id


def cmd_create_user(store: AccountStore, args: argparse.Namespace) -> int:
    settings = get_settings()
    service = AccountService(
        store,
        PasswordHasher(rounds=settings.bcrypt_rounds),
        min_password_length=settings.min_password_length,
    )
    password = _read_password()
    if password is None:
        return 1
    account_id = service.register(args.identity, password)
    role = Role(args.role)
    if role is not Role.USER:
        store.set_role(account_id, role)
    print(f"  Created '{normalize_identity(args.identity)}' (id={account_id}, role={role.value})")
    return 0


def cmd_set_status(store: AccountStore, args: argparse.Namespace) -> int:
    account_id = _require_account_id(store, args.identity)
    store.set_status(account_id, Status(args.status))
    print(f"  '{normalize_identity(args.identity)}' is now {args.status}")
    return 0


def cmd_set_role(store: AccountStore, args: argparse.Namespace) -> int:
    account_id = _require_account_id(store, args.identity)
    store.set_role(account_id, Role(args.role))
    print(f"  '{normalize_identity(args.identity)}' now has role {args.role}")
    return 0


def cmd_list_users(store: AccountStore, args: argparse.Namespace) -> int:
    accounts = store.list_accounts()
    if not accounts:
        print("  No accounts.")
        return 0
    print(f"  {'ID':>4}  {'USERNAME':<24} {'ROLE':<14} {'STATUS':<8} LAST LOGIN")
    for a in accounts:
        last_login = a.last_login.strftime("%Y-%m-%d %H:%M:%S") if a.last_login else "-"
        print(f"  {a.id:>4}  {a.identity:<24} {a.role.value:<14} {a.status.value:<8} {last_login}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="AuthGate account administration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--db", metavar="URL", help="Database URL (default: DATABASE_URL setting)")
    sub = parser.add_subparsers(dest="command", required=True)

    roles = [r.value for r in Role]

    p = sub.add_parser("create-user", help="Create an account (prompts for the password)")
    p.add_argument("identity")
    p.add_argument("--role", choices=roles, default=Role.USER.value)
    p.set_defaults(func=cmd_create_user)

    p = sub.add_parser("set-status", help="Block or re-activate an account")
    p.add_argument("identity")
    p.add_argument("status", choices=[s.value for s in Status])
    p.set_defaults(func=cmd_set_status)

    p = sub.add_parser("set-role", help="Change an account's role")
    p.add_argument("identity")
    p.add_argument("role", choices=roles)
    p.set_defaults(func=cmd_set_role)

    p = sub.add_parser("list-users", help="List all accounts")
    p.set_defaults(func=cmd_list_users)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    store = AccountStore(args.db or get_settings().database_url)
    try:
        return args.func(store, args)
    except AuthGatewayError as e:
        print(f"  [!] {e}")
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
