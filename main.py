#!/usr/bin/env python3
"""
AgriRent -- operator CLI for the account store.

Usage:
  python main.py create farmer1@example.com farmer
  python main.py create owner@example.com vehicle_owner --password-stdin < pw.txt
  python main.py list
  python main.py serve

Environment variables are read through core.config (JWT_SECRET, USERS_FILE,
PORT, DEBUG, ...). create goes through the same Account Service the API uses,
so the duplicate check and hashing rules are identical.
"""

import argparse
import sys
from getpass import getpass

from auth.errors import AuthError
from auth.service import AccountService
from auth.store import CredentialStore
from core.config import get_settings


def _read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    first = getpass("Password: ")
    second = getpass("Repeat password: ")
    if first != second:
        print("  [!] Passwords do not match.", file=sys.stderr)
        return ""
    return first


def cmd_create(args: argparse.Namespace) -> int:
    service = AccountService.from_settings(get_settings())
    password = _read_password(args.password_stdin)
    try:
        result = service.signup(args.email, password, args.role)
    except AuthError as exc:
        print(f"  [!] {exc.message}", file=sys.stderr)
        return 1
    print(f"Created account '{result.account.email}' with role '{result.account.role}'.")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    accounts = CredentialStore.from_settings(get_settings()).load_all()
    if not accounts:
        print("No accounts.")
        return 0
    width = max(len(a.email) for a in accounts)
    for account in accounts:
        print(f"{account.email:<{width}}  {account.role:<15}  {account.created_at}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from api.main import app

    uvicorn.run(app, host=args.host, port=args.port or get_settings().port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="AgriRent account administration.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Register an account without going through the web UI")
    create.add_argument("email")
    create.add_argument("role", help='Role tag, e.g. "farmer" or "vehicle_owner"')
    create.add_argument("--password-stdin", action="store_true", help="Read the password from stdin")
    create.set_defaults(func=cmd_create)

    listing = sub.add_parser("list", help="Show stored accounts (no password hashes)")
    listing.set_defaults(func=cmd_list)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=0, help="Defaults to PORT from the environment")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
