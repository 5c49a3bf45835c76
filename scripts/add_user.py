#!/usr/bin/env python3
"""
Create a user directly in the configured database.

Usage:
  python scripts/add_user.py --name "Ann Lee" --email ann@example.com [--age 30] [--role admin] [--inactive]
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Make the taskapi package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from taskapi.core.config import get_settings  # noqa: E402
from taskapi.core.errors import AppError  # noqa: E402
from taskapi.core.logging import configure_logging  # noqa: E402
from taskapi.domain.entities import ROLE_VALUES  # noqa: E402
from taskapi.repositories import MODE_MEMORY, open_store  # noqa: E402
from taskapi.services.user_service import UserService  # noqa: E402


def build_payload(args: argparse.Namespace) -> dict:
    payload: dict = {"name": args.name, "email": args.email}
    if args.age is not None:
        payload["age"] = args.age
    if args.role:
        payload["role"] = args.role
    if args.inactive:
        payload["active"] = False
    return payload


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Create a user in the database")
    ap.add_argument("--name", required=True, help="Full name (2-50 characters)")
    ap.add_argument("--email", required=True, help="Unique email address")
    ap.add_argument("--age", type=int, help="Optional age (0-120)")
    ap.add_argument("--role", choices=ROLE_VALUES, help="Role (default: user)")
    ap.add_argument("--inactive", action="store_true", help="Create the user as inactive")
    args = ap.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    store = open_store(settings)
    if store.mode == MODE_MEMORY:
        raise SystemExit("Database unreachable; a user created now would not persist")

    try:
        user = UserService(store).create_user(build_payload(args))
    except AppError as exc:
        sys.stderr.write(f"Error: {exc.message}\n")
        if isinstance(exc.details, list):
            for item in exc.details:
                sys.stderr.write(f"  - {item}\n")
        return 1
    print("OK: user created")
    print(f"  ID: {user.id}")
    print(f"  Email: {user.email}")
    print(f"  Role: {user.role}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
