#!/usr/bin/env python
"""Create a user account from the command line.

There is no self-service sign-up; users are provisioned with this script.
The password is prompted for when not passed on the command line.

Usage:
    python -m scripts.create_user --email me@example.com
    python -m scripts.create_user --email me@example.com --sync-frequency weekly
"""

import argparse
import getpass
import sys

from database import session_scope
from models.user import SYNC_FREQUENCIES
from services.auth_service import AuthService


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args and create the user."""
    parser = argparse.ArgumentParser(description="Create a finance tracker user.")
    parser.add_argument("--email", required=True, help="Login email address")
    parser.add_argument(
        "--password",
        help="Password (prompted for if omitted)",
    )
    parser.add_argument(
        "--sync-frequency",
        choices=SYNC_FREQUENCIES,
        default="daily",
        help="Scheduled sync cadence (default: daily)",
    )
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("Error: password must not be empty")
        return 1

    with session_scope() as db:
        try:
            user = AuthService.create_user(
                db, args.email, password, sync_frequency=args.sync_frequency
            )
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        print(f"Created user {user.email} (id={user.id}, sync={user.sync_frequency})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
