#!/usr/bin/env python3
"""
Generate a bcrypt hash for ADMIN_PASSWORD_HASH.

Usage:
    python scripts/hash_password.py
    python scripts/hash_password.py --rounds 14
"""

import argparse
import getpass
import sys

import bcrypt


def main():
    parser = argparse.ArgumentParser(description="Hash the admin password")
    parser.add_argument(
        "--rounds", type=int, default=12, help="bcrypt cost factor (default: 12)"
    )
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if not password:
        print("Password must not be empty", file=sys.stderr)
        return 1
    if password != getpass.getpass("Repeat password: "):
        print("Passwords do not match", file=sys.stderr)
        return 1

    hashed = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=args.rounds))
    print(f"ADMIN_PASSWORD_HASH={hashed.decode()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
