#!/usr/bin/env python3
"""
Print a random SECRET_KEY for .env.

Usage:
    python scripts/generate_secret.py
    python scripts/generate_secret.py --bytes 64
"""

import argparse
import secrets


def main():
    parser = argparse.ArgumentParser(description="Generate a SECRET_KEY")
    parser.add_argument("--bytes", type=int, default=48, help="Entropy in bytes")
    args = parser.parse_args()
    print(f"SECRET_KEY={secrets.token_urlsafe(args.bytes)}")


if __name__ == "__main__":
    main()
