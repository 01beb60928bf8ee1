#!/usr/bin/env python3
"""
Print an access token for the tag API.

Usage:
    python create_token.py --sub admin --days 365

The token is signed with ``SECRET_KEY`` from the environment, so run
this with the same environment as the server.
"""

import argparse

from web_archive_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Create an access token for the Web Archive Tag API.")
    ap.add_argument("--sub", default="admin", help="Token subject (default: admin)")
    ap.add_argument("--days", type=int, default=365, help="Lifetime in days (default: 365)")
    args = ap.parse_args()

    token = create_access_token({"sub": args.sub}, expires_delta=args.days * 24 * 60 * 60)
    print(token)


if __name__ == "__main__":
    main()
