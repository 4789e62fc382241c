#!/usr/bin/env python3
"""
Issue a long-lived bearer token for an existing user (e.g. for scripts
calling the admin API).

Usage:
    python create_token.py --email admin@example.com --days 365
"""

import argparse
import sys

from evenza_api.app.core.db import get_connection, init_db
from evenza_api.app.core.security import create_user_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Create an access token for an Evenza user.")
    ap.add_argument("--email", required=True, help="Email of the user the token is issued for")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days (default: 365)")
    args = ap.parse_args()

    init_db()
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id, name, email, role FROM users WHERE email = ?",
            (args.email.strip().lower(),),
        ).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)
    print(create_user_token(dict(row), expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
