#!/usr/bin/env python3
"""
Reset a user's password in the Evenza SQLite database.

This script does not read or reveal existing passwords.  It stores a new
PBKDF2-HMAC-SHA256 hash for the given email and signs the user out of
every active session.  With ``--role`` the user's role is changed as
well, which is how a lost super admin account is recovered.

Usage:
    python reset_password.py --db ./evenza.db --email admin@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from evenza_api.app.core.security import ROLES, hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset an Evenza user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./evenza.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--role", choices=ROLES, help="Also change the user's role")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < 8:
        print("[!] Password must be at least 8 characters.", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        row = cur.fetchone()
        if not row:
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)

        cur.execute(
            "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (hash_password(new_password), row[0]),
        )
        if args.role:
            cur.execute("UPDATE users SET role = ? WHERE id = ?", (args.role, row[0]))
        cur.execute("DELETE FROM sessions WHERE user_id = ?", (row[0],))
        conn.commit()
        print(f"[+] Password updated for user: {email}")
        if args.role:
            print(f"[+] Role set to: {args.role}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
