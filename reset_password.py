#!/usr/bin/env python3
"""
Reset an account's password in the JSON user store.

This script DOES NOT read or reveal any existing password.  It simply
sets a new password hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex")
for the account with the given email.  Stop the server first: it keeps
no cache, but a write from the server at the same moment would win.

Usage:
    python reset_password.py --data-dir data --email admin@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import sys
from typing import List, Optional

from admin_dashboard_api.app.core.config import settings
from admin_dashboard_api.app.core.db import JsonFileBackend, StoreUnavailable
from admin_dashboard_api.app.core.security import hash_password
from admin_dashboard_api.app.stores.base import utc_now_iso


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description="Reset an account password (JSON store).")
    ap.add_argument(
        "--data-dir",
        default=settings.data_dir,
        help="Directory containing users.json, relative to the project root (default: DATA_DIR)",
    )
    ap.add_argument("--email", required=True, help="Email of the account to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args(argv)

    backend = JsonFileBackend(settings.resolve(args.data_dir) / "users.json")
    if not backend.exists():
        print(f"[!] User store not found: {backend.path}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < 6:
        print("[!] Password must be at least 6 characters.", file=sys.stderr)
        sys.exit(1)

    try:
        users = backend.read()
    except StoreUnavailable as exc:
        print(f"[!] {exc}", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    for user in users:
        if user.get("email") == email:
            user["password"] = hash_password(new_password)
            user["updatedAt"] = utc_now_iso()
            break
    else:
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)

    backend.write(users)
    print(f"[+] Password updated for user: {email}")


if __name__ == "__main__":
    main()
