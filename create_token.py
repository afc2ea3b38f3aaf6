#!/usr/bin/env python3
"""
Issue a long-lived bearer token for an existing account.

Useful for scripts and monitoring that call the API without logging in.
The token is signed with ``SECRET_KEY`` from the environment, so run it
with the same configuration as the server.

Usage:
    python create_token.py --user-id 1 --role admin --days 365
"""

import argparse

from admin_dashboard_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Create an access token for an account.")
    ap.add_argument("--user-id", type=int, required=True, help="Account id the token belongs to")
    ap.add_argument("--role", default="admin", choices=["admin", "user"], help="Role stored in the token")
    ap.add_argument("--days", type=int, default=365, help="Lifetime in days (default 365)")
    args = ap.parse_args()

    print(create_access_token(args.user_id, args.role, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
