"""
Business logic for accounts.

``UserService`` wraps the ``AccountStore`` with the rules the routes
rely on: unique email addresses, password hashing, login bookkeeping
and the list query used by the admin user table.  Hashing and password
checks run in a worker thread.  Returned records still contain the
password hash; routes project them with ``public_account`` before
responding.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..core.security import hash_password, verify_password
from ..stores.accounts import AccountStore
from ..stores.base import utc_now_iso
from .query import ListQuery, Page, run_query

logger = logging.getLogger(__name__)

USER_SEARCH_FIELDS = ("name", "email", "username")


class UserService:
    """Account operations on top of an ``AccountStore``."""

    def __init__(self, accounts: AccountStore) -> None:
        self.accounts = accounts

    async def create_user(self, name: str, email: str, password: str, role: str = "user") -> Dict[str, Any]:
        """Create an account with a hashed password.

        The username is the local part of the email address.  Raises
        ``AccountExists`` if the email is taken; the store checks this
        under its write lock.
        """
        hashed = await asyncio.to_thread(hash_password, password)
        account = await self.accounts.create(
            {
                "name": name,
                "email": email,
                "username": email.split("@")[0],
                "password": hashed,
                "role": role,
                "avatar": None,
            }
        )
        logger.info("Registered user %s with role %s", email, role)
        return account

    async def check_password(self, account: Dict[str, Any], password: Optional[str]) -> bool:
        if not password:
            return False
        return await asyncio.to_thread(verify_password, password, account.get("password"))

    async def authenticate(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Return the account if ``password`` matches, otherwise ``None``.

        Account status is not checked here; the login route reports an
        inactive account separately.
        """
        account = await self.accounts.get_by_email(email)
        if account is None or not await self.check_password(account, password):
            return None
        return account

    async def record_login(self, account_id: int) -> Optional[Dict[str, Any]]:
        return await self.accounts.update(account_id, {"lastLogin": utc_now_iso()})

    async def list_users(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        role: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Tuple[Page, List[Dict[str, Any]]]:
        records = await self.accounts.load_all()
        query = ListQuery(
            search=search,
            search_fields=USER_SEARCH_FIELDS,
            equals={"role": role, "status": status},
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        return run_query(records, query)

    async def update_user(self, account_id: int, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge profile ``updates``; ``None`` if the account does not exist.

        Changing the email to one used by another account raises
        ``AccountExists``.
        """
        updated = await self.accounts.update(account_id, updates)
        if updated is not None:
            logger.info("Updated user %s: %s", account_id, ", ".join(sorted(updates)) or "no fields")
        return updated

    async def change_password(self, account_id: int, new_password: str) -> Optional[Dict[str, Any]]:
        hashed = await asyncio.to_thread(hash_password, new_password)
        return await self.accounts.update(account_id, {"password": hashed})

    async def delete_user(self, account_id: int) -> bool:
        deleted = await self.accounts.delete(account_id)
        if deleted:
            logger.info("Deleted user %s", account_id)
        return deleted
