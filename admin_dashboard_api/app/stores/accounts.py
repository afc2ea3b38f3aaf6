"""
Account collection (``users.json``).

Accounts carry a password hash under the ``password`` key.  That key
must never cross the API boundary: every place that returns an account
to a client goes through :func:`public_account`.
"""

from typing import Any, Dict, List, Optional

from ..core.db import CollectionBackend, Record
from ..core.security import hash_password
from .base import DuplicateRecord, RecordStore, utc_now_iso

# Keys that are stripped from an account before it leaves the store.
PRIVATE_FIELDS = frozenset({"password"})


def public_account(record: Optional[Record]) -> Optional[Dict[str, Any]]:
    """Return a copy of ``record`` without private fields."""
    if record is None:
        return None
    return {k: v for k, v in record.items() if k not in PRIVATE_FIELDS}


def default_accounts() -> List[Record]:
    """Seed accounts written the first time the collection is accessed."""
    now = utc_now_iso()
    return [
        {
            "id": 1,
            "username": "admin",
            "email": "admin@example.com",
            "password": hash_password("admin123"),
            "name": "Administrator",
            "role": "admin",
            "status": "active",
            "avatar": None,
            "lastLogin": None,
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 2,
            "username": "user1",
            "email": "user1@example.com",
            "password": hash_password("user123"),
            "name": "John Doe",
            "role": "user",
            "status": "active",
            "avatar": None,
            "lastLogin": None,
            "createdAt": now,
            "updatedAt": now,
        },
    ]


class AccountExists(DuplicateRecord):
    """Another account already uses the requested email address."""


class AccountStore(RecordStore):
    """Store for user accounts.

    Email addresses are unique: ``create`` and ``update`` raise
    ``AccountExists`` when the address belongs to another account.
    """

    name = "users"
    unique_fields = ("email",)
    duplicate_error = AccountExists

    def __init__(self, backend: CollectionBackend, seed=default_accounts) -> None:
        super().__init__(backend, seed=seed)

    def prepare_new(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields.setdefault("role", "user")
        fields.setdefault("status", "active")
        fields.setdefault("avatar", None)
        fields.setdefault("lastLogin", None)
        return fields

    async def get_by_email(self, email: str) -> Optional[Record]:
        return await self.get_by_field("email", email)
