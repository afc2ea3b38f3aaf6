"""
Record stores, one per entity kind.

``build_stores`` constructs the three stores once at process start; the
application keeps the resulting ``Stores`` on ``app.state`` and hands
it to route handlers through dependencies rather than through module
level singletons.
"""

from dataclasses import dataclass

from ..core.config import Settings
from ..core.db import JsonFileBackend
from .accounts import AccountStore, public_account
from .audit import AuditStore
from .base import RecordStore
from .catalog import CatalogStore

__all__ = [
    "AccountStore",
    "AuditStore",
    "CatalogStore",
    "RecordStore",
    "Stores",
    "build_stores",
    "public_account",
]


@dataclass
class Stores:
    accounts: AccountStore
    products: CatalogStore
    logs: AuditStore

    async def ensure_initialized(self) -> None:
        await self.accounts.ensure_initialized()
        await self.products.ensure_initialized()
        await self.logs.ensure_initialized()


def build_stores(settings: Settings) -> Stores:
    """Create JSON-file backed stores under ``settings.data_dir``."""
    data_path = settings.data_path
    return Stores(
        accounts=AccountStore(JsonFileBackend(data_path / "users.json")),
        products=CatalogStore(JsonFileBackend(data_path / "products.json")),
        logs=AuditStore(JsonFileBackend(data_path / "logs.json"), cap=settings.audit_log_cap),
    )
