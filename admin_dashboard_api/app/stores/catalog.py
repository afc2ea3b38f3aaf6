"""Product collection (``products.json``)."""

from typing import Any, Dict, List

from ..core.db import CollectionBackend, Record
from .base import RecordStore, utc_now_iso

IN_STOCK = "in_stock"
OUT_OF_STOCK = "out_of_stock"
# ``low_stock`` is offered as a filter value to the dashboard but is
# never derived by the store.
PRODUCT_STATUSES = (IN_STOCK, OUT_OF_STOCK, "low_stock")


def stock_status(stock: Any) -> str:
    """``in_stock`` iff ``stock > 0``."""
    try:
        return IN_STOCK if stock > 0 else OUT_OF_STOCK
    except TypeError:
        return OUT_OF_STOCK


def default_products() -> List[Record]:
    now = utc_now_iso()
    seed = [
        {
            "id": 1,
            "name": "Wireless Headphones",
            "description": "High-quality wireless headphones with noise cancellation",
            "price": 199.99,
            "category": "Electronics",
            "stock": 50,
            "image": "product1.jpg",
            "sku": "ELEC-001",
            "rating": 4.5,
        },
        {
            "id": 2,
            "name": "Office Chair",
            "description": "Ergonomic office chair with lumbar support",
            "price": 299.99,
            "category": "Furniture",
            "stock": 25,
            "image": "product2.jpg",
            "sku": "FURN-001",
            "rating": 4.2,
        },
        {
            "id": 3,
            "name": "Coffee Maker",
            "description": "Automatic coffee maker with timer",
            "price": 89.99,
            "category": "Home Appliances",
            "stock": 0,
            "image": "product3.jpg",
            "sku": "HOME-001",
            "rating": 4.7,
        },
    ]
    for product in seed:
        product["status"] = stock_status(product["stock"])
        product["createdAt"] = now
        product["updatedAt"] = now
    return seed


class CatalogStore(RecordStore):
    """Store for catalog items; keeps ``status`` in line with ``stock``."""

    name = "products"

    def __init__(self, backend: CollectionBackend, seed=default_products) -> None:
        super().__init__(backend, seed=seed)

    def prepare_new(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        fields.setdefault("stock", 0)
        fields["status"] = stock_status(fields["stock"])
        return fields

    def prepare_update(self, current: Record, updates: Dict[str, Any]) -> Dict[str, Any]:
        if "stock" in updates:
            updates["status"] = stock_status(updates["stock"])
        else:
            # status is derived; a client cannot set it on its own
            updates.pop("status", None)
        return updates

    async def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        seen: Dict[str, None] = {}
        for product in await self.load_all():
            if product.get("category") is not None:
                seen.setdefault(product["category"], None)
        return list(seen)
