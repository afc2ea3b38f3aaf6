"""
Business logic for products.

Listing combines the query helpers with the filter options the
dashboard shows next to the product table.  Image uploads are saved
under ``<upload_dir>/products`` and referenced from the product as
``/uploads/products/<file>``.
"""

import logging
import random
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..stores.catalog import PRODUCT_STATUSES, CatalogStore
from .query import ListQuery, Page, category_stats, run_query

logger = logging.getLogger(__name__)

PRODUCT_SEARCH_FIELDS = ("name", "description", "sku")

ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
MAX_IMAGE_BYTES = 5 * 1024 * 1024


class InvalidImage(ValueError):
    """The uploaded file is not an accepted image."""


async def read_upload(upload: Any) -> bytes:
    """Read an uploaded file, stopping one byte past the size limit.

    A result longer than ``MAX_IMAGE_BYTES`` is rejected by
    ``validate_image`` without buffering the rest of the upload.
    """
    return await upload.read(MAX_IMAGE_BYTES + 1)


class ProductService:
    """Product operations on top of a ``CatalogStore``."""

    def __init__(self, products: CatalogStore, upload_dir: Path) -> None:
        self.products = products
        self.upload_dir = Path(upload_dir)

    async def list_products(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        category: Optional[str] = None,
        status: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Tuple[Page, Dict[str, List[str]]]:
        """Return the requested page and the filter options for the result."""
        records = await self.products.load_all()
        query = ListQuery(
            search=search,
            search_fields=PRODUCT_SEARCH_FIELDS,
            equals={"category": category, "status": status},
            ranges={"price": (min_price, max_price)},
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        result_page, filtered = run_query(records, query)
        categories: Dict[str, None] = {}
        for product in filtered:
            categories.setdefault(product.get("category"), None)
        filters = {"categories": list(categories), "statuses": list(PRODUCT_STATUSES)}
        return result_page, filters

    async def category_stats(self) -> Dict[str, Dict[str, Any]]:
        return category_stats(await self.products.load_all())

    async def create_product(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        product = await self.products.create(fields)
        logger.info("Created product %s (%s)", product["id"], product.get("name"))
        return product

    async def update_product(self, product_id: int, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.products.update(product_id, updates)

    async def delete_product(self, product_id: int) -> bool:
        deleted = await self.products.delete(product_id)
        if deleted:
            logger.info("Deleted product %s", product_id)
        return deleted

    def _image_name(self, original: str) -> str:
        ext = Path(original).suffix.lower()
        return f"product-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"

    def validate_image(self, filename: str, content_type: Optional[str], size: int) -> None:
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS or (content_type or "").lower() not in ALLOWED_IMAGE_TYPES:
            raise InvalidImage("Only image files are allowed")
        if size > MAX_IMAGE_BYTES:
            raise InvalidImage("Image exceeds the 5MB limit")

    async def attach_image(
        self, product_id: int, filename: str, content_type: Optional[str], data: bytes
    ) -> Optional[Dict[str, Any]]:
        """Store an uploaded image and point the product at it.

        Returns ``None`` if the product does not exist; raises
        ``InvalidImage`` for a rejected file.
        """
        if await self.products.get_by_id(product_id) is None:
            return None
        self.validate_image(filename, content_type, len(data))
        target_dir = self.upload_dir / "products"
        target_dir.mkdir(parents=True, exist_ok=True)
        name = self._image_name(filename)
        (target_dir / name).write_bytes(data)
        logger.info("Stored image %s for product %s", name, product_id)
        return await self.products.update(product_id, {"image": f"/uploads/products/{name}"})
