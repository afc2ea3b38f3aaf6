"""Tests for image handling in ``ProductService``."""

import io

import pytest
from starlette.datastructures import UploadFile

from admin_dashboard_api.app.core.db import MemoryBackend
from admin_dashboard_api.app.services.product_service import (
    MAX_IMAGE_BYTES,
    InvalidImage,
    ProductService,
    read_upload,
)
from admin_dashboard_api.app.stores.catalog import CatalogStore

pytestmark = pytest.mark.anyio

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture()
def service(tmp_path):
    return ProductService(CatalogStore(MemoryBackend()), tmp_path / "uploads")


async def test_read_upload_stops_past_the_limit():
    upload = UploadFile(file=io.BytesIO(b"\x00" * (MAX_IMAGE_BYTES + 4096)), filename="big.png")
    data = await read_upload(upload)
    assert len(data) == MAX_IMAGE_BYTES + 1
    assert upload.file.tell() == MAX_IMAGE_BYTES + 1


async def test_read_upload_returns_small_file_whole():
    upload = UploadFile(file=io.BytesIO(PNG_BYTES), filename="photo.png")
    assert await read_upload(upload) == PNG_BYTES


async def test_attach_image_rejects_oversized_data(service, tmp_path):
    await service.products.ensure_initialized()
    with pytest.raises(InvalidImage):
        await service.attach_image(1, "photo.png", "image/png", b"\x00" * (MAX_IMAGE_BYTES + 1))
    assert not (tmp_path / "uploads" / "products").exists()
    assert (await service.products.get_by_id(1))["image"] == "product1.jpg"


async def test_attach_image_unknown_product(service):
    await service.products.ensure_initialized()
    assert await service.attach_image(99, "photo.png", "image/png", PNG_BYTES) is None
