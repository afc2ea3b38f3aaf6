"""
Product endpoints for API v1.

Any authenticated account can browse the catalogue; creating, editing,
deleting and attaching images requires the admin role.  Images are
sent as a separate multipart request to ``/products/{id}/image``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from admin_dashboard_api.app.core.auth import get_current_user, require_admin
from admin_dashboard_api.app.dependencies import get_product_service
from admin_dashboard_api.app.schemas.product import ProductCreate, ProductUpdate
from admin_dashboard_api.app.services.product_service import InvalidImage, ProductService, read_upload

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


@router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str = Query(""),
    category: Optional[str] = Query(None),
    product_status: Optional[str] = Query(None, alias="status"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    current_user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Return one page of products together with the available filter values."""
    result, filters = await products.list_products(
        page=page,
        limit=limit,
        search=search,
        category=category,
        status=product_status,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return {
        "success": True,
        "data": result.items,
        "filters": filters,
        "pagination": result.pagination(),
    }


# Declared before "/{product_id}" so "categories" is not parsed as an id.
@router.get("/categories/stats")
async def category_stats(
    current_user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    return {"success": True, "data": await products.category_stats()}


@router.get("/{product_id}")
async def get_product(
    product_id: int,
    current_user: Dict[str, Any] = Depends(get_current_user),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product = await products.products.get_by_id(product_id)
    if product is None:
        raise _not_found()
    return {"success": True, "data": product}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    current_user: Dict[str, Any] = Depends(require_admin),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Create a product.  Its ``status`` is derived from ``stock``."""
    product = await products.create_product(payload.model_dump(by_alias=True))
    return {"success": True, "data": product}


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    current_user: Dict[str, Any] = Depends(require_admin),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    updates = {k: v for k, v in payload.changes().items() if v is not None}
    product = await products.update_product(product_id, updates)
    if product is None:
        raise _not_found()
    return {"success": True, "data": product}


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    current_user: Dict[str, Any] = Depends(require_admin),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    if not await products.delete_product(product_id):
        raise _not_found()
    return {"success": True, "message": "Product deleted successfully"}


@router.post("/{product_id}/image")
async def upload_product_image(
    product_id: int,
    image: UploadFile = File(...),
    current_user: Dict[str, Any] = Depends(require_admin),
    products: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Store an uploaded image and set it as the product's picture."""
    data = await read_upload(image)
    try:
        product = await products.attach_image(product_id, image.filename or "", image.content_type, data)
    except InvalidImage as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if product is None:
        raise _not_found()
    return {"success": True, "data": product}
