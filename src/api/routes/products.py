"""
Product API routes.
"""

from fastapi import APIRouter

from ..models import ProductDeleteResponse, ProductRequest, ProductResponse
from ..deps import CurrentUser
from ...content import add_product, delete_product, update_product

router = APIRouter(tags=["Products"])


@router.post("/grid/{section_id}/products", status_code=201)
async def add_product_endpoint(
    section_id: str,
    request: ProductRequest,
    current_user: CurrentUser,
) -> ProductResponse:
    """Append a product to a grid section."""
    return await add_product(section_id, request)


@router.put("/products/{product_id}")
async def update_product_endpoint(
    product_id: int,
    request: ProductRequest,
    current_user: CurrentUser,
) -> ProductResponse:
    """Update a product's fields. Its position is unchanged."""
    return await update_product(product_id, request)


@router.delete("/products/{product_id}")
async def delete_product_endpoint(
    product_id: int,
    current_user: CurrentUser,
) -> ProductDeleteResponse:
    """Delete a product."""
    return await delete_product(product_id)
