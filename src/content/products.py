"""
Product editors for grid sections.

Products are addressed by their own id for updates and deletes; new
products are appended after the grid's current highest sort_order.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from .. import db
from ..errors import NotFoundFailure
from .models import ProductInput, validate_input
from .reader import PRODUCT_COLUMNS, product_view
from .writer import insert_product

logger = logging.getLogger(__name__)


def _fetch_product(cur, product_id: int) -> dict:
    cur.execute(f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = %s", (product_id,))
    row = cur.fetchone()
    if not row:
        raise NotFoundFailure(f"Product not found: {product_id}")
    return product_view(row, admin=True)


def _add_product(section_id: str, product: ProductInput, cur) -> dict:
    cur.execute("SELECT id FROM grid_data WHERE section_id = %s", (section_id,))
    grid = cur.fetchone()
    if not grid:
        raise NotFoundFailure(f"Grid not found: {section_id}")

    grid_id = grid[0]
    cur.execute("""
        SELECT COALESCE(MAX(sort_order), -1) + 1
        FROM products WHERE grid_id = %s
    """, (grid_id,))
    sort_order = cur.fetchone()[0]

    product_id = insert_product(cur, grid_id, product, sort_order)
    return _fetch_product(cur, product_id)


async def add_product(section_id: str, data: Any) -> dict:
    """
    Append a product to a grid section.

    Args:
        section_id: id of the grid section (not the grid row)
        data: product fields; link/badge/flags fall back to defaults

    Returns:
        The stored product including its id and sortOrder
    """
    product = validate_input(ProductInput, data)
    created = await db.run_in_transaction(partial(_add_product, section_id, product))
    logger.info("Added product %s to section %s", created["id"], section_id)
    return created


def _update_product(product_id: int, product: ProductInput, cur) -> dict:
    cur.execute("""
        UPDATE products
        SET name = %s, old_price = %s, new_price = %s, image = %s, link = %s,
            badge = %s, strike_old_price = %s, show_old_price = %s,
            updated_at = NOW()
        WHERE id = %s
    """, (
        product.name,
        product.oldPrice,
        product.newPrice,
        product.image,
        product.link,
        product.badge,
        product.strikeOldPrice,
        product.showOldPrice,
        product_id,
    ))
    if cur.rowcount == 0:
        raise NotFoundFailure(f"Product not found: {product_id}")
    return _fetch_product(cur, product_id)


async def update_product(product_id: int, data: Any) -> dict:
    """Replace a product's fields. Its position in the grid is unchanged."""
    product = validate_input(ProductInput, data)
    return await db.run_in_transaction(partial(_update_product, product_id, product))


def _delete_product(product_id: int, cur) -> None:
    cur.execute("DELETE FROM products WHERE id = %s", (product_id,))
    if cur.rowcount == 0:
        raise NotFoundFailure(f"Product not found: {product_id}")


async def delete_product(product_id: int) -> dict:
    """Delete one product. Remaining products keep their sort_order."""
    await db.run_in_transaction(partial(_delete_product, product_id))
    logger.info("Deleted product %s", product_id)
    return {
        "deleted": True,
        "product_id": product_id,
        "message": "Product deleted successfully",
    }
