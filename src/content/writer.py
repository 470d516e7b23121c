"""
Full content tree replace ("save-all").

The admin console submits the whole page. Inside a single transaction the
hero is updated in place, every section is deleted (payload and product
rows go with them through ON DELETE CASCADE) and the submitted sections are
re-inserted in array order. Nothing is committed unless every statement
succeeds.
"""

from __future__ import annotations

import logging
import uuid
from functools import partial
from typing import Any, Callable

from .. import db
from .hero import write_hero
from .media import media_columns
from .models import (
    SECTION_TYPES,
    ContentTreeInput,
    GridData,
    ProductInput,
    SpotlightData,
    parse_content_tree,
)

logger = logging.getLogger(__name__)


def new_section_id() -> str:
    return f"sec_{uuid.uuid4().hex}"


def insert_section(cur, section_id: str, section_type: str, sort_order: int) -> None:
    cur.execute("""
        INSERT INTO sections (id, type, sort_order)
        VALUES (%s, %s, %s)
    """, (section_id, section_type, sort_order))


def insert_spotlight(cur, section_id: str, data: SpotlightData) -> None:
    media_type, media, image = media_columns(data)
    cur.execute("""
        INSERT INTO spotlight_data (section_id, title, subtext, media_type, media, image)
        VALUES (%s, %s, %s, %s, %s, %s)
    """, (section_id, data.title, data.subtext, media_type, media, image))


def insert_grid(cur, section_id: str, title: str, grid_columns: int) -> int:
    cur.execute("""
        INSERT INTO grid_data (section_id, title, grid_columns)
        VALUES (%s, %s, %s)
        RETURNING id
    """, (section_id, title, grid_columns))
    return cur.fetchone()[0]


def insert_product(cur, grid_id: int, product: ProductInput, sort_order: int) -> int:
    cur.execute("""
        INSERT INTO products (
            grid_id, name, old_price, new_price, image, link, badge,
            strike_old_price, show_old_price, sort_order
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING id
    """, (
        grid_id,
        product.name,
        product.oldPrice,
        product.newPrice,
        product.image,
        product.link,
        product.badge,
        product.strikeOldPrice,
        product.showOldPrice,
        sort_order,
    ))
    return cur.fetchone()[0]


def _write_spotlight(cur, section_id: str, data: SpotlightData) -> int:
    insert_spotlight(cur, section_id, data)
    return 0


def _write_grid(cur, section_id: str, data: GridData) -> int:
    grid_id = insert_grid(cur, section_id, data.title, data.gridColumns)
    for index, product in enumerate(data.products):
        insert_product(cur, grid_id, product, index)
    return len(data.products)


# Each writer inserts a section's payload and returns the product count.
SECTION_WRITERS: dict[str, Callable[[Any, str, Any], int]] = {
    "spotlight": _write_spotlight,
    "grid": _write_grid,
}

if set(SECTION_WRITERS) != set(SECTION_TYPES):
    raise RuntimeError("Every section type needs a payload writer")


def _replace_tree(tree: ContentTreeInput, cur) -> dict:
    write_hero(cur, tree.hero.title, tree.hero.subtitle)

    # Cascades to spotlight_data, grid_data and products.
    cur.execute("DELETE FROM sections")

    product_count = 0
    for sort_order, section in enumerate(tree.sections):
        section_id = section.id or new_section_id()
        insert_section(cur, section_id, section.type, sort_order)
        product_count += SECTION_WRITERS[section.type](cur, section_id, section.data)

    return {"sections": len(tree.sections), "products": product_count}


async def replace_content_tree(payload: Any) -> dict:
    """
    Atomically replace the persisted hero and sections.

    Args:
        payload: ``{"hero": {...}, "sections": [...]}`` as sent by the admin
            console. Section order in the array becomes the stored order;
            any caller-supplied sortOrder is ignored.

    Returns:
        Confirmation with the number of sections and products written

    Raises:
        ValidationFailure: malformed payload, before any write
        PersistenceFailure: storage error; the transaction was rolled back
    """
    tree = parse_content_tree(payload)
    counts = await db.run_in_transaction(partial(_replace_tree, tree))

    logger.info(
        "Content tree replaced (sections=%d, products=%d)",
        counts["sections"],
        counts["products"],
    )
    return {
        "success": True,
        "message": "All data saved successfully",
        **counts,
    }
