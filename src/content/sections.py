"""
Section editors.

Narrow, incremental changes to the page: creating a section with seeded
variant content, reordering, deleting, and editing one section's payload.
Each call runs as one transaction.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Iterable

from .. import db
from ..errors import NotFoundFailure, ValidationFailure
from .media import media_columns
from .models import (
    SECTION_TYPES,
    GridMeta,
    ProductInput,
    ReorderItem,
    SpotlightData,
    validate_input,
)
from .reader import load_grid_payload, load_spotlight_payload
from .writer import (
    insert_grid,
    insert_product,
    insert_section,
    insert_spotlight,
    new_section_id,
)

logger = logging.getLogger(__name__)

DEFAULT_SPOTLIGHT = SpotlightData(
    title="New Spotlight",
    subtext="Description here",
    mediaType="image",
    media="https://images.unsplash.com/photo-1595225476474-87563907a212?w=1600&q=80",
)
DEFAULT_GRID_TITLE = "New Collection"
DEFAULT_PRODUCT = ProductInput(
    name="New Product",
    oldPrice=100,
    newPrice=99,
    image="https://via.placeholder.com/400",
    link="#",
)


def _seed_spotlight(cur, section_id: str) -> None:
    insert_spotlight(cur, section_id, DEFAULT_SPOTLIGHT)


def _seed_grid(cur, section_id: str) -> None:
    grid_id = insert_grid(cur, section_id, DEFAULT_GRID_TITLE, 0)
    insert_product(cur, grid_id, DEFAULT_PRODUCT, 0)


SECTION_SEEDERS: dict[str, Callable[[Any, str], None]] = {
    "spotlight": _seed_spotlight,
    "grid": _seed_grid,
}

if set(SECTION_SEEDERS) != set(SECTION_TYPES):
    raise RuntimeError("Every section type needs default content")


def _create_section(section_type: str, cur) -> dict:
    # Appends after the current maximum; existing rows keep their values.
    cur.execute("SELECT COALESCE(MAX(sort_order), -1) + 1 FROM sections")
    sort_order = cur.fetchone()[0]

    section_id = new_section_id()
    insert_section(cur, section_id, section_type, sort_order)
    SECTION_SEEDERS[section_type](cur, section_id)

    return {"id": section_id, "type": section_type, "sortOrder": sort_order}


async def create_section(section_type: str) -> dict:
    """
    Create a new section of the given type at the end of the page.

    Spotlight sections start with placeholder text and image; grid sections
    start with the "New Collection" title and one placeholder product.

    Returns:
        ``{"id", "type", "sortOrder", "message"}``
    """
    if section_type not in SECTION_TYPES:
        raise ValidationFailure(
            f"Unknown section type: {section_type!r}",
            details={"allowed": list(SECTION_TYPES)},
        )

    created = await db.run_in_transaction(partial(_create_section, section_type))
    logger.info("Created %s section %s", section_type, created["id"])
    return {**created, "message": "Section created successfully"}


def _reorder_sections(items: list[ReorderItem], cur) -> int:
    for item in items:
        cur.execute("""
            UPDATE sections
            SET sort_order = %s, updated_at = NOW()
            WHERE id = %s
        """, (item.sortOrder, item.id))
        if cur.rowcount == 0:
            raise NotFoundFailure(f"Section not found: {item.id}")
    return len(items)


async def reorder_sections(items: Iterable[Any]) -> dict:
    """
    Apply ``(id, sortOrder)`` pairs to existing sections.

    Updates are applied in the given order; the first unknown id aborts
    the call and nothing is applied.
    """
    validated = [validate_input(ReorderItem, item) for item in items]
    updated = await db.run_in_transaction(partial(_reorder_sections, validated))
    return {"message": "Sections reordered successfully", "updated": updated}


def _delete_section(section_id: str, cur) -> None:
    # Spotlight/grid payloads and products are removed by ON DELETE CASCADE.
    cur.execute("DELETE FROM sections WHERE id = %s", (section_id,))
    if cur.rowcount == 0:
        raise NotFoundFailure(f"Section not found: {section_id}")


async def delete_section(section_id: str) -> dict:
    """Delete a section together with its payload and products."""
    await db.run_in_transaction(partial(_delete_section, section_id))
    logger.info("Deleted section %s", section_id)
    return {
        "deleted": True,
        "section_id": section_id,
        "message": "Section deleted successfully",
    }


def _update_spotlight(section_id: str, data: SpotlightData, cur) -> dict:
    media_type, media, image = media_columns(data)
    cur.execute("""
        UPDATE spotlight_data
        SET title = %s, subtext = %s, media_type = %s, media = %s, image = %s,
            updated_at = NOW()
        WHERE section_id = %s
    """, (data.title, data.subtext, media_type, media, image, section_id))
    if cur.rowcount == 0:
        raise NotFoundFailure(f"Spotlight not found: {section_id}")
    return load_spotlight_payload(cur, section_id)


async def update_spotlight(section_id: str, data: Any) -> dict:
    """Replace a spotlight section's title, text and media."""
    spotlight = validate_input(SpotlightData, data)
    return await db.run_in_transaction(partial(_update_spotlight, section_id, spotlight))


def _update_grid(section_id: str, meta: GridMeta, cur) -> dict:
    cur.execute("""
        UPDATE grid_data
        SET title = %s, grid_columns = %s, updated_at = NOW()
        WHERE section_id = %s
    """, (meta.title, meta.gridColumns, section_id))
    if cur.rowcount == 0:
        raise NotFoundFailure(f"Grid not found: {section_id}")
    return load_grid_payload(cur, section_id, admin=True)


async def update_grid(section_id: str, data: Any) -> dict:
    """Update a grid section's title and column count. Products are untouched."""
    meta = validate_input(GridMeta, data)
    return await db.run_in_transaction(partial(_update_grid, section_id, meta))
