"""
Content tree reader.

Loads the hero singleton and the ordered sections, each with its variant
payload, into the JSON shape served to the site and the admin console.
Absent rows degrade to empty defaults; storage errors propagate as
PersistenceFailure.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, Callable

from .. import db
from .media import DEFAULT_MEDIA_TYPE, media_view
from .models import SECTION_TYPES

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = (
    "id, name, old_price, new_price, image, link, badge, "
    "strike_old_price, show_old_price, sort_order"
)


def _timestamp(value: Any) -> str | None:
    return str(value) if value else None


def _price(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _flag(value: Any) -> bool:
    """Flags default to true unless explicitly stored as false."""
    return value is None or bool(value)


def empty_hero() -> dict:
    return {"title": "", "subtitle": "", "updatedAt": None}


def hero_view(row: dict | None) -> dict:
    if not row:
        return empty_hero()
    return {
        "title": row.get("title") or "",
        "subtitle": row.get("subtitle") or "",
        "updatedAt": _timestamp(row.get("updated_at")),
    }


def product_view(row, admin: bool = False) -> dict:
    """Map a ``PRODUCT_COLUMNS`` row to its API shape."""
    product = {
        "id": row[0],
        "name": row[1],
        "oldPrice": _price(row[2]),
        "newPrice": _price(row[3]),
        "image": row[4] or "",
        "link": row[5] or "#",
        "badge": row[6] or "",
        "strikeOldPrice": _flag(row[7]),
        "showOldPrice": _flag(row[8]),
    }
    if admin:
        product["sortOrder"] = row[9]
    return product


def empty_spotlight() -> dict:
    return {
        "title": "",
        "subtext": "",
        "mediaType": DEFAULT_MEDIA_TYPE,
        "media": "",
        "image": "",
    }


def empty_grid() -> dict:
    return {"title": "", "gridColumns": 0, "products": []}


def load_spotlight_payload(cur, section_id: str, admin: bool = False) -> dict:
    cur.execute("""
        SELECT title, subtext, image, media, media_type
        FROM spotlight_data
        WHERE section_id = %s
    """, (section_id,))
    row = cur.fetchone()
    if not row:
        return empty_spotlight()

    payload = {"title": row[0] or "", "subtext": row[1] or ""}
    payload.update(media_view(row[3], row[2], row[4]))
    return payload


def load_grid_payload(cur, section_id: str, admin: bool = False) -> dict:
    cur.execute("""
        SELECT id, title, grid_columns
        FROM grid_data
        WHERE section_id = %s
    """, (section_id,))
    grid = cur.fetchone()
    if not grid:
        return empty_grid()

    # id breaks sort_order ties in insertion order
    cur.execute(f"""
        SELECT {PRODUCT_COLUMNS}
        FROM products
        WHERE grid_id = %s
        ORDER BY sort_order, id
    """, (grid[0],))

    return {
        "title": grid[1] or "",
        "gridColumns": grid[2] or 0,
        "products": [product_view(row, admin=admin) for row in cur.fetchall()],
    }


PAYLOAD_LOADERS: dict[str, Callable[..., dict]] = {
    "spotlight": load_spotlight_payload,
    "grid": load_grid_payload,
}

if set(PAYLOAD_LOADERS) != set(SECTION_TYPES):
    raise RuntimeError("Every section type needs a payload loader")


def _load_payload(section_id: str, section_type: str, admin: bool, cur) -> dict:
    loader = PAYLOAD_LOADERS.get(section_type)
    if loader is None:
        logger.warning("Section %s has unknown type %r; serving empty data", section_id, section_type)
        return {}
    return loader(cur, section_id, admin=admin)


def section_view(row: dict, data: dict, admin: bool = False) -> dict:
    section = {
        "id": str(row["id"]),
        "type": row["type"],
        "data": data,
    }
    if admin:
        section["sortOrder"] = row["sort_order"]
        section["createdAt"] = _timestamp(row.get("created_at"))
        section["updatedAt"] = _timestamp(row.get("updated_at"))
    return section


async def read_hero() -> dict:
    """Get the hero singleton, or empty values when it has not been seeded."""
    rows = await db.run_query(
        "SELECT title, subtitle, updated_at FROM hero ORDER BY id LIMIT 1"
    )
    return hero_view(rows[0] if rows else None)


async def read_sections(admin: bool = False) -> list[dict]:
    """
    Get all sections ordered by sort_order with their variant payloads.

    Payloads are fetched concurrently, one connection per section, and
    reassembled by the section's position in the ordered list. The list
    and the payloads are separate reads, not one snapshot: a save-all that
    commits in between can pair the old list with new or empty payloads.

    Args:
        admin: Include sortOrder and timestamps for the admin console
    """
    rows = await db.run_query("""
        SELECT id, type, sort_order, created_at, updated_at
        FROM sections
        ORDER BY sort_order
    """)

    payloads = await asyncio.gather(*(
        db.run_in_transaction(partial(_load_payload, str(row["id"]), row["type"], admin))
        for row in rows
    ))

    return [
        section_view(row, data, admin=admin)
        for row, data in zip(rows, payloads)
    ]


async def read_content_tree() -> dict:
    """Get ``{hero, sections}`` in the public page shape."""
    hero, sections = await asyncio.gather(read_hero(), read_sections(admin=False))
    return {"hero": hero, "sections": sections}
