"""Hero singleton editor."""

from __future__ import annotations

from functools import partial

from .. import db
from .models import HeroInput, validate_input
from .reader import hero_view


def write_hero(cur, title: str, subtitle: str) -> None:
    """Update the hero row, recreating it if the singleton is missing."""
    cur.execute("""
        UPDATE hero
        SET title = %s, subtitle = %s, updated_at = NOW()
        WHERE id = %s
    """, (title, subtitle, db.HERO_ID))
    if cur.rowcount == 0:
        cur.execute(
            "INSERT INTO hero (id, title, subtitle) VALUES (%s, %s, %s)",
            (db.HERO_ID, title, subtitle),
        )


def _update_hero(hero: HeroInput, cur) -> dict:
    write_hero(cur, hero.title, hero.subtitle)
    cur.execute("SELECT title, subtitle, updated_at FROM hero WHERE id = %s", (db.HERO_ID,))
    row = cur.fetchone()
    return hero_view({"title": row[0], "subtitle": row[1], "updated_at": row[2]})


async def update_hero(title: str, subtitle: str | None = None) -> dict:
    """Update hero title/subtitle and return the stored hero."""
    hero = validate_input(HeroInput, {"title": title, "subtitle": subtitle})
    return await db.run_in_transaction(partial(_update_hero, hero))
