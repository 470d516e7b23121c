"""
Content core for the showcase page.

Reads the page (hero + ordered sections) as one tree, replaces it
atomically, and applies narrow single-entity edits.
"""

from .hero import update_hero
from .reader import (
    read_hero,
    read_sections,
    read_content_tree,
)
from .writer import replace_content_tree
from .sections import (
    create_section,
    reorder_sections,
    delete_section,
    update_spotlight,
    update_grid,
)
from .products import (
    add_product,
    update_product,
    delete_product,
)
from .models import (
    SECTION_TYPES,
    ContentTreeInput,
    parse_content_tree,
)

__all__ = [
    # Reader
    "read_hero",
    "read_sections",
    "read_content_tree",
    # Writer
    "replace_content_tree",
    # Editors
    "update_hero",
    "create_section",
    "reorder_sections",
    "delete_section",
    "update_spotlight",
    "update_grid",
    "add_product",
    "update_product",
    "delete_product",
    # Models
    "SECTION_TYPES",
    "ContentTreeInput",
    "parse_content_tree",
]
