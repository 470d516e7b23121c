"""
API routes for the Showcase CMS.
"""

from .auth import router as auth_router
from .hero import router as hero_router
from .sections import router as sections_router
from .products import router as products_router
from .page import router as page_router

__all__ = [
    "auth_router",
    "hero_router",
    "sections_router",
    "products_router",
    "page_router",
]
