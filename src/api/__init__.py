"""
Showcase CMS FastAPI API.

Provides REST endpoints for the page hero, sections, products and the
full-page save.
"""

from .main import app

__all__ = ["app"]
