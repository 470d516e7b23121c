"""
FastAPI application for the Showcase CMS.

Serves the public page content and the admin editing endpoints.

Usage:
    uvicorn src.api.main:app --reload --port 3000
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config.settings import get_settings
from ..db import initialize_database
from .errors import register_error_handlers
from .routes import (
    auth_router,
    hero_router,
    sections_router,
    products_router,
    page_router,
)

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Showcase CMS API",
    description="API for the showcase page: hero, spotlight banners and product grids",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

cors_origins = list(settings.CORS_ALLOW_ORIGINS) or ["*"]

# Browsers reject wildcard origins when credentials are enabled.
allow_credentials = "*" not in cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.on_event("startup")
def _bootstrap_database() -> None:
    """Create schema and seed rows once per process."""
    initialize_database()


@app.get("/api/health", tags=["Health"])
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


# Include routers with /api prefix
app.include_router(auth_router, prefix="/api")
app.include_router(hero_router, prefix="/api")
app.include_router(sections_router, prefix="/api")
app.include_router(products_router, prefix="/api")
app.include_router(page_router, prefix="/api")
