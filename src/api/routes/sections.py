"""
Section API routes.
"""

from fastapi import APIRouter

from ..models import (
    GridUpdateRequest,
    ReorderRequest,
    SectionCreateRequest,
    SectionCreateResponse,
    SectionDeleteResponse,
    SpotlightUpdateRequest,
)
from ..deps import CurrentUser
from ...content import (
    create_section,
    delete_section,
    read_sections,
    reorder_sections,
    update_grid,
    update_spotlight,
)

router = APIRouter(tags=["Sections"])


@router.get("/sections")
async def get_sections_endpoint() -> list[dict]:
    """
    Get all sections with their payloads, in display order.

    Admin-shaped: each section carries sortOrder and timestamps, and each
    product its id and sortOrder.
    """
    return await read_sections(admin=True)


@router.post("/sections", status_code=201)
async def create_section_endpoint(
    request: SectionCreateRequest,
    current_user: CurrentUser,
) -> SectionCreateResponse:
    """
    Create a new section at the end of the page.

    Spotlight sections start with placeholder content; grid sections start
    with one placeholder product.
    """
    return await create_section(request.type)


@router.put("/sections/reorder")
async def reorder_sections_endpoint(
    request: ReorderRequest,
    current_user: CurrentUser,
) -> dict:
    """Apply new sortOrder values to existing sections."""
    return await reorder_sections(request.sections)


@router.delete("/sections/{section_id}")
async def delete_section_endpoint(
    section_id: str,
    current_user: CurrentUser,
) -> SectionDeleteResponse:
    """Delete a section together with its payload and products."""
    return await delete_section(section_id)


@router.put("/spotlight/{section_id}")
async def update_spotlight_endpoint(
    section_id: str,
    request: SpotlightUpdateRequest,
    current_user: CurrentUser,
) -> dict:
    """Update a spotlight section's text and media."""
    return await update_spotlight(section_id, request)


@router.put("/grid/{section_id}")
async def update_grid_endpoint(
    section_id: str,
    request: GridUpdateRequest,
    current_user: CurrentUser,
) -> dict:
    """Update a grid section's title and column count."""
    return await update_grid(section_id, request)
