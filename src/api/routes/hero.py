"""
Hero API routes.
"""

from fastapi import APIRouter

from ..models import HeroResponse, HeroUpdateRequest
from ..deps import CurrentUser
from ...content import read_hero, update_hero

router = APIRouter(tags=["Hero"])


@router.get("/hero")
async def get_hero_endpoint() -> HeroResponse:
    """Get the hero block. Empty values when it has never been set."""
    return await read_hero()


@router.put("/hero")
async def update_hero_endpoint(
    request: HeroUpdateRequest,
    current_user: CurrentUser,
) -> HeroResponse:
    """Update the hero title and subtitle."""
    return await update_hero(title=request.title, subtitle=request.subtitle)
