"""
Whole-page API routes: public page data and the admin save-all.
"""

from typing import Any

from fastapi import APIRouter, Body

from ..models import SaveAllResponse
from ..deps import CurrentUser
from ...content import read_content_tree, replace_content_tree

router = APIRouter(tags=["Page"])


@router.get("/page-data")
async def get_page_data_endpoint() -> dict:
    """Get the hero and all sections in the public page shape."""
    return await read_content_tree()


@router.post("/save-all")
async def save_all_endpoint(
    current_user: CurrentUser,
    payload: Any = Body(...),
) -> SaveAllResponse:
    """
    Replace the whole page with the submitted snapshot.

    Section and product order in the body becomes the stored order. The
    replace is all-or-nothing: on any failure nothing is saved.
    """
    return await replace_content_tree(payload)
