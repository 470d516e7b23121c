"""
Spotlight media reconciliation.

Spotlight rows were first written with a single ``image`` column; later
rows carry ``media`` and ``media_type``. Readers prefer the richer columns
and fall back to ``image``. Writers store the canonical value in both
columns so older readers keep working.
"""

from __future__ import annotations

from typing import Any, Optional

from .models import SpotlightData

DEFAULT_MEDIA_TYPE = "image"


def media_columns(data: SpotlightData) -> tuple[str, str, str]:
    """Return ``(media_type, media, image)`` column values for a write."""
    media = data.media or data.image or ""
    return data.mediaType or DEFAULT_MEDIA_TYPE, media, media


def media_view(media: Optional[Any], image: Optional[Any], media_type: Optional[Any]) -> dict:
    """Canonical media fields for a stored spotlight row."""
    resolved = media if media is not None else (image or "")
    return {
        "mediaType": media_type or DEFAULT_MEDIA_TYPE,
        "media": resolved,
        "image": resolved,
    }
