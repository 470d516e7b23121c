"""
Pydantic models for the Showcase CMS API.

Request/response models for API endpoints. Section payload and product
bodies reuse the content models so the HTTP layer and the core agree on
defaults.
"""

from typing import Optional

from pydantic import BaseModel

from ..content.models import (
    GridMeta,
    ProductInput,
    ReorderItem,
    SectionType,
    SpotlightData,
)


# ============================================================
# Auth Models
# ============================================================

class LoginRequest(BaseModel):
    """Request model for admin login."""
    username: str = ""
    password: str = ""


class PasswordChangeRequest(BaseModel):
    """Request model for changing the caller's password."""
    currentPassword: str = ""
    newPassword: str = ""


class UserResponse(BaseModel):
    """Authenticated user as carried in the token."""
    id: int
    username: str
    role: str


class LoginResponse(BaseModel):
    """Response model for a successful login."""
    message: str
    token: str
    user: UserResponse


class VerifyResponse(BaseModel):
    """Response for token verification."""
    valid: bool
    user: UserResponse


# ============================================================
# Hero Models
# ============================================================

class HeroUpdateRequest(BaseModel):
    """Request model for updating the hero block."""
    title: str
    subtitle: Optional[str] = ""


class HeroResponse(BaseModel):
    """Response model for the hero block."""
    title: str
    subtitle: str
    updatedAt: Optional[str] = None


# ============================================================
# Section Models
# ============================================================

class SectionCreateRequest(BaseModel):
    """Request model for creating a section."""
    type: SectionType


class SectionCreateResponse(BaseModel):
    """Response for section creation."""
    id: str
    type: SectionType
    sortOrder: int
    message: str


class ReorderRequest(BaseModel):
    """Request for bulk section reordering."""
    sections: list[ReorderItem]


class SectionDeleteResponse(BaseModel):
    """Response for section deletion."""
    deleted: bool
    section_id: str
    message: str


SpotlightUpdateRequest = SpotlightData
GridUpdateRequest = GridMeta


# ============================================================
# Product Models
# ============================================================

ProductRequest = ProductInput


class ProductResponse(BaseModel):
    """Stored product as returned by product editors."""
    id: int
    name: str
    oldPrice: float
    newPrice: float
    image: str
    link: str
    badge: str
    strikeOldPrice: bool
    showOldPrice: bool
    sortOrder: Optional[int] = None


class ProductDeleteResponse(BaseModel):
    """Response for product deletion."""
    deleted: bool
    product_id: int
    message: str


# ============================================================
# Save-all Models
# ============================================================

class SaveAllResponse(BaseModel):
    """Response for a full content tree replace."""
    success: bool
    message: str
    sections: int
    products: int
