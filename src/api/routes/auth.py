"""
Auth API routes.
"""

from fastapi import APIRouter

from ..models import LoginRequest, LoginResponse, PasswordChangeRequest, VerifyResponse
from ..deps import CurrentUser
from ...infra.auth import authenticate, change_password

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login_endpoint(request: LoginRequest) -> LoginResponse:
    """Exchange admin credentials for a bearer token."""
    return await authenticate(request.username, request.password)


@router.get("/verify")
def verify_endpoint(current_user: CurrentUser) -> VerifyResponse:
    """Confirm the bearer token is valid and return its user."""
    return {"valid": True, "user": current_user}


@router.put("/password")
async def change_password_endpoint(
    request: PasswordChangeRequest,
    current_user: CurrentUser,
) -> dict:
    """Change the caller's password after checking the current one."""
    return await change_password(
        user_id=current_user["id"],
        current_password=request.currentPassword,
        new_password=request.newPassword,
    )
