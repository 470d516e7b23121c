"""
Dependencies for the Showcase CMS API.

Provides dependency injection for FastAPI routes.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header

from ..errors import AuthFailure
from ..infra.auth import verify_token


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


def get_current_user(authorization: Optional[str] = Header(default=None)) -> dict:
    """
    Resolve the caller from an ``Authorization: Bearer <token>`` header.

    Runs before the route body, so rejected requests never reach storage.
    """
    token = _bearer_token(authorization)
    if token is None:
        raise AuthFailure("Access token required", status_code=401)
    return verify_token(token)


# Type alias for dependency injection
CurrentUser = Annotated[dict, Depends(get_current_user)]
