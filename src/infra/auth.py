"""Admin authentication: password login and bearer JWT verification."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from .. import db
from ..config.settings import Settings, get_settings
from ..errors import AuthFailure, NotFoundFailure, ValidationFailure

logger = logging.getLogger(__name__)


def _public_user(row: dict) -> dict:
    return {"id": row["id"], "username": row["username"], "role": row["role"]}


def issue_token(user: dict, settings: Settings | None = None) -> str:
    """Sign a JWT carrying ``{id, username, role}``."""
    settings = settings or get_settings()
    expires_at = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS)
    claims = {**_public_user(user), "exp": expires_at}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, settings: Settings | None = None) -> dict:
    """
    Decode a bearer token into ``{id, username, role}``.

    Raises:
        AuthFailure: 403 when the token is malformed, forged or expired
    """
    settings = settings or get_settings()
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise AuthFailure("Invalid or expired token", status_code=403) from exc

    if any(key not in claims for key in ("id", "username", "role")):
        raise AuthFailure("Invalid or expired token", status_code=403)
    return _public_user(claims)


async def authenticate(username: str, password: str) -> dict:
    """Check credentials and issue a token."""
    if not username or not password:
        raise ValidationFailure("Username and password required")

    rows = await db.run_query(
        "SELECT id, username, password_hash, role FROM users WHERE username = %s",
        (username,),
    )
    if not rows or not check_password_hash(rows[0]["password_hash"], password):
        logger.warning("Failed login for username=%s", username)
        raise AuthFailure("Invalid credentials", status_code=401)

    user = _public_user(rows[0])
    logger.info("User %s logged in", user["username"])
    return {
        "message": "Login successful",
        "token": issue_token(user),
        "user": user,
    }


def _change_password(user_id: Any, current_password: str, new_password: str, cur) -> None:
    cur.execute("SELECT password_hash FROM users WHERE id = %s", (user_id,))
    row = cur.fetchone()
    if not row:
        raise NotFoundFailure("User not found")
    if not check_password_hash(row[0], current_password):
        raise AuthFailure("Current password is incorrect", status_code=401)

    cur.execute("""
        UPDATE users
        SET password_hash = %s, updated_at = NOW()
        WHERE id = %s
    """, (generate_password_hash(new_password), user_id))


async def change_password(user_id: Any, current_password: str, new_password: str) -> dict:
    """Replace a user's password after verifying the current one."""
    if not new_password:
        raise ValidationFailure("New password must not be empty")

    await db.run_in_transaction(
        partial(_change_password, user_id, current_password or "", new_password)
    )
    logger.info("Password updated for user id=%s", user_id)
    return {"message": "Password updated successfully"}
