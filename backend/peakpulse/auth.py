"""
Authentication
==============
Resolves the Supabase JWT in the Authorization header to a row in our
``users`` table. Customer endpoints take the acting user from here, never
from a ``user_id`` in the request body, so one shopper cannot like,
bookmark or order on behalf of another.

Role defaults: a profile row without roles is treated as a plain
customer. Admin routes depend on ``require_admin``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from peakpulse.db.supabase import get_supabase_admin_client

logger = logging.getLogger(__name__)

DEFAULT_ROLES = ["customer"]
VALID_ROLES = frozenset({"customer", "vip", "affiliate", "admin"})


def roles_of(user: dict) -> list[str]:
    """Return the user's roles, defaulting to ``["customer"]``."""
    roles = user.get("roles")
    if not isinstance(roles, list) or not roles:
        return list(DEFAULT_ROLES)
    return roles


async def get_current_user(
    authorization: Optional[str] = Header(None, description="Bearer token from Supabase Auth"),
) -> dict:
    """Verify the JWT and return the user record from Supabase.

    Raises HTTPException 401 if the token is invalid or missing, 404 if
    the auth user has no profile row.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Missing or invalid authorization header", "code": "auth_required"},
        )

    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Empty bearer token", "code": "auth_required"},
        )

    db = get_supabase_admin_client()

    try:
        auth_response = db.auth.get_user(token)
    except Exception as exc:
        logger.warning("Auth token verification failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Invalid or expired token", "code": "auth_invalid"},
        ) from exc

    if not auth_response or not auth_response.user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "User not found for token", "code": "auth_invalid"},
        )

    user_id = auth_response.user.id

    result = (
        db.table("users")
        .select("*")
        .eq("id", user_id)
        .maybe_single()
        .execute()
    )

    if not result or not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User profile not found", "code": "user_not_found"},
        )

    user = dict(result.data)
    user["roles"] = roles_of(user)
    return user


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """Allow the request through only for users holding the admin role."""
    if "admin" not in user["roles"]:
        logger.warning("Non-admin user %s attempted an admin operation", user.get("id"))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "Admin access required", "code": "admin_required"},
        )
    return user
