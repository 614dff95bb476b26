"""
Account Router
==============
Authenticated:
    GET    /api/v1/account/profile
    PUT    /api/v1/account/profile
    GET    /api/v1/account/wishlist
    POST   /api/v1/account/wishlist/{product_id}      Add (idempotent)
    DELETE /api/v1/account/wishlist/{product_id}      Remove (idempotent)

Admin:
    GET /api/v1/admin/users
    PUT /api/v1/admin/users/{user_id}/roles
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from peakpulse.auth import DEFAULT_ROLES, get_current_user, require_admin, roles_of
from peakpulse.db.supabase import get_supabase_admin_client, raise_for_db_error
from peakpulse.models.account import (
    ProfileResponse,
    ProfileUpdate,
    RolesUpdate,
    WishlistResponse,
)
from peakpulse.services.engagement import as_id_list

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/account", tags=["account"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "users"],
    dependencies=[Depends(require_admin)],
)


def _profile_from_row(row: dict) -> ProfileResponse:
    cleaned = {**row}
    cleaned["roles"] = roles_of(cleaned)
    cleaned["wishlist"] = as_id_list(cleaned.get("wishlist"))
    cleaned["bookmarked_post_ids"] = as_id_list(cleaned.get("bookmarked_post_ids"))
    return ProfileResponse(**cleaned)


def _save_wishlist(user_id: str, wishlist: list[str]) -> None:
    db = get_supabase_admin_client()
    try:
        db.table("users").update({"wishlist": wishlist}).eq("id", user_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update wishlist")


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: dict = Depends(get_current_user)) -> ProfileResponse:
    return _profile_from_row(user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    user: dict = Depends(get_current_user),
) -> ProfileResponse:
    changes = {
        field: (value.strip() or None) if isinstance(value, str) else value
        for field, value in body.model_dump(exclude_unset=True).items()
    }
    if not changes:
        return _profile_from_row(user)
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    db = get_supabase_admin_client()
    try:
        result = db.table("users").update(changes).eq("id", user["id"]).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update profile")

    row = result.data[0] if result.data else {**user, **changes}
    return _profile_from_row(row)


# ---------------------------------------------------------------------------
# Wishlist
# ---------------------------------------------------------------------------

@router.get("/wishlist", response_model=WishlistResponse)
async def get_wishlist(user: dict = Depends(get_current_user)) -> WishlistResponse:
    return WishlistResponse(wishlist=as_id_list(user.get("wishlist")))


@router.post("/wishlist/{product_id}", response_model=WishlistResponse)
async def add_to_wishlist(
    product_id: str,
    user: dict = Depends(get_current_user),
) -> WishlistResponse:
    wishlist = as_id_list(user.get("wishlist"))
    if product_id not in wishlist:
        wishlist.append(product_id)
        _save_wishlist(user["id"], wishlist)
    return WishlistResponse(wishlist=wishlist)


@router.delete("/wishlist/{product_id}", response_model=WishlistResponse)
async def remove_from_wishlist(
    product_id: str,
    user: dict = Depends(get_current_user),
) -> WishlistResponse:
    wishlist = as_id_list(user.get("wishlist"))
    if product_id in wishlist:
        wishlist = [item for item in wishlist if item != product_id]
        _save_wishlist(user["id"], wishlist)
    return WishlistResponse(wishlist=wishlist)


# ---------------------------------------------------------------------------
# Admin: users
# ---------------------------------------------------------------------------

@admin_router.get("/users", response_model=list[ProfileResponse])
async def admin_list_users() -> list[ProfileResponse]:
    db = get_supabase_admin_client()

    try:
        result = db.table("users").select("*").order("created_at", desc=True).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch users")

    return [_profile_from_row(row) for row in result.data or []]


@admin_router.put("/users/{user_id}/roles", response_model=ProfileResponse)
async def admin_update_roles(
    user_id: str,
    body: RolesUpdate,
    admin: dict = Depends(require_admin),
) -> ProfileResponse:
    # Keep first-seen order, drop duplicates
    roles = list(dict.fromkeys(body.roles)) or list(DEFAULT_ROLES)

    db = get_supabase_admin_client()
    try:
        result = (
            db.table("users")
            .update({"roles": roles, "updated_at": datetime.now(timezone.utc).isoformat()})
            .eq("id", user_id)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="update roles")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "User not found", "code": "user_not_found"},
        )

    logger.info("Admin %s set roles of %s to %s", admin.get("id"), user_id, roles)
    return _profile_from_row(result.data[0])
