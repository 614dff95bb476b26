"""
Promotional Posts Router
========================
Public:
    GET /api/v1/promotional-posts                Live promotions for the storefront

Admin:
    GET    /api/v1/admin/promotional-posts
    POST   /api/v1/admin/promotional-posts
    GET    /api/v1/admin/promotional-posts/{post_id}
    PUT    /api/v1/admin/promotional-posts/{post_id}
    DELETE /api/v1/admin/promotional-posts/{post_id}

A post is live when ``is_active`` is set and now falls inside its
optional ``valid_from`` / ``valid_until`` window.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from peakpulse.auth import require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.promotion import (
    PromotionalPostCreate,
    PromotionalPostResponse,
    PromotionalPostUpdate,
)
from peakpulse.services.homepage import promotion_is_live
from peakpulse.services.text import blank_to_none, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["promotions"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "promotions"],
    dependencies=[Depends(require_admin)],
)

TABLE = "promotional_posts"


def _post_from_row(row: dict) -> PromotionalPostResponse:
    cleaned = {**row}
    if cleaned.get("display_order") is None:
        cleaned["display_order"] = 0
    if cleaned.get("is_active") is None:
        cleaned["is_active"] = True
    return PromotionalPostResponse(**cleaned)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "Promotional post not found", "code": "promotion_not_found"},
    )


def _check_discount(price, discount) -> None:
    if price is not None and discount is not None and discount > price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Discount price cannot exceed price.", "code": "invalid_discount"},
        )


def fetch_live_promotions(db: Client) -> list[PromotionalPostResponse]:
    """Active posts in display order whose validity window contains now."""
    result = (
        db.table(TABLE)
        .select("*")
        .eq("is_active", True)
        .order("display_order")
        .order("created_at", desc=True)
        .execute()
    )
    posts = [_post_from_row(row) for row in result.data or []]
    now = datetime.now(timezone.utc)
    return [post for post in posts if promotion_is_live(post, now)]


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

@router.get("/promotional-posts", response_model=list[PromotionalPostResponse])
async def list_promotional_posts() -> list[PromotionalPostResponse]:
    db = get_supabase_client()
    try:
        return fetch_live_promotions(db)
    except Exception as exc:
        raise_for_db_error(exc, action="fetch promotional posts")


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

@admin_router.get("/promotional-posts", response_model=list[PromotionalPostResponse])
async def admin_list_promotional_posts() -> list[PromotionalPostResponse]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(TABLE)
            .select("*")
            .order("display_order")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch promotional posts")

    return [_post_from_row(row) for row in result.data or []]


@admin_router.post(
    "/promotional-posts",
    response_model=PromotionalPostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_promotional_post(body: PromotionalPostCreate) -> PromotionalPostResponse:
    title = body.title.strip()
    image_url = body.image_url.strip()
    if not title or not image_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Title and image URL are required.", "code": "missing_fields"},
        )
    _check_discount(body.price, body.discount_price)

    row = body.model_dump(mode="json")
    row["title"] = title
    row["image_url"] = image_url
    row["slug"] = blank_to_none(body.slug) or slugify(title)
    for field in ("description", "image_alt_text", "data_ai_hint", "cta_text", "cta_link", "sku"):
        row[field] = blank_to_none(row.get(field))

    db = get_supabase_admin_client()
    try:
        result = db.table(TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create promotional post",
            conflict_message=f"A promotional post with slug '{row['slug']}' already exists.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save promotional post", "code": "db_error"},
        )

    logger.info("Created promotional post %s", row["slug"])
    return _post_from_row(result.data[0])


def _fetch_post(db: Client, post_id: str) -> PromotionalPostResponse:
    try:
        result = db.table(TABLE).select("*").eq("id", post_id).maybe_single().execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch promotional post")

    if not result or not result.data:
        raise _not_found()
    return _post_from_row(result.data)


@admin_router.get("/promotional-posts/{post_id}", response_model=PromotionalPostResponse)
async def admin_get_promotional_post(post_id: str) -> PromotionalPostResponse:
    return _fetch_post(get_supabase_admin_client(), post_id)


@admin_router.put("/promotional-posts/{post_id}", response_model=PromotionalPostResponse)
async def admin_update_promotional_post(
    post_id: str, body: PromotionalPostUpdate
) -> PromotionalPostResponse:
    changes = body.model_dump(mode="json", exclude_unset=True)

    for field in ("title", "image_url"):
        if field in changes and not blank_to_none(changes[field]):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": f"{field} cannot be empty.", "code": "missing_fields"},
            )
        if field in changes:
            changes[field] = changes[field].strip()

    if "slug" in changes:
        changes["slug"] = blank_to_none(changes["slug"]) or (
            slugify(changes["title"]) if "title" in changes else None
        )
        if changes["slug"] is None:
            changes.pop("slug")
    elif "title" in changes:
        changes["slug"] = slugify(changes["title"])

    db = get_supabase_admin_client()

    if not changes:
        return _fetch_post(db, post_id)

    if "price" in changes or "discount_price" in changes:
        # A one-sided change is checked against the stored value.
        current = _fetch_post(db, post_id)
        _check_discount(
            changes.get("price", current.price),
            changes.get("discount_price", current.discount_price),
        )

    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = db.table(TABLE).update(changes).eq("id", post_id).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="update promotional post",
            conflict_message="Another promotional post already uses that slug.",
        )

    if not result.data:
        raise _not_found()

    return _post_from_row(result.data[0])


@admin_router.delete("/promotional-posts/{post_id}")
async def admin_delete_promotional_post(post_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(TABLE).delete().eq("id", post_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete promotional post")

    logger.info("Deleted promotional post %s", post_id)
    return {"message": "Promotional post deleted successfully"}
