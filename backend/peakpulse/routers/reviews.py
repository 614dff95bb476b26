"""
Reviews Router
==============
Public:
    GET  /api/v1/reviews?product_id=       Approved reviews, newest first
    POST /api/v1/reviews                   Submit a review (auth, held for moderation)

Admin:
    GET    /api/v1/admin/reviews
    PUT    /api/v1/admin/reviews/{review_id}     Set status
    DELETE /api/v1/admin/reviews/{review_id}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from peakpulse.auth import get_current_user, require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.review import ReviewCreate, ReviewResponse, ReviewStatusUpdate
from peakpulse.services.text import display_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["reviews"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "reviews"],
    dependencies=[Depends(require_admin)],
)

TABLE = "reviews"


def _review_from_row(row: dict) -> ReviewResponse:
    cleaned = {**row}
    user = cleaned.pop("user", None)
    product = cleaned.pop("product", None)
    cleaned["user_name"] = display_name(user, cleaned.get("user_id"))
    cleaned["user_avatar_url"] = (user or {}).get("avatar_url")
    if product:
        cleaned["product_name"] = product.get("name")
    return ReviewResponse(**cleaned)


@router.get("/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    product_id: Optional[str] = Query(default=None),
) -> list[ReviewResponse]:
    db = get_supabase_client()

    query = (
        db.table(TABLE)
        .select("*, user:users(name, avatar_url)")
        .eq("status", "approved")
    )
    if product_id:
        query = query.eq("product_id", product_id)

    try:
        result = query.order("created_at", desc=True).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch reviews")

    return [_review_from_row(row) for row in result.data or []]


@router.post("/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreate,
    user: dict = Depends(get_current_user),
) -> ReviewResponse:
    row = {
        "product_id": body.product_id,
        "user_id": user["id"],
        "rating": body.rating,
        "title": (body.title or "").strip() or None,
        "comment": body.comment,
        "images": body.images or None,
        "status": "pending",
        # Set by an admin once the order history is checked
        "verified_purchase": False,
    }

    db = get_supabase_admin_client()
    try:
        result = db.table(TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="submit review")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save review", "code": "db_error"},
        )

    logger.info("User %s submitted a review for product %s", user["id"], body.product_id)
    return _review_from_row({**result.data[0], "user": user})


@admin_router.get("/reviews", response_model=list[ReviewResponse])
async def admin_list_reviews() -> list[ReviewResponse]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(TABLE)
            .select("*, user:users(name, avatar_url), product:products(name)")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch reviews")

    return [_review_from_row(row) for row in result.data or []]


@admin_router.put("/reviews/{review_id}", response_model=ReviewResponse)
async def admin_update_review(review_id: str, body: ReviewStatusUpdate) -> ReviewResponse:
    db = get_supabase_admin_client()

    changes = {
        "status": body.status,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }

    try:
        result = db.table(TABLE).update(changes).eq("id", review_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update review")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Review not found", "code": "review_not_found"},
        )

    logger.info("Review %s set to %s", review_id, body.status)
    return _review_from_row(result.data[0])


@admin_router.delete("/reviews/{review_id}")
async def admin_delete_review(review_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(TABLE).delete().eq("id", review_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete review")

    return {"message": "Review deleted successfully"}
