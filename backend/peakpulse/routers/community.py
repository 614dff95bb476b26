"""
Community Router
================
Public:
    GET  /api/v1/user-posts                         Approved posts, newest first
    GET  /api/v1/user-posts/{post_id}/comments      Comments, oldest first

Authenticated:
    POST /api/v1/user-posts                         Submit a post (held for moderation)
    POST /api/v1/user-posts/{post_id}/like          Toggle like
    POST /api/v1/user-posts/{post_id}/bookmark      Toggle bookmark
    POST /api/v1/user-posts/{post_id}/comments      Add a comment

Admin:
    GET    /api/v1/admin/user-posts
    PUT    /api/v1/admin/user-posts/{post_id}       Moderate (status and/or caption)
    DELETE /api/v1/admin/user-posts/{post_id}

The acting user always comes from the bearer token. Like and bookmark
writes go through the admin client because RLS does not let a shopper
update another shopper's post row.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from peakpulse.auth import get_current_user, require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.community import (
    BookmarkToggleResponse,
    CommentCreate,
    CommentResponse,
    LikeToggleResponse,
    UserPostCreate,
    UserPostModeration,
    UserPostResponse,
)
from peakpulse.services.engagement import as_id_list, like_update, toggle_membership
from peakpulse.services.text import display_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["community"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "community"],
    dependencies=[Depends(require_admin)],
)

POSTS_TABLE = "user_posts"
COMMENTS_TABLE = "post_comments"
AUTHOR_JOIN = "user:users(name, avatar_url)"


def _with_author(row: dict) -> dict:
    cleaned = {**row}
    author = cleaned.pop("user", None)
    cleaned["user_name"] = display_name(author, cleaned.get("user_id"))
    cleaned["user_avatar_url"] = (author or {}).get("avatar_url")
    return cleaned


def _post_from_row(row: dict) -> UserPostResponse:
    cleaned = _with_author(row)
    cleaned["liked_by_user_ids"] = as_id_list(cleaned.get("liked_by_user_ids"))
    cleaned["like_count"] = cleaned.get("like_count") or 0
    return UserPostResponse(**cleaned)


def _post_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "Post not found", "code": "post_not_found"},
    )


def _fetch_post_row(db: Client, post_id: str, columns: str = "*") -> dict:
    try:
        result = (
            db.table(POSTS_TABLE)
            .select(columns)
            .eq("id", post_id)
            .maybe_single()
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch post", not_found_message="Post not found")

    if not result or not result.data:
        raise _post_not_found()
    return result.data


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

@router.get("/user-posts", response_model=list[UserPostResponse])
async def list_user_posts() -> list[UserPostResponse]:
    db = get_supabase_client()

    try:
        result = (
            db.table(POSTS_TABLE)
            .select(f"*, {AUTHOR_JOIN}")
            .eq("status", "approved")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch user posts")

    return [_post_from_row(row) for row in result.data or []]


@router.post("/user-posts", response_model=UserPostResponse, status_code=status.HTTP_201_CREATED)
async def create_user_post(
    body: UserPostCreate,
    user: dict = Depends(get_current_user),
) -> UserPostResponse:
    row = {
        "user_id": user["id"],
        "image_url": body.image_url,
        "caption": (body.caption or "").strip() or None,
        "product_tags": body.product_tags or None,
        "status": "pending",
        "like_count": 0,
        "liked_by_user_ids": [],
    }

    db = get_supabase_admin_client()
    try:
        result = db.table(POSTS_TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="create user post")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save post", "code": "db_error"},
        )

    logger.info("User %s submitted post %s", user["id"], result.data[0].get("id"))
    return _post_from_row({**result.data[0], "user": user})


@router.post("/user-posts/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: str,
    user: dict = Depends(get_current_user),
) -> LikeToggleResponse:
    db = get_supabase_admin_client()

    current = _fetch_post_row(db, post_id, "id, liked_by_user_ids, like_count")
    changes, liked = like_update(current.get("liked_by_user_ids"), user["id"])

    try:
        result = db.table(POSTS_TABLE).update(changes).eq("id", post_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update like")

    if not result.data:
        raise _post_not_found()

    logger.info(
        "User %s %s post %s (count=%s)",
        user["id"], "liked" if liked else "unliked", post_id, changes["like_count"],
    )
    return LikeToggleResponse(liked=liked, post=_post_from_row(result.data[0]))


@router.post("/user-posts/{post_id}/bookmark", response_model=BookmarkToggleResponse)
async def toggle_bookmark(
    post_id: str,
    user: dict = Depends(get_current_user),
) -> BookmarkToggleResponse:
    db = get_supabase_admin_client()

    _fetch_post_row(db, post_id, "id")
    updated, bookmarked = toggle_membership(user.get("bookmarked_post_ids"), post_id)

    try:
        db.table("users").update({"bookmarked_post_ids": updated}).eq("id", user["id"]).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update bookmarks")

    return BookmarkToggleResponse(bookmarked=bookmarked, bookmarked_post_ids=updated)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

@router.get("/user-posts/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str) -> list[CommentResponse]:
    db = get_supabase_client()

    try:
        result = (
            db.table(COMMENTS_TABLE)
            .select(f"*, {AUTHOR_JOIN}")
            .eq("post_id", post_id)
            .order("created_at")
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch comments")

    return [CommentResponse(**_with_author(row)) for row in result.data or []]


@router.post(
    "/user-posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: str,
    body: CommentCreate,
    user: dict = Depends(get_current_user),
) -> CommentResponse:
    db = get_supabase_admin_client()

    _fetch_post_row(db, post_id, "id")

    row = {
        "post_id": post_id,
        "user_id": user["id"],
        "comment_text": body.comment_text,
        "parent_comment_id": body.parent_comment_id or None,
    }

    try:
        result = db.table(COMMENTS_TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="add comment")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save comment", "code": "db_error"},
        )

    return CommentResponse(**_with_author({**result.data[0], "user": user}))


# ---------------------------------------------------------------------------
# Admin moderation
# ---------------------------------------------------------------------------

@admin_router.get("/user-posts", response_model=list[UserPostResponse])
async def admin_list_user_posts() -> list[UserPostResponse]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(POSTS_TABLE)
            .select(f"*, {AUTHOR_JOIN}")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch user posts")

    return [_post_from_row(row) for row in result.data or []]


@admin_router.put("/user-posts/{post_id}", response_model=UserPostResponse)
async def admin_moderate_user_post(post_id: str, body: UserPostModeration) -> UserPostResponse:
    changes: dict = {}
    if body.status is not None:
        changes["status"] = body.status
    if body.caption is not None:
        changes["caption"] = body.caption.strip() or None

    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Provide a status or a caption to update", "code": "empty_update"},
        )
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    db = get_supabase_admin_client()
    try:
        result = db.table(POSTS_TABLE).update(changes).eq("id", post_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update user post")

    if not result.data:
        raise _post_not_found()

    logger.info("Moderated post %s: %s", post_id, sorted(changes))
    return _post_from_row(result.data[0])


@admin_router.delete("/user-posts/{post_id}")
async def admin_delete_user_post(post_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(POSTS_TABLE).delete().eq("id", post_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete user post")

    return {"message": "Post deleted successfully"}
