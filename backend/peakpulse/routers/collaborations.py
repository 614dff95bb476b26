"""
Design Collaborations Router
============================
Public:
    GET /api/v1/design-collaboration-categories
    GET /api/v1/design-collaborations                 Published galleries
    GET /api/v1/design-collaborations/{slug}          One published gallery

Admin:
    POST/PUT/DELETE /api/v1/admin/design-collaboration-categories[/{category_id}]
    GET/POST        /api/v1/admin/design-collaborations
    PUT/DELETE      /api/v1/admin/design-collaborations/{collaboration_id}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from peakpulse.auth import require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.collaboration import (
    CollaborationCategoryCreate,
    CollaborationCategoryResponse,
    CollaborationCategoryUpdate,
    CollaborationCreate,
    CollaborationResponse,
    CollaborationUpdate,
)
from peakpulse.services.text import blank_to_none, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["design-collaborations"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "design-collaborations"],
    dependencies=[Depends(require_admin)],
)

CATEGORY_TABLE = "design_collaboration_categories"
GALLERY_TABLE = "design_collaborations"
GALLERY_SELECT = "*, category:design_collaboration_categories(name, slug)"

_OPTIONAL_TEXT_FIELDS = (
    "description",
    "category_id",
    "cover_image_url",
    "ai_cover_image_prompt",
    "artist_name",
    "artist_statement",
)


def _gallery_from_row(row: dict) -> CollaborationResponse:
    """Flatten the joined category into category_name / category_slug."""
    cleaned = {**row}
    category = cleaned.pop("category", None) or {}
    cleaned["category_name"] = category.get("name")
    cleaned["category_slug"] = category.get("slug")
    cleaned["gallery_images"] = cleaned.get("gallery_images") or []
    cleaned["is_published"] = bool(cleaned.get("is_published"))
    return CollaborationResponse(**cleaned)


def _gallery_query(db):
    return db.table(GALLERY_TABLE).select(GALLERY_SELECT)


def _ordered(query):
    return query.order("collaboration_date", desc=True).order("created_at", desc=True)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

@router.get(
    "/design-collaboration-categories",
    response_model=list[CollaborationCategoryResponse],
)
async def list_collaboration_categories() -> list[CollaborationCategoryResponse]:
    db = get_supabase_client()

    try:
        result = db.table(CATEGORY_TABLE).select("*").order("name").execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch design collaboration categories")

    return [CollaborationCategoryResponse(**row) for row in result.data or []]


@router.get("/design-collaborations", response_model=list[CollaborationResponse])
async def list_collaborations() -> list[CollaborationResponse]:
    db = get_supabase_client()

    try:
        result = _ordered(_gallery_query(db).eq("is_published", True)).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch design collaborations")

    return [_gallery_from_row(row) for row in result.data or []]


@router.get("/design-collaborations/{slug}", response_model=CollaborationResponse)
async def get_collaboration(slug: str) -> CollaborationResponse:
    db = get_supabase_client()

    try:
        result = (
            _gallery_query(db)
            .eq("slug", slug)
            .eq("is_published", True)
            .maybe_single()
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch design collaboration")

    if not result or not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "message": f"Design collaboration '{slug}' not found.",
                "code": "collaboration_not_found",
            },
        )

    return _gallery_from_row(result.data)


# ---------------------------------------------------------------------------
# Admin: categories
# ---------------------------------------------------------------------------

@admin_router.post(
    "/design-collaboration-categories",
    response_model=CollaborationCategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_collaboration_category(
    body: CollaborationCategoryCreate,
) -> CollaborationCategoryResponse:
    row = {
        "name": body.name,
        "slug": blank_to_none(body.slug) or slugify(body.name),
        "description": blank_to_none(body.description),
    }

    db = get_supabase_admin_client()
    try:
        result = db.table(CATEGORY_TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create design collaboration category",
            conflict_message=f"A category with slug '{row['slug']}' already exists.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save category", "code": "db_error"},
        )

    return CollaborationCategoryResponse(**result.data[0])


@admin_router.put(
    "/design-collaboration-categories/{category_id}",
    response_model=CollaborationCategoryResponse,
)
async def admin_update_collaboration_category(
    category_id: str, body: CollaborationCategoryUpdate
) -> CollaborationCategoryResponse:
    payload = body.model_dump(exclude_unset=True)
    changes: dict = {}
    if payload.get("name"):
        changes["name"] = payload["name"]
    slug = blank_to_none(payload.get("slug")) or (
        slugify(payload["name"]) if payload.get("name") else None
    )
    if slug:
        changes["slug"] = slug
    if "description" in payload:
        changes["description"] = blank_to_none(payload["description"])
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    db = get_supabase_admin_client()
    try:
        result = db.table(CATEGORY_TABLE).update(changes).eq("id", category_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update design collaboration category")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Category not found", "code": "category_not_found"},
        )

    return CollaborationCategoryResponse(**result.data[0])


@admin_router.delete("/design-collaboration-categories/{category_id}")
async def admin_delete_collaboration_category(category_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(CATEGORY_TABLE).delete().eq("id", category_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete design collaboration category")

    return {"message": "Category deleted successfully"}


# ---------------------------------------------------------------------------
# Admin: galleries
# ---------------------------------------------------------------------------

@admin_router.get("/design-collaborations", response_model=list[CollaborationResponse])
async def admin_list_collaborations() -> list[CollaborationResponse]:
    db = get_supabase_admin_client()

    try:
        result = _ordered(_gallery_query(db)).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch design collaborations")

    return [_gallery_from_row(row) for row in result.data or []]


@admin_router.post(
    "/design-collaborations",
    response_model=CollaborationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_collaboration(body: CollaborationCreate) -> CollaborationResponse:
    row = body.model_dump(mode="json")
    row["slug"] = blank_to_none(body.slug) or slugify(body.title)
    for field in _OPTIONAL_TEXT_FIELDS:
        row[field] = blank_to_none(row.get(field))

    db = get_supabase_admin_client()
    try:
        result = db.table(GALLERY_TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create design collaboration",
            conflict_message=f"A collaboration with slug '{row['slug']}' already exists.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save design collaboration", "code": "db_error"},
        )

    logger.info("Created design collaboration %s", row["slug"])
    return _gallery_from_row(result.data[0])


@admin_router.put(
    "/design-collaborations/{collaboration_id}",
    response_model=CollaborationResponse,
)
async def admin_update_collaboration(
    collaboration_id: str, body: CollaborationUpdate
) -> CollaborationResponse:
    changes = body.model_dump(mode="json", exclude_unset=True)
    for field in _OPTIONAL_TEXT_FIELDS:
        if field in changes:
            changes[field] = blank_to_none(changes[field])
    if "title" in changes and not blank_to_none(changes["title"]):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Title cannot be empty.", "code": "missing_fields"},
        )
    slug = blank_to_none(changes.get("slug")) or (
        slugify(changes["title"]) if changes.get("title") else None
    )
    if slug:
        changes["slug"] = slug
    else:
        changes.pop("slug", None)
    if changes.get("gallery_images") is None:
        changes.pop("gallery_images", None)
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    db = get_supabase_admin_client()
    try:
        result = (
            db.table(GALLERY_TABLE)
            .update(changes)
            .eq("id", collaboration_id)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="update design collaboration")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Design collaboration not found", "code": "collaboration_not_found"},
        )

    return _gallery_from_row(result.data[0])


@admin_router.delete("/design-collaborations/{collaboration_id}")
async def admin_delete_collaboration(collaboration_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(GALLERY_TABLE).delete().eq("id", collaboration_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete design collaboration")

    logger.info("Deleted design collaboration %s", collaboration_id)
    return {"message": "Design collaboration deleted successfully"}
