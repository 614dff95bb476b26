"""
Print-on-Demand Designs Router
==============================
Admin:
    GET    /api/v1/admin/print-on-demand-designs
    POST   /api/v1/admin/print-on-demand-designs
    PUT    /api/v1/admin/print-on-demand-designs/{design_id}
    DELETE /api/v1/admin/print-on-demand-designs/{design_id}

Designs carry the title of their source collaboration, flattened from an
embedded select on ``design_collaborations``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from peakpulse.auth import require_admin
from peakpulse.db.supabase import get_supabase_admin_client, raise_for_db_error
from peakpulse.models.print_design import (
    PrintDesignCreate,
    PrintDesignResponse,
    PrintDesignUpdate,
)
from peakpulse.services.text import blank_to_none, slugify

logger = logging.getLogger(__name__)

admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "print-on-demand"],
    dependencies=[Depends(require_admin)],
)

TABLE = "print_on_demand_designs"
DESIGN_SELECT = "*, collaboration:design_collaborations(title)"

_OPTIONAL_TEXT_FIELDS = ("description", "ai_image_prompt", "sku", "collaboration_id")


def _design_from_row(row: dict) -> PrintDesignResponse:
    cleaned = {**row}
    collaboration = cleaned.pop("collaboration", None) or {}
    cleaned["collaboration_title"] = collaboration.get("title")
    if cleaned.get("is_for_sale") is None:
        cleaned["is_for_sale"] = True
    return PrintDesignResponse(**cleaned)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "Print design not found", "code": "design_not_found"},
    )


def _fetch_design(db: Client, design_id: str) -> PrintDesignResponse:
    try:
        result = (
            db.table(TABLE)
            .select(DESIGN_SELECT)
            .eq("id", design_id)
            .maybe_single()
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch print design")

    if not result or not result.data:
        raise _not_found()
    return _design_from_row(result.data)


@admin_router.get("/print-on-demand-designs", response_model=list[PrintDesignResponse])
async def admin_list_print_designs() -> list[PrintDesignResponse]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(TABLE)
            .select(DESIGN_SELECT)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch print designs")

    return [_design_from_row(row) for row in result.data or []]


@admin_router.post(
    "/print-on-demand-designs",
    response_model=PrintDesignResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_print_design(body: PrintDesignCreate) -> PrintDesignResponse:
    title = body.title.strip()
    image_url = body.image_url.strip()
    if not title or not image_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "Title and image URL are required.", "code": "missing_fields"},
        )

    row = body.model_dump(mode="json")
    row["title"] = title
    row["image_url"] = image_url
    row["slug"] = blank_to_none(body.slug) or slugify(title)
    for field in _OPTIONAL_TEXT_FIELDS:
        row[field] = blank_to_none(row.get(field))

    db = get_supabase_admin_client()
    try:
        result = db.table(TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create print design",
            conflict_message=f"A print design with slug '{row['slug']}' already exists.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save print design", "code": "db_error"},
        )

    logger.info("Created print design %s", row["slug"])
    # Re-read through the embedded select so the collaboration title comes back.
    return _fetch_design(db, result.data[0]["id"])


@admin_router.put(
    "/print-on-demand-designs/{design_id}",
    response_model=PrintDesignResponse,
)
async def admin_update_print_design(
    design_id: str, body: PrintDesignUpdate
) -> PrintDesignResponse:
    changes = body.model_dump(mode="json", exclude_unset=True)

    for field in ("title", "image_url"):
        if field in changes:
            value = blank_to_none(changes[field])
            if value is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail={"message": f"{field} cannot be empty.", "code": "missing_fields"},
                )
            changes[field] = value.strip()
    if "price" in changes and changes["price"] is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "price cannot be empty.", "code": "missing_fields"},
        )
    if changes.get("is_for_sale") is None:
        changes.pop("is_for_sale", None)
    for field in _OPTIONAL_TEXT_FIELDS:
        if field in changes:
            changes[field] = blank_to_none(changes[field])

    slug = blank_to_none(changes.get("slug")) or (
        slugify(changes["title"]) if "title" in changes else None
    )
    if slug:
        changes["slug"] = slug
    else:
        changes.pop("slug", None)

    db = get_supabase_admin_client()

    if not changes:
        return _fetch_design(db, design_id)

    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = db.table(TABLE).update(changes).eq("id", design_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update print design")

    if not result.data:
        raise _not_found()

    return _fetch_design(db, design_id)


@admin_router.delete("/print-on-demand-designs/{design_id}")
async def admin_delete_print_design(design_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(TABLE).delete().eq("id", design_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete print design")

    logger.info("Deleted print design %s", design_id)
    return {"message": "Print design deleted successfully"}
