"""
Catalog Router
==============
Public:
    GET  /api/v1/products                List products (optional category / featured filters)
    GET  /api/v1/products/{slug}         Product detail
    GET  /api/v1/categories              List categories

Admin:
    GET    /api/v1/admin/products
    POST   /api/v1/admin/products
    PUT    /api/v1/admin/products/{product_id}
    DELETE /api/v1/admin/products/{product_id}
    POST   /api/v1/admin/categories
    PUT    /api/v1/admin/categories/{category_id}
    DELETE /api/v1/admin/categories/{category_id}

Slugs are generated from the name when the admin leaves them blank, and
regenerated when the name changes without an explicit slug.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from peakpulse.auth import require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.catalog import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from peakpulse.services.text import blank_to_none, slugify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["catalog"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "catalog"],
    dependencies=[Depends(require_admin)],
)

_LIST_FIELDS = ("images", "variants", "categories", "tags")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _product_from_row(row: dict) -> ProductResponse:
    """Array columns come back as null for older rows; normalise to []."""
    cleaned = {**row}
    for field in _LIST_FIELDS:
        cleaned[field] = cleaned.get(field) or []
    return ProductResponse(**cleaned)


def _resolve_slug(explicit: Optional[str], name: Optional[str]) -> Optional[str]:
    slug = blank_to_none(explicit)
    if slug:
        return slug
    if name:
        return slugify(name)
    return None


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/products",
    response_model=list[ProductResponse],
    summary="List products",
)
async def list_products(
    category: Optional[str] = Query(default=None, description="Category slug filter"),
    featured: Optional[bool] = Query(default=None),
) -> list[ProductResponse]:
    db = get_supabase_client()

    query = db.table("products").select("*")
    if featured is not None:
        query = query.eq("is_featured", featured)

    try:
        result = query.order("name").execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch products")

    products = [_product_from_row(row) for row in result.data or []]

    # categories is a JSON array of {id, name, slug}; filter in Python
    # rather than relying on jsonb containment operators in the client.
    if category:
        products = [
            p for p in products if any(c.slug == category for c in p.categories)
        ]

    return products


@router.get(
    "/products/{slug}",
    response_model=ProductResponse,
    summary="Get a product by slug",
    responses={404: {"description": "Product not found"}},
)
async def get_product(slug: str) -> ProductResponse:
    db = get_supabase_client()

    try:
        result = (
            db.table("products")
            .select("*")
            .eq("slug", slug)
            .maybe_single()
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch product")

    if not result or not result.data:
        logger.info("Product not found for slug %s", slug)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": f"Product with slug '{slug}' not found.", "code": "product_not_found"},
        )

    return _product_from_row(result.data)


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    summary="List product categories",
)
async def list_categories() -> list[CategoryResponse]:
    db = get_supabase_client()

    try:
        result = db.table("categories").select("*").order("name").execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch categories")

    return [CategoryResponse(**row) for row in result.data or []]


# ---------------------------------------------------------------------------
# Admin: products
# ---------------------------------------------------------------------------

@admin_router.get("/products", response_model=list[ProductResponse])
async def admin_list_products() -> list[ProductResponse]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table("products")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch products")

    return [_product_from_row(row) for row in result.data or []]


@admin_router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_product(body: ProductCreate) -> ProductResponse:
    db = get_supabase_admin_client()

    row = body.model_dump(mode="json")
    row["slug"] = _resolve_slug(body.slug, body.name)

    try:
        result = db.table("products").insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create product",
            conflict_message=f"A product with slug '{row['slug']}' already exists.",
        )

    if not result.data:
        logger.error("Product insert returned no rows for slug %s", row["slug"])
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save product", "code": "db_error"},
        )

    logger.info("Created product %s (%s)", result.data[0].get("id"), row["slug"])
    return _product_from_row(result.data[0])


@admin_router.put("/products/{product_id}", response_model=ProductResponse)
async def admin_update_product(product_id: str, body: ProductUpdate) -> ProductResponse:
    db = get_supabase_admin_client()

    changes = body.model_dump(mode="json", exclude_unset=True)
    if "slug" in changes or "name" in changes:
        slug = _resolve_slug(changes.get("slug"), changes.get("name"))
        if slug:
            changes["slug"] = slug
        else:
            changes.pop("slug", None)
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = db.table("products").update(changes).eq("id", product_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update product")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Product not found", "code": "product_not_found"},
        )

    return _product_from_row(result.data[0])


@admin_router.delete("/products/{product_id}")
async def admin_delete_product(product_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table("products").delete().eq("id", product_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete product")

    logger.info("Deleted product %s", product_id)
    return {"message": "Product deleted successfully"}


# ---------------------------------------------------------------------------
# Admin: categories
# ---------------------------------------------------------------------------

@admin_router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_category(body: CategoryCreate) -> CategoryResponse:
    db = get_supabase_admin_client()

    row = {
        "name": body.name,
        "slug": _resolve_slug(body.slug, body.name),
        "description": body.description or None,
        "image_url": body.image_url or None,
        "ai_image_prompt": body.ai_image_prompt or None,
        "parent_id": body.parent_id or None,
    }

    try:
        result = db.table("categories").insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create category",
            conflict_message=f"A category with slug '{row['slug']}' already exists.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save category", "code": "db_error"},
        )

    return CategoryResponse(**result.data[0])


@admin_router.put("/categories/{category_id}", response_model=CategoryResponse)
async def admin_update_category(category_id: str, body: CategoryUpdate) -> CategoryResponse:
    db = get_supabase_admin_client()

    payload = body.model_dump(exclude_unset=True)
    changes: dict = {}
    if payload.get("name"):
        changes["name"] = payload["name"]
    slug = _resolve_slug(payload.get("slug"), payload.get("name"))
    if slug:
        changes["slug"] = slug
    for field in ("description", "image_url", "ai_image_prompt", "parent_id"):
        if field in payload:
            changes[field] = payload[field] or None
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        result = db.table("categories").update(changes).eq("id", category_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update category")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Category not found", "code": "category_not_found"},
        )

    return CategoryResponse(**result.data[0])


@admin_router.delete("/categories/{category_id}")
async def admin_delete_category(category_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table("categories").delete().eq("id", category_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete category")

    return {"message": "Category deleted successfully"}
