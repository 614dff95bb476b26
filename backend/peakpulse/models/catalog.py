"""
Catalog Schemas
===============
Products and product categories. Field names follow the snake_case
column names in Supabase so rows can be passed straight through.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Nested
# ---------------------------------------------------------------------------

class ProductImage(BaseModel):
    id: str
    url: str
    alt_text: Optional[str] = None


class ProductVariant(BaseModel):
    id: str
    name: str = Field(..., description="Variant axis, e.g. 'Size' or 'Color'.")
    value: str = Field(..., description="Variant value, e.g. 'M' or 'Red'.")
    sku: str
    price: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    image_id: Optional[str] = None


class CategoryRef(BaseModel):
    id: str
    name: str
    slug: str


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductCreate(BaseModel):
    """Admin payload for a new product. Slug is derived from the name if omitted."""

    name: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    description: str = ""
    short_description: Optional[str] = None
    price: float = Field(..., ge=0)
    compare_at_price: Optional[float] = Field(default=None, ge=0)
    images: list[ProductImage] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)
    categories: list[CategoryRef] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    fabric_details: Optional[str] = None
    care_instructions: Optional[str] = None
    sustainability_metrics: Optional[str] = None
    fit_guide: Optional[str] = None
    sku: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    is_featured: bool = False


class ProductUpdate(BaseModel):
    """Partial update. Only fields present in the payload are written."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    compare_at_price: Optional[float] = Field(default=None, ge=0)
    images: Optional[list[ProductImage]] = None
    variants: Optional[list[ProductVariant]] = None
    categories: Optional[list[CategoryRef]] = None
    tags: Optional[list[str]] = None
    fabric_details: Optional[str] = None
    care_instructions: Optional[str] = None
    sustainability_metrics: Optional[str] = None
    fit_guide: Optional[str] = None
    sku: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    is_featured: Optional[bool] = None


class ProductResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str = ""
    short_description: Optional[str] = None
    price: float
    compare_at_price: Optional[float] = None
    images: list[ProductImage] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)
    categories: list[CategoryRef] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    fabric_details: Optional[str] = None
    care_instructions: Optional[str] = None
    sustainability_metrics: Optional[str] = None
    fit_guide: Optional[str] = None
    sku: Optional[str] = None
    stock: Optional[int] = None
    average_rating: Optional[float] = None
    review_count: Optional[int] = None
    is_featured: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    ai_image_prompt: Optional[str] = None
    parent_id: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    ai_image_prompt: Optional[str] = None
    parent_id: Optional[str] = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    ai_image_prompt: Optional[str] = None
    parent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
