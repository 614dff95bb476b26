"""
Design Collaboration Schemas
============================
Artist collaboration galleries and the categories that group them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class CollaborationCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    slug: Optional[str] = None
    description: Optional[str] = None


class CollaborationCategoryUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None


class CollaborationCategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GalleryImage(BaseModel):
    id: str
    url: str
    caption: Optional[str] = None
    alt_text: Optional[str] = None
    display_order: int = 0


class CollaborationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    cover_image_url: Optional[str] = None
    ai_cover_image_prompt: Optional[str] = None
    artist_name: Optional[str] = None
    artist_statement: Optional[str] = None
    gallery_images: list[GalleryImage] = Field(default_factory=list)
    is_published: bool = False
    collaboration_date: Optional[date] = None


class CollaborationUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    cover_image_url: Optional[str] = None
    ai_cover_image_prompt: Optional[str] = None
    artist_name: Optional[str] = None
    artist_statement: Optional[str] = None
    gallery_images: Optional[list[GalleryImage]] = None
    is_published: Optional[bool] = None
    collaboration_date: Optional[date] = None


class CollaborationResponse(BaseModel):
    id: str
    title: str
    slug: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    cover_image_url: Optional[str] = None
    ai_cover_image_prompt: Optional[str] = None
    artist_name: Optional[str] = None
    artist_statement: Optional[str] = None
    gallery_images: list[GalleryImage] = Field(default_factory=list)
    is_published: bool = False
    collaboration_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
