"""
Print-on-Demand Design Schemas
==============================
Artwork offered as made-to-order prints, optionally tied to the design
collaboration it came out of.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PrintDesignCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    ai_image_prompt: Optional[str] = None
    price: float = Field(..., ge=0, allow_inf_nan=False)
    sku: Optional[str] = None
    is_for_sale: bool = True
    collaboration_id: Optional[str] = None


class PrintDesignUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    ai_image_prompt: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    sku: Optional[str] = None
    is_for_sale: Optional[bool] = None
    collaboration_id: Optional[str] = None


class PrintDesignResponse(BaseModel):
    id: str
    title: str
    slug: str
    description: Optional[str] = None
    image_url: str
    ai_image_prompt: Optional[str] = None
    price: float
    sku: Optional[str] = None
    is_for_sale: bool = True
    collaboration_id: Optional[str] = None
    collaboration_title: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
