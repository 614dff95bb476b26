"""
Promotional Post Schemas
========================
Time-boxed offers shown on the homepage carousel and the promotions
strip. ``valid_from`` / ``valid_until`` bound when a post is public.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class PromotionalPostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    image_alt_text: Optional[str] = None
    data_ai_hint: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    sku: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True
    display_order: int = 0
    background_color: Optional[str] = None
    text_color: Optional[str] = None

    @model_validator(mode="after")
    def _check_window(self) -> "PromotionalPostCreate":
        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValueError("valid_until must be after valid_from")
        return self


class PromotionalPostUpdate(BaseModel):
    """Partial update. Validation that depends on presence (blank title,
    blank image) happens in the router, where we can tell "absent" from
    "sent as empty"."""

    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_alt_text: Optional[str] = None
    data_ai_hint: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    discount_price: Optional[float] = Field(default=None, ge=0)
    sku: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None


class PromotionalPostResponse(BaseModel):
    id: str
    title: str
    slug: str
    description: Optional[str] = None
    image_url: str
    image_alt_text: Optional[str] = None
    data_ai_hint: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    price: Optional[float] = None
    discount_price: Optional[float] = None
    sku: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    is_active: bool = True
    display_order: int = 0
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
