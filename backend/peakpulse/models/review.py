"""
Review Schemas
==============
Customer product reviews. New reviews are held as ``pending`` until an
admin approves them; only ``approved`` reviews are public.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

ReviewStatus = Literal["pending", "approved", "rejected"]


class ReviewCreate(BaseModel):
    product_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    title: Optional[str] = Field(default=None, max_length=200)
    comment: str = Field(..., min_length=1, max_length=5000)
    images: Optional[list[str]] = None

    @field_validator("comment")
    @classmethod
    def _comment_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("comment cannot be blank")
        return stripped


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class ReviewResponse(BaseModel):
    id: str
    product_id: str
    user_id: str
    rating: int
    title: Optional[str] = None
    comment: str
    images: Optional[list[str]] = None
    status: ReviewStatus = "pending"
    verified_purchase: bool = False
    user_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
    product_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
