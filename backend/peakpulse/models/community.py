"""
Community Schemas
=================
Customer photo posts ("#PeakPulseStyle"), their comments, and the
like/bookmark toggle responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

PostStatus = Literal["pending", "approved", "rejected"]


class UserPostCreate(BaseModel):
    image_url: str = Field(..., min_length=1)
    caption: Optional[str] = Field(default=None, max_length=2000)
    product_tags: Optional[list[str]] = None

    @field_validator("image_url")
    @classmethod
    def _image_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("image_url cannot be blank")
        return stripped


class UserPostModeration(BaseModel):
    status: Optional[PostStatus] = None
    caption: Optional[str] = None


class UserPostResponse(BaseModel):
    id: str
    user_id: str
    user_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
    image_url: str
    caption: Optional[str] = None
    product_tags: Optional[list[str]] = None
    status: PostStatus = "pending"
    like_count: int = 0
    liked_by_user_ids: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LikeToggleResponse(BaseModel):
    liked: bool
    post: UserPostResponse


class BookmarkToggleResponse(BaseModel):
    bookmarked: bool
    bookmarked_post_ids: list[str]


class CommentCreate(BaseModel):
    comment_text: str = Field(..., max_length=2000)
    parent_comment_id: Optional[str] = None

    @field_validator("comment_text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("comment_text cannot be empty")
        return stripped


class CommentResponse(BaseModel):
    id: str
    post_id: str
    user_id: str
    user_name: Optional[str] = None
    user_avatar_url: Optional[str] = None
    comment_text: str
    parent_comment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
