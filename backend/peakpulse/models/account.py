"""
Account & User Schemas
======================
The shopper's own profile and wishlist, and the admin view of users.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["customer", "vip", "affiliate", "admin"]


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    roles: list[str] = Field(default_factory=lambda: ["customer"])
    wishlist: list[str] = Field(default_factory=list)
    bookmarked_post_ids: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Email is managed by Supabase Auth and cannot be changed here."""

    name: Optional[str] = Field(default=None, max_length=120)
    avatar_url: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=1000)


class WishlistResponse(BaseModel):
    wishlist: list[str]


class RolesUpdate(BaseModel):
    roles: list[Role]
