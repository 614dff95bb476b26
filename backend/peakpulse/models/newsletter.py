"""
Newsletter Schemas
==================
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class NewsletterSubscribe(BaseModel):
    email: EmailStr
    source: Optional[str] = Field(default=None, max_length=64)
