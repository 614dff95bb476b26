"""
Text helpers shared by the catalog, content and community routers.
"""

from __future__ import annotations

import re
from typing import Optional

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^\w-]+", re.ASCII)


def slugify(text: str) -> str:
    """Build a URL slug: lower-case, whitespace runs to '-', drop the rest.

    >>> slugify("Himalayan Breeze Jacket!")
    'himalayan-breeze-jacket'
    """
    lowered = text.lower()
    dashed = _WHITESPACE_RE.sub("-", lowered)
    return _NON_SLUG_RE.sub("", dashed)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    """Strip a string and collapse empty results to None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def display_name(user: Optional[dict], user_id: Optional[str] = None) -> str:
    """Pick a public display name for a post or comment author.

    Order of preference: profile name, email local part, a shortened id.
    """
    if user:
        name = (user.get("name") or "").strip()
        if name:
            return name
        email = (user.get("email") or "").strip()
        if email:
            return email.split("@", 1)[0]
    if user_id:
        if len(user_id) <= 8:
            return user_id
        return f"{user_id[:4]}...{user_id[-4:]}"
    return "Anonymous"
