"""
Like / bookmark toggling.

Likes live on the post (``user_posts.liked_by_user_ids`` with a
denormalised ``like_count``); bookmarks live on the user
(``users.bookmarked_post_ids``). Both are read-modify-write on an array
column, so the pure list logic lives here and the routers do the I/O.
"""

from __future__ import annotations

from typing import Any


def as_id_list(value: Any) -> list[str]:
    """Coerce a stored array column to a list of ids; anything else is empty."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def toggle_membership(value: Any, member: str) -> tuple[list[str], bool]:
    """Add ``member`` if absent, remove it if present.

    Returns the new list and whether ``member`` is now in it.

    >>> toggle_membership(["a"], "b")
    (['a', 'b'], True)
    >>> toggle_membership(["a", "b"], "a")
    (['b'], False)
    """
    current = as_id_list(value)
    if member in current:
        return [item for item in current if item != member], False
    return current + [member], True


def like_update(liked_by: Any, user_id: str) -> tuple[dict, bool]:
    """Column changes for toggling ``user_id``'s like on a post.

    ``like_count`` is always recomputed from the list, which also repairs
    any drift in older rows.
    """
    updated, liked = toggle_membership(liked_by, user_id)
    return {"liked_by_user_ids": updated, "like_count": len(updated)}, liked
