"""
Site configuration store: JSON blobs keyed by ``config_key`` in the
``site_configurations`` table.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import Client

logger = logging.getLogger(__name__)

TABLE = "site_configurations"


def read_config(db: Client, config_key: str) -> Optional[Any]:
    """Return the stored value for ``config_key``, or None if there is no row."""
    result = (
        db.table(TABLE)
        .select("value")
        .eq("config_key", config_key)
        .maybe_single()
        .execute()
    )
    if not result or not result.data:
        return None
    return result.data.get("value")


def write_config(db: Client, config_key: str, value: Any) -> None:
    db.table(TABLE).upsert(
        {"config_key": config_key, "value": value},
        on_conflict="config_key",
    ).execute()
    logger.info("Saved site configuration %s", config_key)
