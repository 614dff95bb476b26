"""
Supabase Clients
================
Two credential tiers, both cached for the life of the process:

- ``get_supabase_client()`` uses the anon key. RLS policies apply, so it
  is used for public storefront reads.
- ``get_supabase_admin_client()`` uses the service_role key and bypasses
  RLS. Admin back-office routes and the counter mutations (likes,
  bookmarks) go through it.

PostgREST failures surface as ``postgrest.exceptions.APIError``.
``raise_for_db_error`` maps the handful of codes the API cares about onto
HTTP responses so routers don't repeat the same branching.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import NoReturn

from fastapi import HTTPException, status
from postgrest.exceptions import APIError
from supabase import Client, create_client

from peakpulse.config import get_settings

logger = logging.getLogger(__name__)

# PostgREST: .single() matched zero rows
NOT_FOUND_CODE = "PGRST116"
# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class DatabaseUnavailableError(RuntimeError):
    """Raised when a client cannot be built because credentials are missing."""


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    if not settings.supabase_anon_key:
        raise DatabaseUnavailableError("SUPABASE_ANON_KEY is not configured")
    return create_client(settings.supabase_url, settings.supabase_anon_key)


@lru_cache
def get_supabase_admin_client() -> Client:
    settings = get_settings()
    if not settings.supabase_service_key:
        raise DatabaseUnavailableError("SUPABASE_SERVICE_KEY is not configured")
    return create_client(settings.supabase_url, settings.supabase_service_key)


def raise_for_db_error(
    exc: Exception,
    *,
    action: str,
    not_found_message: str = "Record not found",
    conflict_message: str = "Record already exists",
) -> NoReturn:
    """Translate a database exception into an HTTPException and raise it."""
    code = getattr(exc, "code", None) if isinstance(exc, APIError) else None

    if code == NOT_FOUND_CODE:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": not_found_message, "code": "not_found"},
        ) from exc

    if code == UNIQUE_VIOLATION_CODE:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": conflict_message, "code": "conflict"},
        ) from exc

    logger.error("Database error while trying to %s: %s", action, exc)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"message": f"Failed to {action}", "code": "db_error"},
    ) from exc
