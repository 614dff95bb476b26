"""
Newsletter Router
=================
    POST /api/v1/newsletter/subscribe

Subscribing twice is not an error: the unique constraint on email turns
the second attempt into a 200 "already subscribed".
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

from peakpulse.db.supabase import (
    UNIQUE_VIOLATION_CODE,
    get_supabase_admin_client,
    raise_for_db_error,
)
from peakpulse.models.newsletter import NewsletterSubscribe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/newsletter", tags=["newsletter"])


@router.post("/subscribe", status_code=status.HTTP_201_CREATED)
async def subscribe(body: NewsletterSubscribe):
    email = str(body.email).strip().lower()
    row = {
        "email": email,
        "source": (body.source or "").strip() or "unknown",
        "is_active": True,
    }

    db = get_supabase_admin_client()
    try:
        db.table("newsletter_subscriptions").insert(row).execute()
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION_CODE:
            return JSONResponse(
                status_code=status.HTTP_200_OK,
                content={"message": "You are already subscribed! Thank you."},
            )
        raise_for_db_error(exc, action="subscribe")
    except Exception as exc:
        raise_for_db_error(exc, action="subscribe")

    logger.info("New newsletter subscription from source %s", row["source"])
    return {"message": "Successfully subscribed to the newsletter!"}
