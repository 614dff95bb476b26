"""
Peak Pulse API
==============
FastAPI application entry point. Mount routers here.

Each feature module exposes a public ``router`` and, where it has a
back office, an ``admin_router`` guarded by ``require_admin``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from peakpulse.config import get_settings
from peakpulse.db.supabase import DatabaseUnavailableError
from peakpulse.routers import (
    accounting,
    account,
    catalog,
    collaborations,
    community,
    content,
    newsletter,
    orders,
    payment_gateways,
    print_designs,
    promotions,
    reviews,
    shipping,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("peakpulse")

app = FastAPI(
    title="Peak Pulse API",
    description="Storefront and back-office API for the Peak Pulse clothing brand",
    version="0.1.0",
    docs_url="/api/docs" if settings.environment != "production" else None,
    redoc_url="/api/redoc" if settings.environment != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DatabaseUnavailableError)
async def database_unavailable_handler(request: Request, exc: DatabaseUnavailableError) -> JSONResponse:
    logger.error("Database unavailable for %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": {
                "message": "Database service is not available.",
                "code": "db_unavailable",
            }
        },
    )


app.include_router(catalog.router)
app.include_router(content.router)
app.include_router(collaborations.router)
app.include_router(promotions.router)
app.include_router(reviews.router)
app.include_router(community.router)
app.include_router(orders.router)
app.include_router(shipping.router)
app.include_router(account.router)
app.include_router(newsletter.router)
app.include_router(payment_gateways.router)

app.include_router(catalog.admin_router)
app.include_router(content.admin_router)
app.include_router(collaborations.admin_router)
app.include_router(print_designs.admin_router)
app.include_router(promotions.admin_router)
app.include_router(accounting.admin_router)
app.include_router(reviews.admin_router)
app.include_router(community.admin_router)
app.include_router(orders.admin_router)
app.include_router(account.admin_router)
app.include_router(payment_gateways.admin_router)


@app.get("/api/v1/health")
async def health_check() -> dict:
    return {"status": "ok", "service": "peakpulse-api"}
