"""
Payment Gateways Router
=======================
Public:
    GET /api/v1/payment-gateways                      Enabled gateways, public fields only

Admin:
    GET    /api/v1/admin/payment-gateways
    POST   /api/v1/admin/payment-gateways
    GET    /api/v1/admin/payment-gateways/{gateway_key}
    PUT    /api/v1/admin/payment-gateways/{gateway_key}
    DELETE /api/v1/admin/payment-gateways/{gateway_key}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from peakpulse.auth import require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.payment_gateway import (
    PaymentGatewayAdmin,
    PaymentGatewayCreate,
    PaymentGatewayPublic,
    PaymentGatewayUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["payment-gateways"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "payment-gateways"],
    dependencies=[Depends(require_admin)],
)

TABLE = "payment_gateway_settings"
PUBLIC_COLUMNS = (
    "gateway_key, display_name, description, icon_name, "
    "is_domestic_only, is_international_only, display_order"
)


def _gateway_not_found(gateway_key: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": f"Payment gateway '{gateway_key}' not found", "code": "gateway_not_found"},
    )


@router.get("/payment-gateways", response_model=list[PaymentGatewayPublic])
async def list_enabled_gateways() -> list[PaymentGatewayPublic]:
    db = get_supabase_client()

    try:
        result = (
            db.table(TABLE)
            .select(PUBLIC_COLUMNS)
            .eq("is_enabled", True)
            .order("display_order")
            .order("display_name")
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch payment gateways")

    return [PaymentGatewayPublic(**row) for row in result.data or []]


@admin_router.get("/payment-gateways", response_model=list[PaymentGatewayAdmin])
async def admin_list_gateways() -> list[PaymentGatewayAdmin]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(TABLE)
            .select("*")
            .order("display_order")
            .order("display_name")
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch payment gateways")

    return [PaymentGatewayAdmin(**row) for row in result.data or []]


@admin_router.post(
    "/payment-gateways",
    response_model=PaymentGatewayAdmin,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_gateway(body: PaymentGatewayCreate) -> PaymentGatewayAdmin:
    row = body.model_dump(mode="json")
    row["credentials_config"] = body.credentials_config or None
    for field in ("description", "icon_name", "notes"):
        row[field] = (row.get(field) or "").strip() or None

    db = get_supabase_admin_client()
    try:
        result = db.table(TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(
            exc,
            action="create payment gateway",
            conflict_message=f"gateway_key '{body.gateway_key}' already exists.",
        )

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save payment gateway", "code": "db_error"},
        )

    logger.info("Created payment gateway %s", body.gateway_key)
    return PaymentGatewayAdmin(**result.data[0])


@admin_router.get("/payment-gateways/{gateway_key}", response_model=PaymentGatewayAdmin)
async def admin_get_gateway(gateway_key: str) -> PaymentGatewayAdmin:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(TABLE)
            .select("*")
            .eq("gateway_key", gateway_key)
            .maybe_single()
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch payment gateway")

    if not result or not result.data:
        raise _gateway_not_found(gateway_key)

    return PaymentGatewayAdmin(**result.data)


@admin_router.put("/payment-gateways/{gateway_key}", response_model=PaymentGatewayAdmin)
async def admin_update_gateway(
    gateway_key: str, body: PaymentGatewayUpdate
) -> PaymentGatewayAdmin:
    changes = body.model_dump(mode="json", exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "No fields to update", "code": "empty_update"},
        )
    if "credentials_config" in changes:
        changes["credentials_config"] = changes["credentials_config"] or None
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    db = get_supabase_admin_client()
    try:
        result = db.table(TABLE).update(changes).eq("gateway_key", gateway_key).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update payment gateway")

    if not result.data:
        raise _gateway_not_found(gateway_key)

    logger.info("Updated payment gateway %s", gateway_key)
    return PaymentGatewayAdmin(**result.data[0])


@admin_router.delete("/payment-gateways/{gateway_key}")
async def admin_delete_gateway(gateway_key: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(TABLE).delete().eq("gateway_key", gateway_key).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete payment gateway")

    return {"message": f"Payment gateway '{gateway_key}' deleted successfully"}
