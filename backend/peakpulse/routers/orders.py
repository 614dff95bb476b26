"""
Orders Router
=============
Authenticated:
    POST /api/v1/orders                    Place an order
    GET  /api/v1/account/orders            Current user's orders, newest first

Admin:
    GET /api/v1/admin/orders
    PUT /api/v1/admin/orders/{order_id}    Change fulfilment status

Card payments are simulated (see services.checkout). Only the last four
digits of a card are persisted.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from peakpulse.auth import get_current_user, require_admin
from peakpulse.config import get_settings
from peakpulse.db.supabase import get_supabase_admin_client, raise_for_db_error
from peakpulse.models.order import (
    VALID_ORDER_STATUSES,
    OrderCreate,
    OrderCreated,
    OrderResponse,
    OrderStatusUpdate,
)
from peakpulse.services.checkout import CheckoutError, plan_payment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["orders"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "orders"],
    dependencies=[Depends(require_admin)],
)

TABLE = "orders"


def _new_order_id() -> str:
    return f"PP-{uuid.uuid4().hex[:12].upper()}"


@router.post("/orders", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
async def create_order(
    body: OrderCreate,
    user: dict = Depends(get_current_user),
) -> OrderCreated:
    settings = get_settings()

    try:
        plan = plan_payment(body)
    except CheckoutError as exc:
        logger.warning(
            "Order rejected for user %s: %s (%s)", user["id"], exc.code, body.shipping_details.payment_method
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"title": exc.title, "message": exc.message, "code": exc.code},
        ) from exc

    details = body.shipping_details
    order_id = _new_order_id()
    destination = details.country
    if details.is_international and details.international_destination_country:
        destination = details.international_destination_country

    row = {
        "id": order_id,
        "user_id": user["id"],
        "items": [item.model_dump(mode="json") for item in body.cart_items],
        "subtotal_amount": body.order_subtotal,
        "shipping_cost": body.shipping_cost,
        "total_amount": body.order_total,
        "currency": settings.currency,
        "status": plan.order_status,
        "payment_method": details.payment_method,
        "payment_status": plan.payment_status,
        "card_last4": plan.card_last4,
        "shipping_address": {
            "full_name": details.full_name,
            "street": details.street_address,
            "apartment_suite": details.apartment_suite or None,
            "city": details.city,
            "postal_code": details.postal_code,
            "country": destination,
            "phone": details.phone or None,
        },
        "promo_code": details.promo_code or None,
    }

    db = get_supabase_admin_client()
    try:
        db.table(TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="save order")

    logger.info(
        "Order %s placed by %s via %s (order=%s, payment=%s)",
        order_id, user["id"], details.payment_method, plan.order_status, plan.payment_status,
    )
    return OrderCreated(title=plan.title, message=plan.message, order_id=order_id)


@router.get("/account/orders", response_model=list[OrderResponse])
async def list_my_orders(user: dict = Depends(get_current_user)) -> list[OrderResponse]:
    db = get_supabase_admin_client()

    try:
        result = (
            db.table(TABLE)
            .select("*")
            .eq("user_id", user["id"])
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch orders")

    return [OrderResponse(**row) for row in result.data or []]


@admin_router.get("/orders", response_model=list[OrderResponse])
async def admin_list_orders() -> list[OrderResponse]:
    db = get_supabase_admin_client()

    try:
        result = db.table(TABLE).select("*").order("created_at", desc=True).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch orders")

    return [OrderResponse(**row) for row in result.data or []]


@admin_router.put("/orders/{order_id}", response_model=OrderResponse)
async def admin_update_order_status(order_id: str, body: OrderStatusUpdate) -> OrderResponse:
    if body.status not in VALID_ORDER_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": f"Invalid order status '{body.status}'",
                "code": "invalid_status",
                "valid_statuses": list(VALID_ORDER_STATUSES),
            },
        )

    db = get_supabase_admin_client()
    changes = {
        "status": body.status,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }

    try:
        result = db.table(TABLE).update(changes).eq("id", order_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update order")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Order not found", "code": "order_not_found"},
        )

    logger.info("Order %s moved to %s", order_id, body.status)
    return OrderResponse(**result.data[0])
