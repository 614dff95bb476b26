"""
Checkout & Order Schemas
========================
Card fields are accepted only on the request model. They are validated
and then dropped; orders store ``card_last4`` at most.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["Pending", "Processing", "Shipped", "Delivered", "Cancelled", "Refunded"]
PaymentStatus = Literal["Pending", "Paid", "Failed", "Refunded"]

VALID_ORDER_STATUSES: tuple[str, ...] = (
    "Pending",
    "Processing",
    "Shipped",
    "Delivered",
    "Cancelled",
    "Refunded",
)


class CartItem(BaseModel):
    product_id: str
    variant_id: Optional[str] = None
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    image_url: Optional[str] = None


class ShippingDetails(BaseModel):
    full_name: str = Field(..., min_length=1)
    street_address: str = Field(..., min_length=1)
    apartment_suite: Optional[str] = None
    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    postal_code: str = ""
    phone: Optional[str] = None
    is_international: bool = False
    international_destination_country: Optional[str] = None
    promo_code: Optional[str] = None
    payment_method: str
    cardholder_name: Optional[str] = None
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cvc: Optional[str] = None


class OrderCreate(BaseModel):
    cart_items: list[CartItem]
    shipping_details: ShippingDetails
    order_subtotal: float = Field(..., ge=0)
    shipping_cost: float = Field(default=0, ge=0)
    order_total: float = Field(..., ge=0)


class OrderCreated(BaseModel):
    title: str
    message: str
    order_id: str


class ShippingAddress(BaseModel):
    full_name: str
    street: str
    apartment_suite: Optional[str] = None
    city: str
    postal_code: str = ""
    country: str
    phone: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[CartItem] = Field(default_factory=list)
    subtotal_amount: Optional[float] = None
    shipping_cost: Optional[float] = None
    total_amount: float
    currency: str = "NPR"
    status: OrderStatus
    payment_method: str
    payment_status: PaymentStatus
    card_last4: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStatusUpdate(BaseModel):
    status: str
