"""
Payment Gateway Schemas
=======================
Admin-managed settings for each checkout payment option (eSewa, Khalti,
cards, ...). ``credentials_config`` never leaves the admin API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

GatewayEnvironment = Literal["test", "live"]


class PaymentGatewayCreate(BaseModel):
    gateway_key: str = Field(..., min_length=1, max_length=64, pattern=r"^[a-z0-9_]+$")
    display_name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    icon_name: Optional[str] = None
    is_enabled: bool = False
    is_domestic_only: bool = True
    is_international_only: bool = False
    credentials_config: Optional[dict[str, Any]] = None
    environment: GatewayEnvironment = "test"
    notes: Optional[str] = None
    display_order: int = 0


class PaymentGatewayUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: Optional[str] = None
    icon_name: Optional[str] = None
    is_enabled: Optional[bool] = None
    is_domestic_only: Optional[bool] = None
    is_international_only: Optional[bool] = None
    credentials_config: Optional[dict[str, Any]] = None
    environment: Optional[GatewayEnvironment] = None
    notes: Optional[str] = None
    display_order: Optional[int] = None


class PaymentGatewayPublic(BaseModel):
    gateway_key: str
    display_name: str
    description: Optional[str] = None
    icon_name: Optional[str] = None
    is_domestic_only: bool = True
    is_international_only: bool = False
    display_order: int = 0


class PaymentGatewayAdmin(PaymentGatewayPublic):
    is_enabled: bool = False
    credentials_config: Optional[dict[str, Any]] = None
    environment: GatewayEnvironment = "test"
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
