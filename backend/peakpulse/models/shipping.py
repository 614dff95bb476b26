"""
Shipping Schemas
================
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ShippingEstimateRequest(BaseModel):
    destination_country: str = Field(default="", max_length=100)


class ShippingEstimate(BaseModel):
    """The model's reply, after coercion."""

    rate_npr: float = Field(..., ge=0, allow_inf_nan=False)
    estimated_delivery_time: str
    disclaimer: Optional[str] = None

    @field_validator("rate_npr", mode="before")
    @classmethod
    def _coerce_rate(cls, value):
        # Models sometimes quote numbers as strings ("3500" or "3,500")
        if isinstance(value, str):
            return float(value.replace(",", "").strip())
        return value


class ShippingEstimateResponse(ShippingEstimate):
    destination_country: str
    is_domestic: bool
    currency: str = "NPR"
