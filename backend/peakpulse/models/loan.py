"""
Loan & Accounting Schemas
=========================
Business loans tracked in the back office, the AI-assisted loan
analysis, and the sales-data summary used by the accounting screens.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

LoanStatus = Literal["Active", "Paid Off", "Defaulted", "Pending"]


class LoanCreate(BaseModel):
    loan_name: str = Field(..., min_length=1, max_length=200)
    lender_name: str = Field(..., min_length=1, max_length=200)
    principal_amount: float = Field(..., gt=0)
    interest_rate: float = Field(..., ge=0, le=100, description="Annual rate in percent.")
    loan_term_months: int = Field(..., ge=1)
    start_date: date
    status: LoanStatus = "Active"
    notes: Optional[str] = None


class LoanUpdate(BaseModel):
    loan_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    lender_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    principal_amount: Optional[float] = Field(default=None, gt=0)
    interest_rate: Optional[float] = Field(default=None, ge=0, le=100)
    loan_term_months: Optional[int] = Field(default=None, ge=1)
    start_date: Optional[date] = None
    status: Optional[LoanStatus] = None
    notes: Optional[str] = None


class LoanResponse(BaseModel):
    id: str
    loan_name: str
    lender_name: str
    principal_amount: float
    interest_rate: float
    loan_term_months: int
    start_date: date
    status: LoanStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoanAnalysisRequest(BaseModel):
    recent_sales_revenue_last_30_days: Optional[float] = Field(default=None, ge=0)


class LoanAdvice(BaseModel):
    """The part of the analysis the model writes."""

    financial_outlook_summary: str
    repayment_capacity_assessment: Optional[str] = None
    potential_risks_or_advice: list[str] = Field(default_factory=list)


class LoanAnalysisResponse(BaseModel):
    loan_id: str
    estimated_next_payment_date: Optional[str] = Field(
        default=None,
        description="YYYY-MM-DD, or 'Term likely ended'. Only for Active loans.",
    )
    estimated_monthly_payment_npr: Optional[float] = None
    financial_outlook_summary: Optional[str] = None
    repayment_capacity_assessment: Optional[str] = None
    potential_risks_or_advice: list[str] = Field(default_factory=list)
    ai_generated: bool = False


class DailySales(BaseModel):
    day: str
    order_count: int
    gross_revenue: float
    paid_revenue: float


class PaymentMethodSales(BaseModel):
    payment_method: str
    order_count: int
    gross_revenue: float


class SalesDataResponse(BaseModel):
    start_date: date
    end_date: date
    order_count: int
    gross_revenue: float
    paid_revenue: float
    daily: list[DailySales] = Field(default_factory=list)
    by_payment_method: list[PaymentMethodSales] = Field(default_factory=list)
    orders: list[dict] = Field(default_factory=list)
