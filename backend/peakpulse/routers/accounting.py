"""
Accounting Router
=================
Admin only:
    GET    /api/v1/admin/loans
    POST   /api/v1/admin/loans
    PUT    /api/v1/admin/loans/{loan_id}
    DELETE /api/v1/admin/loans/{loan_id}
    POST   /api/v1/admin/loans/{loan_id}/analysis     Deterministic figures + AI outlook
    GET    /api/v1/admin/accounting/sales-data        Orders and revenue for a date range

The loan analysis always returns the deterministic pre-calculations. The
AI outlook is added on top when the feature flag is on and the call
succeeds; a failed call is logged and the response is still 200.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, status

from peakpulse.auth import require_admin
from peakpulse.config import get_settings
from peakpulse.db.supabase import get_supabase_admin_client, raise_for_db_error
from peakpulse.models.loan import (
    LoanAnalysisRequest,
    LoanAnalysisResponse,
    LoanCreate,
    LoanResponse,
    LoanUpdate,
    SalesDataResponse,
)
from peakpulse.services.loan_forecast import get_loan_advisor, precalculate
from peakpulse.services.sales_report import summarise_orders

logger = logging.getLogger(__name__)

admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "accounting"],
    dependencies=[Depends(require_admin)],
)

LOANS_TABLE = "loans"


def _loan_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": "Loan not found", "code": "loan_not_found"},
    )


# ---------------------------------------------------------------------------
# Loans
# ---------------------------------------------------------------------------

@admin_router.get("/loans", response_model=list[LoanResponse])
async def list_loans() -> list[LoanResponse]:
    db = get_supabase_admin_client()

    try:
        result = db.table(LOANS_TABLE).select("*").order("start_date", desc=True).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch loans")

    return [LoanResponse(**row) for row in result.data or []]


@admin_router.post("/loans", response_model=LoanResponse, status_code=status.HTTP_201_CREATED)
async def create_loan(body: LoanCreate) -> LoanResponse:
    db = get_supabase_admin_client()

    row = body.model_dump(mode="json")
    row["notes"] = (row.get("notes") or "").strip() or None

    try:
        result = db.table(LOANS_TABLE).insert(row).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="create loan")

    if not result.data:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Failed to save loan", "code": "db_error"},
        )

    logger.info("Created loan %s", result.data[0].get("id"))
    return LoanResponse(**result.data[0])


@admin_router.put("/loans/{loan_id}", response_model=LoanResponse)
async def update_loan(loan_id: str, body: LoanUpdate) -> LoanResponse:
    changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "No fields to update", "code": "empty_update"},
        )
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    db = get_supabase_admin_client()
    try:
        result = db.table(LOANS_TABLE).update(changes).eq("id", loan_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="update loan")

    if not result.data:
        raise _loan_not_found()

    return LoanResponse(**result.data[0])


@admin_router.delete("/loans/{loan_id}")
async def delete_loan(loan_id: str) -> dict:
    db = get_supabase_admin_client()

    try:
        db.table(LOANS_TABLE).delete().eq("id", loan_id).execute()
    except Exception as exc:
        raise_for_db_error(exc, action="delete loan")

    logger.info("Deleted loan %s", loan_id)
    return {"message": "Loan deleted successfully"}


@admin_router.post("/loans/{loan_id}/analysis", response_model=LoanAnalysisResponse)
async def analyse_loan(
    loan_id: str,
    body: LoanAnalysisRequest | None = None,
) -> LoanAnalysisResponse:
    db = get_supabase_admin_client()

    try:
        result = db.table(LOANS_TABLE).select("*").eq("id", loan_id).maybe_single().execute()
    except Exception as exc:
        raise_for_db_error(exc, action="fetch loan")

    if not result or not result.data:
        raise _loan_not_found()

    loan = LoanResponse(**result.data)
    figures = precalculate(loan)
    response = LoanAnalysisResponse(loan_id=loan.id, **figures)

    settings = get_settings()
    if not settings.enable_ai_loan_analysis:
        return response

    revenue = body.recent_sales_revenue_last_30_days if body else None
    advice = await get_loan_advisor().analyse(loan, figures, revenue)
    if advice is None:
        return response

    response.financial_outlook_summary = advice.financial_outlook_summary
    response.repayment_capacity_assessment = advice.repayment_capacity_assessment
    response.potential_risks_or_advice = advice.potential_risks_or_advice
    response.ai_generated = True
    return response


# ---------------------------------------------------------------------------
# Sales data
# ---------------------------------------------------------------------------

@admin_router.get("/accounting/sales-data", response_model=SalesDataResponse)
async def get_sales_data(
    start_date: date = Query(..., description="YYYY-MM-DD, inclusive"),
    end_date: date = Query(..., description="YYYY-MM-DD, inclusive"),
) -> SalesDataResponse:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": "end_date must not be before start_date", "code": "invalid_date_range"},
        )

    range_start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
    range_end = datetime.combine(end_date, time(23, 59, 59, 999000), tzinfo=timezone.utc)

    db = get_supabase_admin_client()
    try:
        result = (
            db.table("orders")
            .select("*")
            .gte("created_at", range_start.isoformat())
            .lte("created_at", range_end.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as exc:
        raise_for_db_error(exc, action="fetch sales data")

    orders = result.data or []
    summary = summarise_orders(orders)

    return SalesDataResponse(
        start_date=start_date,
        end_date=end_date,
        order_count=summary.order_count,
        gross_revenue=summary.gross_revenue,
        paid_revenue=summary.paid_revenue,
        daily=summary.daily,
        by_payment_method=summary.by_payment_method,
        orders=orders,
    )
