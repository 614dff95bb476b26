"""
Loan Forecast Service
=====================
Two halves:

1. Deterministic pre-calculations (``estimate_monthly_payment`` and
   ``next_payment_date``). These are always returned to the admin UI and
   are also handed to the model as context.
2. ``LoanAdvisorService`` asks Claude for a short financial outlook on a
   loan. It goes through ``services.claude`` like the other AI calls and
   returns None on any failure, so the analysis endpoint degrades to the
   deterministic numbers.

The monthly payment is a simple-interest approximation, not an amortised
EMI. It is there to give the outlook a scale, not to drive repayments.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from peakpulse.config import Settings, get_settings
from peakpulse.models.loan import LoanAdvice, LoanResponse
from peakpulse.services.claude import complete, parse_json_reply

logger = logging.getLogger(__name__)

TERM_ENDED = "Term likely ended"

# ---------------------------------------------------------------------------
# Deterministic calculations
# ---------------------------------------------------------------------------

def estimate_monthly_payment(principal: float, annual_rate: float, term_months: int) -> float:
    """Simple-interest monthly payment, rounded to a whole rupee."""
    if term_months <= 0:
        return float(round(principal))
    if annual_rate == 0:
        return float(round(principal / term_months))
    total_interest = principal * (annual_rate / 100) * (term_months / 12)
    return float(round((principal + total_interest) / term_months))


def next_payment_date(
    start: date,
    term_months: int,
    today: Optional[date] = None,
) -> str:
    """First monthly due date on or after today, or TERM_ENDED.

    Due dates fall on the start day of each following month (clamped to
    month end, so a loan started 31 Jan is next due 28/29 Feb).
    """
    today = today or date.today()
    step = 1
    candidate = start + relativedelta(months=step)
    while candidate < today and step < term_months:
        step += 1
        candidate = start + relativedelta(months=step)

    if candidate < today:
        return TERM_ENDED
    return candidate.isoformat()


def precalculate(loan: LoanResponse, today: Optional[date] = None) -> dict:
    """Deterministic figures for an Active loan; empty for any other status."""
    if loan.status != "Active":
        return {}
    return {
        "estimated_monthly_payment_npr": estimate_monthly_payment(
            loan.principal_amount, loan.interest_rate, loan.loan_term_months
        ),
        "estimated_next_payment_date": next_payment_date(
            loan.start_date, loan.loan_term_months, today
        ),
    }


# ---------------------------------------------------------------------------
# AI advisor
# ---------------------------------------------------------------------------

_SYSTEM_PROMPT = """\
You are a financial advisor for Peak Pulse, a Nepali clothing brand. You \
receive the details of one business loan and return a short analysis.

Rules:
- Return ONLY valid JSON with no markdown formatting, no backticks, no explanation.
- Amounts are in Nepali Rupees (NPR).
- If recent sales revenue is not given, say that repayment capacity cannot be \
assessed from sales.

Required JSON schema:
{
  "financial_outlook_summary": "<2-3 sentences>",
  "repayment_capacity_assessment": "<1-2 sentences>",
  "potential_risks_or_advice": [<2-3 short strings>]
}
"""


class LoanAdvisorService:
    """Generates a loan outlook via the Claude API."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    async def analyse(
        self,
        loan: LoanResponse,
        precalculated: dict,
        recent_sales_revenue: Optional[float] = None,
    ) -> Optional[LoanAdvice]:
        """Return the model's advice, or None if the call or parsing fails."""
        prompt = build_prompt(loan, precalculated, recent_sales_revenue)

        try:
            raw = await complete(self._settings, _SYSTEM_PROMPT, prompt)
        except Exception:
            logger.exception("Claude API call failed for loan %s", loan.id)
            return None

        try:
            return LoanAdvice(**parse_json_reply(raw))
        except Exception:
            logger.exception(
                "Failed to parse loan analysis response: %s",
                raw[:200] if raw else "empty",
            )
            return None


def build_prompt(
    loan: LoanResponse,
    precalculated: dict,
    recent_sales_revenue: Optional[float] = None,
) -> str:
    lines = [
        f"Today's date: {date.today().isoformat()}",
        f"Loan name: {loan.loan_name}",
        f"Lender: {loan.lender_name}",
        f"Principal: NPR {loan.principal_amount:.0f}",
        f"Annual interest rate: {loan.interest_rate}%",
        f"Term: {loan.loan_term_months} months",
        f"Start date: {loan.start_date.isoformat()}",
        f"Status: {loan.status}",
    ]
    if recent_sales_revenue is not None:
        lines.append(f"Sales revenue, last 30 days: NPR {recent_sales_revenue:.0f}")
    if precalculated:
        lines.append(
            "Estimated monthly payment: NPR "
            f"{precalculated['estimated_monthly_payment_npr']:.0f}"
        )
        lines.append(
            f"Estimated next payment date: {precalculated['estimated_next_payment_date']}"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_advisor: LoanAdvisorService | None = None


def get_loan_advisor() -> LoanAdvisorService:
    global _default_advisor
    if _default_advisor is None:
        _default_advisor = LoanAdvisorService()
    return _default_advisor
