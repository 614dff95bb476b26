"""
Shipping Estimator Service
==========================
Estimates the cost and delivery time for a standard ~1 kg parcel from
Kathmandu to an international destination, using the Claude API.

Unlike the loan outlook, a shipping estimate is a number the customer
pays, so there is no silent fallback: ``estimate`` raises
``ShippingEstimateError`` and the router answers 503.
"""

from __future__ import annotations

import logging

from peakpulse.config import Settings, get_settings
from peakpulse.models.shipping import ShippingEstimate
from peakpulse.services.claude import complete, parse_json_reply

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """\
You are a logistics coordinator specialising in international shipping from \
Kathmandu, Nepal. Estimate standard, cost-effective shipping (postal services \
or budget couriers) for one small package.

Rules:
- Return ONLY valid JSON with no markdown formatting, no backticks, no explanation.
- rate_npr is a number in Nepali Rupees.

Required JSON schema:
{
  "rate_npr": <number>,
  "estimated_delivery_time": "<e.g. 7-10 business days>",
  "disclaimer": "<optional short note>"
}
"""


class ShippingEstimateError(RuntimeError):
    """No usable estimate could be produced."""


class ShippingEstimatorService:

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    async def estimate(self, destination_country: str) -> ShippingEstimate:
        prompt = (
            "Ship a standard small package (about 1 kg, 30cm x 20cm x 10cm) "
            f"from Kathmandu, Nepal to {destination_country}. "
            "Give the estimated cost and delivery time."
        )

        try:
            raw = await complete(self._settings, _SYSTEM_PROMPT, prompt)
        except Exception as exc:
            logger.exception("Claude API call failed for shipping to %s", destination_country)
            raise ShippingEstimateError("Shipping estimate service unavailable") from exc

        try:
            return ShippingEstimate(**parse_json_reply(raw))
        except Exception as exc:
            logger.exception(
                "Failed to parse shipping estimate response: %s",
                raw[:200] if raw else "empty",
            )
            raise ShippingEstimateError("Shipping estimate was not understood") from exc


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_estimator: ShippingEstimatorService | None = None


def get_shipping_estimator() -> ShippingEstimatorService:
    global _default_estimator
    if _default_estimator is None:
        _default_estimator = ShippingEstimatorService()
    return _default_estimator
