"""
Checkout Service
================
Pure validation and payment-method rules for order placement. No I/O:
the orders router calls ``plan_payment`` and persists what it returns.

Card payments are simulated. A card that passes the format checks is
treated as charged; nothing is sent to a processor and the full number
is never returned or logged.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

from peakpulse.models.order import CartItem, OrderCreate, ShippingDetails

AMOUNT_TOLERANCE = 0.01

EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/?([0-9]{2})$")
CVC_RE = re.compile(r"^\d{3,4}$")
_NON_DIGIT_RE = re.compile(r"\D")

DOMESTIC_DEFERRED_METHODS = frozenset(
    {"card_nepal", "esewa", "khalti", "imepay", "connectips", "qr", "banktransfer"}
)


class CheckoutError(ValueError):
    """A business-rule rejection. ``code`` goes into the API error body."""

    def __init__(self, message: str, code: str, title: str = "Order Error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.title = title


@dataclass
class PaymentPlan:
    title: str
    message: str
    order_status: str
    payment_status: str
    card_last4: Optional[str] = None


# ---------------------------------------------------------------------------
# Card checks
# ---------------------------------------------------------------------------

def luhn_check(number: str) -> bool:
    """Luhn checksum over the digits of ``number``; 13 to 19 digits required.

    Non-digits (spaces, dashes) are ignored.
    """
    digits = _NON_DIGIT_RE.sub("", number)
    if not 13 <= len(digits) <= 19:
        return False

    total = 0
    for index, char in enumerate(reversed(digits)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def parse_expiry(value: str) -> Optional[tuple[int, int]]:
    """Return (month, four-digit year) for MM/YY or MMYY, else None."""
    match = EXPIRY_RE.match(value.strip())
    if not match:
        return None
    return int(match.group(1)), 2000 + int(match.group(2))


def expiry_is_valid(value: str, today: Optional[date] = None) -> bool:
    """Well-formed and not in the past. Cards are good through the end of the month."""
    parsed = parse_expiry(value)
    if parsed is None:
        return False
    month, year = parsed
    today = today or date.today()
    return (year, month) >= (today.year, today.month)


def cvc_is_valid(value: str) -> bool:
    return bool(CVC_RE.match(value.strip()))


def card_last4(number: str) -> str:
    return _NON_DIGIT_RE.sub("", number)[-4:]


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------

def cart_subtotal(items: list[CartItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def validate_totals(order: OrderCreate) -> None:
    if not order.cart_items:
        raise CheckoutError("Cart is empty.", "empty_cart")

    expected_subtotal = cart_subtotal(order.cart_items)
    if abs(expected_subtotal - order.order_subtotal) > AMOUNT_TOLERANCE:
        raise CheckoutError(
            "Order subtotal does not match the cart items.", "subtotal_mismatch"
        )

    if abs(order.order_subtotal + order.shipping_cost - order.order_total) > AMOUNT_TOLERANCE:
        raise CheckoutError(
            "Order total does not equal subtotal plus shipping.", "total_mismatch"
        )


# ---------------------------------------------------------------------------
# Payment methods
# ---------------------------------------------------------------------------

def _validate_international_card(details: ShippingDetails, today: Optional[date]) -> str:
    if not (
        details.cardholder_name
        and details.card_number
        and details.expiry_date
        and details.cvc
    ):
        raise CheckoutError(
            "Missing international card details.", "card_details_missing", "Payment Failed"
        )
    if not luhn_check(details.card_number):
        raise CheckoutError(
            "Invalid credit card number (Luhn check failed).", "card_number_invalid", "Payment Failed"
        )
    if parse_expiry(details.expiry_date) is None:
        raise CheckoutError(
            "Invalid expiry date format. Use MM/YY.", "card_expiry_invalid", "Payment Failed"
        )
    if not expiry_is_valid(details.expiry_date, today):
        raise CheckoutError("Card has expired.", "card_expired", "Payment Failed")
    if not cvc_is_valid(details.cvc):
        raise CheckoutError("CVC must be 3 or 4 digits.", "card_cvc_invalid", "Payment Failed")
    return card_last4(details.card_number)


def plan_payment(
    order: OrderCreate,
    currency_symbol: str = "रू",
    today: Optional[date] = None,
) -> PaymentPlan:
    """Validate the order and decide the order and payment statuses.

    Raises CheckoutError on any rejection.
    """
    validate_totals(order)

    details = order.shipping_details
    method = details.payment_method
    message = (
        f"Order for {details.full_name} "
        f"(Total: {currency_symbol}{order.order_total:,.0f}) received."
    )

    if method == "cod":
        return PaymentPlan(
            title="COD Order Placed",
            message=message
            + " Payment: Cash on Delivery. Our team may contact you for"
            " confirmation regarding the 10% advance.",
            order_status="Processing",
            payment_status="Pending",
        )

    if method == "card_international":
        last4 = _validate_international_card(details, today)
        return PaymentPlan(
            title="International Order Placed",
            message=message
            + f" Payment: International Card (ending {last4})."
            f" Shipping fee: {currency_symbol}{order.shipping_cost:,.0f}.",
            order_status="Processing",
            payment_status="Paid",
            card_last4=last4,
        )

    if method in DOMESTIC_DEFERRED_METHODS:
        return PaymentPlan(
            title="Order Pending Payment",
            message=message
            + f" Payment: {method}. You will be prompted to complete your"
            f" payment via the {method} interface.",
            order_status="Pending",
            payment_status="Pending",
        )

    raise CheckoutError(
        "Invalid payment method selected.", "invalid_payment_method", "Payment Failed"
    )
