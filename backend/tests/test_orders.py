"""
Tests for the orders endpoints
==============================
Covers:
- POST /api/v1/orders: COD order saved with the token's user, card order
  stores only the last four digits, international destination, checkout
  errors surface as 400 with title/message/code, login required
- GET  /api/v1/account/orders: scoped to the current user
- PUT  /api/v1/admin/orders/{id}: invalid status, missing order, success

Run: pytest tests/test_orders.py -v
"""

from __future__ import annotations

import re
from unittest.mock import MagicMock, patch

AUTH = {"Authorization": "Bearer test-token"}


def _result(data) -> MagicMock:
    result = MagicMock()
    result.data = data
    return result


def _order_body(payment_method: str = "cod", **details) -> dict:
    shipping = {
        "full_name": "Pema Sherpa",
        "street_address": "Thamel Marg 12",
        "city": "Kathmandu",
        "country": "Nepal",
        "postal_code": "44600",
        "payment_method": payment_method,
    }
    shipping.update(details)
    return {
        "cart_items": [
            {"product_id": "p1", "name": "Everest Hoodie", "price": 2500, "quantity": 2},
        ],
        "shipping_details": shipping,
        "order_subtotal": 5000,
        "shipping_cost": 500,
        "order_total": 5500,
    }


def _order_row(**overrides) -> dict:
    row = {
        "id": "PP-ABC123DEF456",
        "user_id": "user-1",
        "items": [{"product_id": "p1", "name": "Everest Hoodie", "price": 2500, "quantity": 2}],
        "total_amount": 5500,
        "status": "Processing",
        "payment_method": "cod",
        "payment_status": "Pending",
    }
    row.update(overrides)
    return row


class TestPlaceOrder:

    def test_cod_order(self, client, as_customer):
        db = MagicMock()
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/orders", json=_order_body("cod"), headers=AUTH)

        assert resp.status_code == 201
        data = resp.json()
        assert data["title"] == "COD Order Placed"
        assert re.fullmatch(r"PP-[0-9A-F]{12}", data["order_id"])

        row = db.table.return_value.insert.call_args[0][0]
        assert row["id"] == data["order_id"]
        assert row["user_id"] == as_customer["id"]
        assert row["status"] == "Processing"
        assert row["payment_status"] == "Pending"
        assert row["currency"] == "NPR"
        assert row["shipping_address"]["country"] == "Nepal"

    def test_card_order_keeps_only_last4(self, client, as_customer):
        db = MagicMock()
        body = _order_body(
            "card_international",
            cardholder_name="Pema Sherpa",
            card_number="4242 4242 4242 4242",
            expiry_date="12/99",
            cvc="123",
        )
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/orders", json=body, headers=AUTH)

        assert resp.status_code == 201
        row = db.table.return_value.insert.call_args[0][0]
        assert row["payment_status"] == "Paid"
        assert row["card_last4"] == "4242"
        assert "4242 4242" not in str(row)
        assert "cvc" not in row

    def test_international_destination(self, client, as_customer):
        db = MagicMock()
        body = _order_body(
            "esewa",
            is_international=True,
            international_destination_country="Australia",
        )
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/orders", json=body, headers=AUTH)

        assert resp.status_code == 201
        assert resp.json()["title"] == "Order Pending Payment"
        row = db.table.return_value.insert.call_args[0][0]
        assert row["shipping_address"]["country"] == "Australia"
        assert row["status"] == "Pending"

    def test_checkout_error_is_400(self, client, as_customer):
        db = MagicMock()
        body = _order_body("card_international", card_number="1234", expiry_date="12/99", cvc="123")
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/orders", json=body, headers=AUTH)

        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["title"] == "Payment Failed"
        assert detail["code"] == "card_details_missing"
        db.table.return_value.insert.assert_not_called()

    def test_total_mismatch_is_400(self, client, as_customer):
        body = _order_body()
        body["order_total"] = 100
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=MagicMock()):
            resp = client.post("/api/v1/orders", json=body, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "total_mismatch"

    def test_login_required(self, client):
        resp = client.post("/api/v1/orders", json=_order_body())
        assert resp.status_code == 401


class TestMyOrders:

    def test_scoped_to_current_user(self, client, as_customer):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.order.return_value.execute.return_value = _result(
            [_order_row(user_id=as_customer["id"])]
        )
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.get("/api/v1/account/orders", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()[0]["id"] == "PP-ABC123DEF456"
        db.table.return_value.select.return_value.eq.assert_called_once_with("user_id", as_customer["id"])


class TestAdminStatus:

    def test_invalid_status(self, client, as_admin):
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=MagicMock()):
            resp = client.put("/api/v1/admin/orders/PP-1", json={"status": "Lost"}, headers=AUTH)

        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["code"] == "invalid_status"
        assert "Shipped" in detail["valid_statuses"]

    def test_missing_order(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.put("/api/v1/admin/orders/PP-1", json={"status": "Shipped"}, headers=AUTH)

        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "order_not_found"

    def test_shipped(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result(
            [_order_row(status="Shipped")]
        )
        with patch("peakpulse.routers.orders.get_supabase_admin_client", return_value=db):
            resp = client.put("/api/v1/admin/orders/PP-1", json={"status": "Shipped"}, headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["status"] == "Shipped"

    def test_customer_forbidden(self, client, as_customer):
        resp = client.put("/api/v1/admin/orders/PP-1", json={"status": "Shipped"}, headers=AUTH)
        assert resp.status_code == 403
