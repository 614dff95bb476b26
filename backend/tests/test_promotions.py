"""
Tests for the promotional posts endpoints
=========================================
Covers:
- GET  /api/v1/promotional-posts: only live posts, null display_order
- POST /api/v1/admin/promotional-posts: slug from title, blank title,
  discount above price (400), duplicate slug
- PUT  /api/v1/admin/promotional-posts/{id}: empty body returns current
  row, blank title, discount check on full and one-sided changes,
  missing post
- admin routes refuse non-admins

Run: pytest tests/test_promotions.py -v
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from postgrest.exceptions import APIError

AUTH = {"Authorization": "Bearer test-token"}
ADMIN_URL = "/api/v1/admin/promotional-posts"


def _row(**overrides) -> dict:
    row = {
        "id": "promo-1",
        "title": "Dashain Sale",
        "slug": "dashain-sale",
        "image_url": "https://cdn.example.com/dashain.jpg",
        "is_active": True,
        "display_order": 1,
    }
    row.update(overrides)
    return row


def _result(data) -> MagicMock:
    result = MagicMock()
    result.data = data
    return result


class TestPublicList:

    def test_only_live_posts(self, client):
        db = MagicMock()
        (
            db.table.return_value.select.return_value.eq.return_value
            .order.return_value.order.return_value.execute.return_value
        ) = _result(
            [
                _row(display_order=None),
                _row(id="promo-2", slug="later", valid_from="2999-01-01T00:00:00Z"),
            ]
        )
        with patch("peakpulse.routers.promotions.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/promotional-posts")

        assert resp.status_code == 200
        data = resp.json()
        assert [p["id"] for p in data] == ["promo-1"]
        assert data[0]["display_order"] == 0
        db.table.return_value.select.return_value.eq.assert_called_with("is_active", True)


class TestCreate:

    def test_slug_generated_from_title(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.return_value = _result(
            [_row(title="Teej Special Offer", slug="teej-special-offer")]
        )
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.post(
                ADMIN_URL,
                json={
                    "title": " Teej Special Offer ",
                    "image_url": "https://cdn.example.com/teej.jpg",
                    "cta_text": "",
                },
                headers=AUTH,
            )

        assert resp.status_code == 201
        inserted = db.table.return_value.insert.call_args[0][0]
        assert inserted["title"] == "Teej Special Offer"
        assert inserted["slug"] == "teej-special-offer"
        assert inserted["cta_text"] is None

    def test_blank_title_rejected(self, client, as_admin):
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=MagicMock()):
            resp = client.post(ADMIN_URL, json={"title": "   ", "image_url": "x.jpg"}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "missing_fields"

    def test_discount_above_price_rejected(self, client, as_admin):
        resp = client.post(
            ADMIN_URL,
            json={"title": "Sale", "image_url": "x.jpg", "price": 1000, "discount_price": 1200},
            headers=AUTH,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "invalid_discount"

    def test_duplicate_slug_conflict(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"code": "23505", "message": "duplicate key", "details": None, "hint": None}
        )
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.post(ADMIN_URL, json={"title": "Sale", "image_url": "x.jpg"}, headers=AUTH)

        assert resp.status_code == 409
        assert "sale" in resp.json()["detail"]["message"]

    def test_customer_forbidden(self, client, as_customer):
        resp = client.post(ADMIN_URL, json={"title": "Sale", "image_url": "x.jpg"}, headers=AUTH)
        assert resp.status_code == 403


class TestUpdate:

    def test_empty_body_returns_current_row(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(_row())
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/promo-1", json={}, headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["slug"] == "dashain-sale"
        db.table.return_value.update.assert_not_called()

    def test_title_change_regenerates_slug(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result(
            [_row(title="Dashain Mega Sale", slug="dashain-mega-sale")]
        )
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/promo-1", json={"title": "Dashain Mega Sale"}, headers=AUTH)

        assert resp.status_code == 200
        changes = db.table.return_value.update.call_args[0][0]
        assert changes["slug"] == "dashain-mega-sale"
        assert "updated_at" in changes

    def test_blank_title_rejected(self, client, as_admin):
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=MagicMock()):
            resp = client.put(f"{ADMIN_URL}/promo-1", json={"title": ""}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "missing_fields"

    def test_discount_above_price_rejected(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(_row())
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(
                f"{ADMIN_URL}/promo-1",
                json={"price": 500, "discount_price": 900},
                headers=AUTH,
            )

        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "invalid_discount"
        db.table.return_value.update.assert_not_called()

    def test_discount_alone_checked_against_stored_price(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(_row(price=500))
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/promo-1", json={"discount_price": 900}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "invalid_discount"
        db.table.return_value.update.assert_not_called()

    def test_price_cut_below_stored_discount_rejected(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(_row(price=1000, discount_price=800))
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/promo-1", json={"price": 600}, headers=AUTH)

        assert resp.status_code == 400
        db.table.return_value.update.assert_not_called()

    def test_discount_within_stored_price_saved(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(_row(price=1000))
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result(
            [_row(price=1000, discount_price=800)]
        )
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/promo-1", json={"discount_price": 800}, headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["discount_price"] == 800

    def test_missing_post(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])
        with patch("peakpulse.routers.promotions.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/nope", json={"is_active": False}, headers=AUTH)

        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "promotion_not_found"
