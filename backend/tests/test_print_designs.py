"""
Tests for print-on-demand designs
=================================
Covers:
- admin list: newest first, collaboration join flattened
- admin create: slug from title, is_for_sale default, blank optional
  text cleared, price required, duplicate slug
- admin update: blank title rejected, title change regenerates slug,
  null price rejected, missing design
- admin delete
- admin routes refuse non-admins

Run: pytest tests/test_print_designs.py -v
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from postgrest.exceptions import APIError

AUTH = {"Authorization": "Bearer test-token"}
ADMIN_URL = "/api/v1/admin/print-on-demand-designs"


def _result(data) -> MagicMock:
    result = MagicMock()
    result.data = data
    return result


def _design_row(**overrides) -> dict:
    row = {
        "id": "d1",
        "title": "Everest Sunrise",
        "slug": "everest-sunrise",
        "image_url": "https://cdn.example.com/everest.png",
        "price": 2500,
        "is_for_sale": True,
        "collaboration_id": "g1",
        "collaboration": {"title": "Thangka Meets Streetwear"},
    }
    row.update(overrides)
    return row


def _with_single(db: MagicMock, row) -> MagicMock:
    db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = _result(row)
    return db


class TestList:

    def test_newest_first_with_collaboration_title(self, client, as_admin):
        db = MagicMock()
        ordered = db.table.return_value.select.return_value.order
        ordered.return_value.execute.return_value = _result(
            [_design_row(), _design_row(id="d2", collaboration=None, is_for_sale=None)]
        )
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.get(ADMIN_URL, headers=AUTH)

        assert resp.status_code == 200
        first, second = resp.json()
        assert first["collaboration_title"] == "Thangka Meets Streetwear"
        assert second["collaboration_title"] is None
        assert second["is_for_sale"] is True
        db.table.assert_called_with("print_on_demand_designs")
        db.table.return_value.select.assert_called_once_with(
            "*, collaboration:design_collaborations(title)"
        )
        ordered.assert_called_once_with("created_at", desc=True)

    def test_customer_forbidden(self, client, as_customer):
        resp = client.get(ADMIN_URL, headers=AUTH)
        assert resp.status_code == 403


class TestCreate:

    def test_slug_generated_and_defaults_applied(self, client, as_admin):
        db = _with_single(MagicMock(), _design_row())
        db.table.return_value.insert.return_value.execute.return_value = _result([{"id": "d1"}])
        body = {
            "title": "Everest Sunrise",
            "image_url": "https://cdn.example.com/everest.png",
            "price": 2500,
            "description": "  ",
            "collaboration_id": "g1",
        }
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.post(ADMIN_URL, json=body, headers=AUTH)

        assert resp.status_code == 201
        assert resp.json()["collaboration_title"] == "Thangka Meets Streetwear"
        row = db.table.return_value.insert.call_args[0][0]
        assert row["slug"] == "everest-sunrise"
        assert row["is_for_sale"] is True
        assert row["description"] is None
        assert row["sku"] is None

    def test_price_required(self, client, as_admin):
        resp = client.post(
            ADMIN_URL,
            json={"title": "Everest Sunrise", "image_url": "x.png"},
            headers=AUTH,
        )
        assert resp.status_code == 422

    def test_blank_title_rejected(self, client, as_admin):
        resp = client.post(
            ADMIN_URL,
            json={"title": "   ", "image_url": "x.png", "price": 100},
            headers=AUTH,
        )
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "missing_fields"

    def test_duplicate_slug_conflict(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"code": "23505", "message": "duplicate key", "details": None, "hint": None}
        )
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.post(
                ADMIN_URL,
                json={"title": "Everest Sunrise", "image_url": "x.png", "price": 100},
                headers=AUTH,
            )

        assert resp.status_code == 409
        assert "everest-sunrise" in resp.json()["detail"]["message"]


class TestUpdate:

    def test_title_change_regenerates_slug(self, client, as_admin):
        db = _with_single(MagicMock(), _design_row(title="Everest Dusk", slug="everest-dusk"))
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result(
            [{"id": "d1"}]
        )
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/d1", json={"title": "Everest Dusk", "sku": ""}, headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["slug"] == "everest-dusk"
        changes = db.table.return_value.update.call_args[0][0]
        assert changes["slug"] == "everest-dusk"
        assert changes["sku"] is None
        assert "updated_at" in changes

    def test_blank_title_rejected(self, client, as_admin):
        db = MagicMock()
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/d1", json={"title": ""}, headers=AUTH)

        assert resp.status_code == 400
        db.table.return_value.update.assert_not_called()

    def test_null_price_rejected(self, client, as_admin):
        db = MagicMock()
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/d1", json={"price": None}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "missing_fields"

    def test_missing_design(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.put(f"{ADMIN_URL}/nope", json={"is_for_sale": False}, headers=AUTH)

        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "design_not_found"


class TestDelete:

    def test_delete(self, client, as_admin):
        db = MagicMock()
        with patch("peakpulse.routers.print_designs.get_supabase_admin_client", return_value=db):
            resp = client.delete(f"{ADMIN_URL}/d1", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["message"] == "Print design deleted successfully"
        db.table.return_value.delete.return_value.eq.assert_called_once_with("id", "d1")
