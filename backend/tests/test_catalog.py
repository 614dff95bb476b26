"""
Tests for the catalog endpoints
===============================
Covers:
- GET /api/v1/products: null arrays normalised, category slug filter,
  featured filter
- GET /api/v1/products/{slug}: 404 for unknown slug
- admin product create/update: slug generation, missing product
- admin category create: slug from name, duplicate slug

Run: pytest tests/test_catalog.py -v
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from postgrest.exceptions import APIError

AUTH = {"Authorization": "Bearer test-token"}


def _result(data) -> MagicMock:
    result = MagicMock()
    result.data = data
    return result


def _product(**overrides) -> dict:
    row = {
        "id": "prod-1",
        "name": "Everest Hoodie",
        "slug": "everest-hoodie",
        "price": 2500,
        "images": None,
        "variants": None,
        "categories": [{"id": "c1", "name": "Hoodies", "slug": "hoodies"}],
        "tags": None,
    }
    row.update(overrides)
    return row


class TestListProducts:

    def test_null_arrays_normalised(self, client):
        db = MagicMock()
        db.table.return_value.select.return_value.order.return_value.execute.return_value = _result([_product()])
        with patch("peakpulse.routers.catalog.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/products")

        assert resp.status_code == 200
        product = resp.json()[0]
        assert product["images"] == []
        assert product["variants"] == []
        assert product["tags"] == []

    def test_category_filter(self, client):
        db = MagicMock()
        db.table.return_value.select.return_value.order.return_value.execute.return_value = _result(
            [
                _product(),
                _product(id="prod-2", slug="dhaka-topi", categories=[{"id": "c2", "name": "Hats", "slug": "hats"}]),
            ]
        )
        with patch("peakpulse.routers.catalog.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/products", params={"category": "hats"})

        assert [p["id"] for p in resp.json()] == ["prod-2"]

    def test_featured_filter(self, client):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.order.return_value.execute.return_value = _result([])
        with patch("peakpulse.routers.catalog.get_supabase_client", return_value=db):
            client.get("/api/v1/products", params={"featured": "true"})

        db.table.return_value.select.return_value.eq.assert_called_once_with("is_featured", True)


class TestGetProduct:

    def test_unknown_slug(self, client):
        db = MagicMock()
        db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = None
        with patch("peakpulse.routers.catalog.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/products/no-such-thing")

        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "product_not_found"


class TestAdminProducts:

    def test_create_generates_slug(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.return_value = _result(
            [_product(name="Himalayan Breeze Jacket", slug="himalayan-breeze-jacket")]
        )
        with patch("peakpulse.routers.catalog.get_supabase_admin_client", return_value=db):
            resp = client.post(
                "/api/v1/admin/products",
                json={"name": "Himalayan Breeze Jacket", "price": 7800},
                headers=AUTH,
            )

        assert resp.status_code == 201
        row = db.table.return_value.insert.call_args[0][0]
        assert row["slug"] == "himalayan-breeze-jacket"

    def test_negative_price_rejected(self, client, as_admin):
        resp = client.post("/api/v1/admin/products", json={"name": "Bad", "price": -1}, headers=AUTH)
        assert resp.status_code == 422

    def test_rename_regenerates_slug(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result(
            [_product(name="Everest Zip Hoodie", slug="everest-zip-hoodie")]
        )
        with patch("peakpulse.routers.catalog.get_supabase_admin_client", return_value=db):
            resp = client.put("/api/v1/admin/products/prod-1", json={"name": "Everest Zip Hoodie"}, headers=AUTH)

        assert resp.status_code == 200
        assert db.table.return_value.update.call_args[0][0]["slug"] == "everest-zip-hoodie"

    def test_update_missing_product(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = _result([])
        with patch("peakpulse.routers.catalog.get_supabase_admin_client", return_value=db):
            resp = client.put("/api/v1/admin/products/ghost", json={"price": 100}, headers=AUTH)

        assert resp.status_code == 404


class TestAdminCategories:

    def test_duplicate_slug(self, client, as_admin):
        db = MagicMock()
        db.table.return_value.insert.return_value.execute.side_effect = APIError(
            {"code": "23505", "message": "duplicate key", "details": None, "hint": None}
        )
        with patch("peakpulse.routers.catalog.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/categories", json={"name": "Hoodies"}, headers=AUTH)

        assert resp.status_code == 409
        assert "hoodies" in resp.json()["detail"]["message"]
