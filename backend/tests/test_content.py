"""
Tests for the site content endpoints
====================================
Covers:
- GET  /api/v1/content/homepage: defaults on an empty store, live
  promotions merged only when enabled, promotion failure tolerated
- POST /api/v1/admin/content/homepage: malformed video ids rejected,
  normalised blob upserted
- GET  /api/v1/content/pages/{key}: stored content and default text
- GET/POST footer: {currentYear} substitution, default ids and labels,
  malformed stored blob falls back to defaults
- GET/POST our-story: stored and default content, save merges over the
  stored blob, missing sections rejected
- GET/POST settings: merged over defaults, cleared social links stick,
  malformed stored blob falls back to defaults

Run: pytest tests/test_content.py -v
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from peakpulse.routers.content import DEFAULT_OUR_STORY, DEFAULT_SETTINGS

AUTH = {"Authorization": "Bearer test-token"}


def _config_db(value=None) -> MagicMock:
    """Supabase mock whose site_configurations lookup returns ``value``."""
    db = MagicMock()
    row = MagicMock()
    row.data = None if value is None else {"value": value}
    db.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = row
    return db


def _with_promotions(db: MagicMock, rows: list[dict]) -> MagicMock:
    promos = MagicMock()
    promos.data = rows
    (
        db.table.return_value.select.return_value.eq.return_value
        .order.return_value.order.return_value.execute.return_value
    ) = promos
    return db


def _upserted(db: MagicMock) -> dict:
    return db.table.return_value.upsert.call_args[0][0]


class TestHomepage:

    def test_empty_store_serves_fallback(self, client):
        db = _config_db(None)
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/homepage")

        assert resp.status_code == 200
        data = resp.json()
        assert data["hero_slides"] == []
        assert len(data["carousel"]) == 1
        assert data["carousel"][0]["id"] == "fallback-hero"

    def test_live_promotions_appended_when_enabled(self, client):
        db = _config_db(
            {
                "hero_slides": [{"title": "Everest Collection"}],
                "promotional_posts_section": {"enabled": True, "max_items": 3},
            }
        )
        _with_promotions(
            db,
            [
                {
                    "id": "p1",
                    "title": "Tihar Sale",
                    "slug": "tihar-sale",
                    "image_url": "https://cdn.example.com/tihar.jpg",
                    "is_active": True,
                    "display_order": None,
                },
                {
                    "id": "p2",
                    "title": "Expired",
                    "slug": "expired",
                    "image_url": "https://cdn.example.com/old.jpg",
                    "is_active": True,
                    "valid_until": "2020-01-01T00:00:00+00:00",
                },
            ],
        )
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/homepage")

        titles = [s["title"] for s in resp.json()["carousel"]]
        assert titles == ["Everest Collection", "Tihar Sale"]

    def test_promotion_failure_does_not_break_homepage(self, client):
        db = _config_db(
            {
                "hero_slides": [{"title": "Everest Collection"}],
                "promotional_posts_section": {"enabled": True},
            }
        )
        (
            db.table.return_value.select.return_value.eq.return_value
            .order.return_value.order.return_value.execute.side_effect
        ) = Exception("timeout")
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/homepage")

        assert resp.status_code == 200
        assert [s["title"] for s in resp.json()["carousel"]] == ["Everest Collection"]

    def test_invalid_video_id_rejected(self, client, as_admin):
        db = MagicMock()
        body = {"hero_slides": [{"title": "ok"}, {"title": "bad", "video_id": "not a video"}]}
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/content/homepage", json=body, headers=AUTH)

        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["code"] == "invalid_video_id"
        assert detail["slide_indexes"] == [1]
        db.table.return_value.upsert.assert_not_called()

    def test_save_stores_normalised_content(self, client, as_admin):
        db = MagicMock()
        body = {"hero_slides": [{"title": "Hero", "video_id": "dQw4w9WgXcQ", "image_url": ""}]}
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/content/homepage", json=body, headers=AUTH)

        assert resp.status_code == 200
        saved = _upserted(db)
        assert saved["config_key"] == "homepageContent"
        slide = saved["value"]["hero_slides"][0]
        assert slide["id"] == "hs-0"
        assert slide["image_url"] is None
        assert slide["duration"] == 7000

    def test_save_requires_admin(self, client, as_customer):
        resp = client.post("/api/v1/admin/content/homepage", json={}, headers=AUTH)
        assert resp.status_code == 403


class TestPages:

    def test_stored_content(self, client):
        db = _config_db({"content": "Returns accepted within 14 days."})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/pages/returnPolicy")

        assert resp.json() == {"content": "Returns accepted within 14 days."}

    def test_missing_page_gets_default(self, client):
        with patch("peakpulse.routers.content.get_supabase_client", return_value=_config_db(None)):
            resp = client.get("/api/v1/content/pages/faq")

        assert resp.status_code == 200
        assert resp.json()["content"] == "Default content for faq. Please edit."

    def test_save_page(self, client, as_admin):
        db = MagicMock()
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post(
                "/api/v1/admin/content/pages/faq",
                json={"content": "Q&A"},
                headers=AUTH,
            )

        assert resp.status_code == 200
        assert _upserted(db) == {"config_key": "pageContent_faq", "value": {"content": "Q&A"}}


class TestFooter:

    def test_year_substituted(self, client):
        db = _config_db({"copyright_text": "© {currentYear} Peak Pulse", "navigation_sections": []})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/footer")

        data = resp.json()
        assert data["copyright_text"] == f"© {datetime.now(timezone.utc).year} Peak Pulse"
        # Empty navigation falls back to the default sections
        assert [s["label"] for s in data["navigation_sections"]] == ["Company", "Support", "Legal"]

    def test_malformed_blob_serves_defaults(self, client):
        db = _config_db({"navigation_sections": "bad"})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/footer")

        assert resp.status_code == 200
        data = resp.json()
        assert data["copyright_text"].endswith("Peak Pulse. All rights reserved.")
        assert [s["label"] for s in data["navigation_sections"]] == ["Company", "Support", "Legal"]

    def test_save_fills_missing_ids_and_labels(self, client, as_admin):
        db = MagicMock()
        body = {
            "copyright_text": "",
            "navigation_sections": [{"items": [{"name": "Shipping"}, {}]}],
        }
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/content/footer", json=body, headers=AUTH)

        assert resp.status_code == 200
        saved = _upserted(db)["value"]
        assert saved["copyright_text"].startswith("© {currentYear}")
        section = saved["navigation_sections"][0]
        assert section["id"] == "section-0"
        assert section["label"] == "Unnamed Section"
        assert section["items"] == [
            {"id": "item-0-0", "name": "Shipping", "href": "#"},
            {"id": "item-0-1", "name": "Unnamed Link", "href": "#"},
        ]


_STORY = {
    "hero": {"title": "Born in Kathmandu", "description": "Two friends and a loom."},
    "mission": {"title": "Mission", "paragraph1": "Fair wages.", "paragraph2": "Honest cloth."},
    "craftsmanship": {"title": "Craft", "paragraph1": "Hand woven.", "paragraph2": ""},
    "values_section": {"title": "Values"},
    "join_journey_section": {"title": "Join us", "description": "Sign up below."},
}


class TestOurStory:

    def test_stored_content(self, client):
        db = _config_db(_STORY)
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/our-story")

        assert resp.status_code == 200
        assert resp.json()["hero"]["title"] == "Born in Kathmandu"
        db.table.return_value.select.return_value.eq.assert_called_with("config_key", "ourStoryContent")

    def test_missing_content_gets_default(self, client):
        with patch("peakpulse.routers.content.get_supabase_client", return_value=_config_db(None)):
            resp = client.get("/api/v1/content/our-story")

        assert resp.status_code == 200
        assert resp.json()["hero"]["title"] == DEFAULT_OUR_STORY.hero.title

    def test_malformed_blob_serves_defaults(self, client):
        db = _config_db({"hero": "Our Story"})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/content/our-story")

        assert resp.status_code == 200
        assert resp.json()["values_section"]["title"] == DEFAULT_OUR_STORY.values_section.title

    def test_save_merges_over_stored_blob(self, client, as_admin):
        db = _config_db({**_STORY, "legacy_banner": "keep me"})
        updated = {**_STORY, "values_section": {"title": "What we stand for"}}
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/content/our-story", json=updated, headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["message"] == "Our Story content updated successfully."
        saved = _upserted(db)
        assert saved["config_key"] == "ourStoryContent"
        assert saved["value"]["values_section"] == {"title": "What we stand for"}
        assert saved["value"]["legacy_banner"] == "keep me"

    def test_missing_section_rejected(self, client, as_admin):
        db = MagicMock()
        body = {k: v for k, v in _STORY.items() if k != "craftsmanship"}
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/content/our-story", json=body, headers=AUTH)

        assert resp.status_code == 422
        db.table.return_value.upsert.assert_not_called()

    def test_save_requires_admin(self, client, as_customer):
        resp = client.post("/api/v1/admin/content/our-story", json=_STORY, headers=AUTH)
        assert resp.status_code == 403


class TestSettings:

    def test_malformed_blob_serves_defaults(self, client):
        db = _config_db({"site_title": "Peak Pulse Nepal", "social_links": "oops"})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/settings")

        assert resp.status_code == 200
        assert resp.json()["site_title"] == DEFAULT_SETTINGS.site_title

    def test_stored_empty_social_links_kept(self, client):
        db = _config_db({"social_links": []})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/settings")

        assert resp.json()["social_links"] == []

    def test_save_can_clear_social_links(self, client, as_admin):
        db = MagicMock()
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post("/api/v1/admin/settings", json={"social_links": []}, headers=AUTH)

        assert resp.status_code == 200
        assert _upserted(db)["value"]["social_links"] == []

    def test_defaults_when_missing(self, client):
        with patch("peakpulse.routers.content.get_supabase_client", return_value=_config_db(None)):
            resp = client.get("/api/v1/settings")

        assert resp.json()["site_title"] == DEFAULT_SETTINGS.site_title

    def test_stored_values_override_defaults(self, client):
        db = _config_db({"site_title": "Peak Pulse Nepal", "store_phone": ""})
        with patch("peakpulse.routers.content.get_supabase_client", return_value=db):
            resp = client.get("/api/v1/settings")

        data = resp.json()
        assert data["site_title"] == "Peak Pulse Nepal"
        assert data["store_phone"] == DEFAULT_SETTINGS.store_phone

    def test_save_merges_over_defaults(self, client, as_admin):
        db = MagicMock()
        with patch("peakpulse.routers.content.get_supabase_admin_client", return_value=db):
            resp = client.post(
                "/api/v1/admin/settings",
                json={"store_email": "hello@peakpulse.com"},
                headers=AUTH,
            )

        assert resp.status_code == 200
        saved = _upserted(db)
        assert saved["config_key"] == "siteGeneralSettings"
        assert saved["value"]["store_email"] == "hello@peakpulse.com"
        assert saved["value"]["site_title"] == DEFAULT_SETTINGS.site_title
