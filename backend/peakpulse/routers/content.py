"""
Site Content Router
===================
Public:
    GET /api/v1/content/homepage              Homepage config + combined hero carousel
    GET /api/v1/content/pages/{page_key}      Free-form page content (legal, FAQ, ...)
    GET /api/v1/content/footer                Footer navigation and copyright
    GET /api/v1/content/our-story             Our Story page sections
    GET /api/v1/settings                      General site settings

Admin:
    POST /api/v1/admin/content/homepage
    POST /api/v1/admin/content/pages/{page_key}
    POST /api/v1/admin/content/footer
    POST /api/v1/admin/content/our-story
    GET  /api/v1/admin/settings
    POST /api/v1/admin/settings

Every document lives in ``site_configurations`` under its own key. Reads
always return something renderable: a missing row yields defaults rather
than a 404, so a fresh database still serves a working storefront.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError

from peakpulse.auth import require_admin
from peakpulse.db.supabase import (
    get_supabase_admin_client,
    get_supabase_client,
    raise_for_db_error,
)
from peakpulse.models.content import (
    FooterContent,
    FooterNavItem,
    FooterNavSection,
    HomepageContent,
    HomepageResponse,
    OurStoryContent,
    PageContent,
    SiteSettings,
    SiteSettingsUpdate,
    SocialLink,
    StoryHero,
    StoryJoinJourney,
    StoryParagraphs,
    StoryValues,
)
from peakpulse.routers.promotions import fetch_live_promotions
from peakpulse.services.homepage import (
    HOMEPAGE_CONFIG_KEY,
    build_carousel,
    invalid_video_slides,
    normalise_homepage,
)
from peakpulse.services.site_config import read_config, write_config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["content"])
admin_router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin", "content"],
    dependencies=[Depends(require_admin)],
)

# ---------------------------------------------------------------------------
# Config keys and defaults
# ---------------------------------------------------------------------------

PAGE_CONFIG_PREFIX = "pageContent_"
SETTINGS_CONFIG_KEY = "siteGeneralSettings"
FOOTER_CONFIG_KEY = "footerContent"
OUR_STORY_CONFIG_KEY = "ourStoryContent"

DEFAULT_SETTINGS = SiteSettings(
    site_title="Peak Pulse",
    site_description=(
        "Discover Peak Pulse, a Nepali clothing brand blending traditional "
        "craftsmanship with contemporary streetwear."
    ),
    store_email="info@peakpulse.com",
    store_phone="+977-1-0000000",
    store_address="Kathmandu, Nepal",
    social_links=[SocialLink(platform="Instagram", url="https://instagram.com/peakpulse")],
)

DEFAULT_FOOTER = FooterContent(
    copyright_text="© {currentYear} Peak Pulse. All rights reserved.",
    navigation_sections=[
        FooterNavSection(
            id="company-default",
            label="Company",
            items=[FooterNavItem(id="os", name="Our Story", href="/our-story")],
        ),
        FooterNavSection(
            id="support-default",
            label="Support",
            items=[FooterNavItem(id="cu", name="Contact Us", href="/contact")],
        ),
        FooterNavSection(
            id="legal-default",
            label="Legal",
            items=[FooterNavItem(id="pp", name="Privacy Policy", href="/privacy-policy")],
        ),
    ],
)


DEFAULT_OUR_STORY = OurStoryContent(
    hero=StoryHero(
        title="Our Story",
        description="Where Himalayan craft meets the street.",
    ),
    mission=StoryParagraphs(
        title="Our Mission",
        paragraph1="We work with Nepali artisans to bring traditional techniques into modern streetwear.",
    ),
    craftsmanship=StoryParagraphs(
        title="Craftsmanship",
        paragraph1="Every piece is made in small batches in the Kathmandu valley.",
    ),
    values_section=StoryValues(title="Our Values"),
    join_journey_section=StoryJoinJourney(
        title="Join the Journey",
        description="Follow us for new drops and the stories behind them.",
    ),
)


def _page_config_key(page_key: str) -> str:
    return f"{PAGE_CONFIG_PREFIX}{page_key}"


# ---------------------------------------------------------------------------
# Homepage
# ---------------------------------------------------------------------------

@router.get(
    "/content/homepage",
    response_model=HomepageResponse,
    summary="Get homepage content",
    description=(
        "Returns the normalised homepage configuration (hero slides, artisanal "
        "roots, social commerce grid) and the combined hero carousel, with live "
        "promotional posts appended when the promotions section is enabled."
    ),
)
async def get_homepage_content() -> HomepageResponse:
    db = get_supabase_client()

    try:
        raw = read_config(db, HOMEPAGE_CONFIG_KEY)
    except Exception as exc:
        raise_for_db_error(exc, action="fetch homepage content")

    content = normalise_homepage(raw)

    promotions = []
    if content.promotional_posts_section and content.promotional_posts_section.enabled:
        try:
            promotions = fetch_live_promotions(db)
        except Exception:
            # Promotions are decoration; the homepage renders without them.
            logger.exception("Failed to load promotional posts for homepage carousel")

    return HomepageResponse(
        **content.model_dump(),
        carousel=build_carousel(content, promotions),
    )


@admin_router.post("/content/homepage", summary="Replace homepage content")
async def update_homepage_content(body: HomepageContent) -> dict:
    bad_slides = invalid_video_slides(body)
    if bad_slides:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "message": "Invalid YouTube video ID format for hero slide(s).",
                "code": "invalid_video_id",
                "slide_indexes": bad_slides,
            },
        )

    db = get_supabase_admin_client()

    # Normalise before storing so the saved blob is already canonical.
    normalised = normalise_homepage(body.model_dump(mode="json"))

    try:
        write_config(db, HOMEPAGE_CONFIG_KEY, normalised.model_dump(mode="json"))
    except Exception as exc:
        raise_for_db_error(exc, action="update homepage content")

    return {"message": "Homepage content updated successfully."}


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

@router.get("/content/pages/{page_key}", response_model=PageContent)
async def get_page_content(page_key: str) -> PageContent:
    db = get_supabase_client()

    try:
        value = read_config(db, _page_config_key(page_key))
    except Exception as exc:
        raise_for_db_error(exc, action=f"fetch content for {page_key}")

    if isinstance(value, dict) and isinstance(value.get("content"), str):
        return PageContent(content=value["content"])

    return PageContent(content=f"Default content for {page_key}. Please edit.")


@admin_router.post("/content/pages/{page_key}")
async def update_page_content(page_key: str, body: PageContent) -> dict:
    db = get_supabase_admin_client()

    try:
        write_config(db, _page_config_key(page_key), {"content": body.content})
    except Exception as exc:
        raise_for_db_error(exc, action=f"update content for {page_key}")

    return {"message": f"{page_key} content updated successfully."}


# ---------------------------------------------------------------------------
# Footer
# ---------------------------------------------------------------------------

def _render_copyright(text: str) -> str:
    return text.replace("{currentYear}", str(datetime.now(timezone.utc).year))


@router.get("/content/footer", response_model=FooterContent)
async def get_footer_content() -> FooterContent:
    db = get_supabase_client()

    try:
        value = read_config(db, FOOTER_CONFIG_KEY)
    except Exception as exc:
        raise_for_db_error(exc, action="fetch footer content")

    stored = FooterContent()
    if isinstance(value, dict):
        try:
            stored = FooterContent(**value)
        except ValidationError:
            logger.warning("Stored footer content is malformed; serving defaults")
    footer = FooterContent(
        copyright_text=stored.copyright_text or DEFAULT_FOOTER.copyright_text,
        navigation_sections=stored.navigation_sections or DEFAULT_FOOTER.navigation_sections,
    )
    footer.copyright_text = _render_copyright(footer.copyright_text or "")
    return footer


@admin_router.post("/content/footer")
async def update_footer_content(body: FooterContent) -> dict:
    sections = []
    for s_index, section in enumerate(body.navigation_sections):
        items = [
            FooterNavItem(
                id=item.id or f"item-{s_index}-{i_index}",
                name=item.name or "Unnamed Link",
                href=item.href or "#",
            )
            for i_index, item in enumerate(section.items)
        ]
        sections.append(
            FooterNavSection(
                id=section.id or f"section-{s_index}",
                label=section.label or "Unnamed Section",
                items=items,
            )
        )

    footer = FooterContent(
        copyright_text=body.copyright_text or DEFAULT_FOOTER.copyright_text,
        navigation_sections=sections,
    )

    db = get_supabase_admin_client()
    try:
        write_config(db, FOOTER_CONFIG_KEY, footer.model_dump(mode="json"))
    except Exception as exc:
        raise_for_db_error(exc, action="update footer content")

    return {"message": "Footer content updated successfully."}


# ---------------------------------------------------------------------------
# Our Story
# ---------------------------------------------------------------------------

@router.get("/content/our-story", response_model=OurStoryContent)
async def get_our_story_content() -> OurStoryContent:
    db = get_supabase_client()

    try:
        value = read_config(db, OUR_STORY_CONFIG_KEY)
    except Exception as exc:
        raise_for_db_error(exc, action="fetch Our Story content")

    if not isinstance(value, dict):
        return DEFAULT_OUR_STORY
    try:
        return OurStoryContent(**value)
    except ValidationError:
        logger.warning("Stored Our Story content is malformed; serving defaults")
        return DEFAULT_OUR_STORY


@admin_router.post("/content/our-story")
async def update_our_story_content(body: OurStoryContent) -> dict:
    db = get_supabase_admin_client()

    try:
        current = read_config(db, OUR_STORY_CONFIG_KEY)
        merged = {
            **(current if isinstance(current, dict) else {}),
            **body.model_dump(mode="json"),
        }
        write_config(db, OUR_STORY_CONFIG_KEY, merged)
    except Exception as exc:
        raise_for_db_error(exc, action="update Our Story content")

    return {"message": "Our Story content updated successfully."}


# ---------------------------------------------------------------------------
# Site settings
# ---------------------------------------------------------------------------

def _provided(values: dict) -> dict:
    """Drop unset values and blank strings. Empty lists are kept so that
    clearing ``social_links`` sticks."""
    return {
        k: v
        for k, v in values.items()
        if v is not None and not (isinstance(v, str) and not v.strip())
    }


def _load_settings(db) -> SiteSettings:
    value = read_config(db, SETTINGS_CONFIG_KEY)
    if not isinstance(value, dict):
        return DEFAULT_SETTINGS
    merged = {**DEFAULT_SETTINGS.model_dump(), **_provided(value)}
    try:
        return SiteSettings(**merged)
    except ValidationError:
        logger.warning("Stored site settings are malformed; serving defaults")
        return DEFAULT_SETTINGS


@router.get("/settings", response_model=SiteSettings)
async def get_site_settings() -> SiteSettings:
    db = get_supabase_client()
    try:
        return _load_settings(db)
    except Exception as exc:
        raise_for_db_error(exc, action="fetch site settings")


@admin_router.get("/settings", response_model=SiteSettings)
async def admin_get_site_settings() -> SiteSettings:
    db = get_supabase_admin_client()
    try:
        return _load_settings(db)
    except Exception as exc:
        raise_for_db_error(exc, action="fetch site settings")


@admin_router.post("/settings")
async def update_site_settings(body: SiteSettingsUpdate) -> dict:
    provided = _provided(body.model_dump())
    settings = SiteSettings(**{**DEFAULT_SETTINGS.model_dump(), **provided})

    db = get_supabase_admin_client()
    try:
        write_config(db, SETTINGS_CONFIG_KEY, settings.model_dump(mode="json"))
    except Exception as exc:
        raise_for_db_error(exc, action="update site settings")

    return {"message": "Site settings updated successfully."}
