"""
Site Content Schemas
====================
Everything stored in the generic ``site_configurations`` table: the
homepage content config, free-form page content, general site settings,
the footer and the Our Story page. Each is a JSON blob under its own
``config_key``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Homepage
# ---------------------------------------------------------------------------

class HeroSlide(BaseModel):
    id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: str = ""
    image_url: Optional[str] = None
    video_id: Optional[str] = Field(
        default=None,
        description="11-character YouTube video ID. Takes precedence over image_url.",
    )
    audio_url: Optional[str] = None
    alt_text: Optional[str] = None
    data_ai_hint: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    duration: Optional[int] = Field(default=None, description="Milliseconds on screen.")
    display_order: Optional[int] = None
    youtube_author_name: Optional[str] = None
    youtube_author_link: Optional[str] = None
    is_promo: bool = False
    background_color: Optional[str] = None
    text_color: Optional[str] = None


class ArtisanalRootsSlide(BaseModel):
    id: Optional[str] = None
    image_url: str = ""
    alt_text: str = ""
    data_ai_hint: str = ""


class ArtisanalRoots(BaseModel):
    title: str = ""
    description: str = ""
    slides: list[ArtisanalRootsSlide] = Field(default_factory=list)


class SocialCommerceItem(BaseModel):
    id: Optional[str] = None
    image_url: str = ""
    link_url: str = "#"
    alt_text: str = ""
    data_ai_hint: str = ""
    display_order: int = 0


class PromotionalPostsSection(BaseModel):
    enabled: bool = False
    title: str = "Special Offers"
    max_items: int = Field(default=3, ge=1, le=20)


class HomepageContent(BaseModel):
    hero_slides: list[HeroSlide] = Field(default_factory=list)
    artisanal_roots: Optional[ArtisanalRoots] = None
    social_commerce_items: list[SocialCommerceItem] = Field(default_factory=list)
    promotional_posts_section: Optional[PromotionalPostsSection] = None
    hero_video_autoplay: bool = True


# ---------------------------------------------------------------------------
# Pages, settings, footer
# ---------------------------------------------------------------------------

class PageContent(BaseModel):
    content: str


class SocialLink(BaseModel):
    platform: str
    url: str


class SiteSettings(BaseModel):
    site_title: str
    site_description: str
    store_email: str
    store_phone: str
    store_address: str
    social_links: list[SocialLink] = Field(default_factory=list)


class SiteSettingsUpdate(BaseModel):
    site_title: Optional[str] = None
    site_description: Optional[str] = None
    store_email: Optional[str] = None
    store_phone: Optional[str] = None
    store_address: Optional[str] = None
    social_links: Optional[list[SocialLink]] = None


class FooterNavItem(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    href: Optional[str] = None


class FooterNavSection(BaseModel):
    id: Optional[str] = None
    label: Optional[str] = None
    items: list[FooterNavItem] = Field(default_factory=list)


class FooterContent(BaseModel):
    copyright_text: Optional[str] = None
    navigation_sections: list[FooterNavSection] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Our Story
# ---------------------------------------------------------------------------

class StoryHero(BaseModel):
    title: str
    description: str = ""


class StoryParagraphs(BaseModel):
    title: str
    paragraph1: str = ""
    paragraph2: str = ""


class StoryValues(BaseModel):
    title: str


class StoryJoinJourney(BaseModel):
    title: str
    description: str = ""


class OurStoryContent(BaseModel):
    """All five sections are required; a save replaces them wholesale."""

    hero: StoryHero
    mission: StoryParagraphs
    craftsmanship: StoryParagraphs
    values_section: StoryValues
    join_journey_section: StoryJoinJourney


class HomepageResponse(HomepageContent):
    """Normalised homepage config plus the carousel the storefront should play."""

    carousel: list[HeroSlide] = Field(default_factory=list)
