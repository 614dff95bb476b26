"""
Homepage Content Service
========================
Turns the raw ``homepageContent`` JSON blob from ``site_configurations``
into the shape the storefront renders, and merges live promotional posts
into the hero carousel.

Normalisation rules (applied on every read, so hand-edited rows in the
database still render):
    - blank strings become None
    - slide duration under 1s (or missing) falls back to 7s
    - missing display_order becomes index * 10, missing ids get stable defaults
    - slides are sorted by display_order
    - an empty carousel falls back to a single default slide

The carousel playback itself (autoplay, mute, YouTube player state) is
owned by the client; this module only decides *what* is in it.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from peakpulse.models.content import (
    ArtisanalRoots,
    ArtisanalRootsSlide,
    HeroSlide,
    HomepageContent,
    PromotionalPostsSection,
    SocialCommerceItem,
)
from peakpulse.models.promotion import PromotionalPostResponse
from peakpulse.services.text import blank_to_none

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HOMEPAGE_CONFIG_KEY = "homepageContent"

DEFAULT_SLIDE_DURATION_MS = 7000
MIN_SLIDE_DURATION_MS = 1000
MAX_PROMOTIONAL_ITEMS = 20

YOUTUBE_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

FALLBACK_HERO_SLIDE = HeroSlide(
    id="fallback-hero",
    title="Peak Pulse",
    description="Discover unique apparel where Nepali heritage meets contemporary design.",
    image_url="https://placehold.co/1920x1080.png",
    alt_text="Peak Pulse hero image",
    data_ai_hint="fashion model",
    cta_text="Explore Collections",
    cta_link="/products",
    duration=DEFAULT_SLIDE_DURATION_MS,
    display_order=0,
)

DEFAULT_ARTISANAL_ROOTS = ArtisanalRoots(
    title="Our Artisanal Roots",
    description="Every piece is made with Nepali craftsmanship passed down through generations.",
)

_SLIDE_TEXT_FIELDS = (
    "image_url",
    "video_id",
    "audio_url",
    "youtube_author_name",
    "youtube_author_link",
)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def is_valid_youtube_id(video_id: Optional[str]) -> bool:
    return bool(video_id) and bool(YOUTUBE_VIDEO_ID_RE.match(video_id))


def invalid_video_slides(content: HomepageContent) -> list[int]:
    """Return indexes of hero slides whose non-blank video_id is malformed."""
    bad = []
    for index, slide in enumerate(content.hero_slides):
        video_id = blank_to_none(slide.video_id)
        if video_id and not is_valid_youtube_id(video_id):
            bad.append(index)
    return bad


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def _normalise_duration(value: Any) -> int:
    try:
        duration = int(value)
    except (TypeError, ValueError):
        return DEFAULT_SLIDE_DURATION_MS
    if duration < MIN_SLIDE_DURATION_MS:
        return DEFAULT_SLIDE_DURATION_MS
    return duration


def _normalise_hero_slides(raw_slides: Any) -> list[HeroSlide]:
    if not isinstance(raw_slides, list):
        return []

    slides = []
    for index, raw in enumerate(raw_slides):
        if not isinstance(raw, dict):
            continue
        data = dict(raw)
        for field in _SLIDE_TEXT_FIELDS:
            data[field] = blank_to_none(data.get(field))
        data["id"] = data.get("id") or f"hs-{index}"
        data["title"] = data.get("title") or FALLBACK_HERO_SLIDE.title
        data["duration"] = _normalise_duration(data.get("duration"))
        if data.get("display_order") is None:
            data["display_order"] = index * 10
        slides.append(HeroSlide(**data))

    return sorted(slides, key=lambda s: s.display_order or 0)


def _clamp_max_items(value, default: int) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        return default
    if count < 1:
        return default
    return min(count, MAX_PROMOTIONAL_ITEMS)


def normalise_homepage(raw: Optional[dict]) -> HomepageContent:
    """Build a fully-populated HomepageContent from a stored (possibly partial) blob."""
    raw = raw if isinstance(raw, dict) else {}

    raw_roots = raw.get("artisanal_roots") or {}
    raw_roots_slides = raw_roots.get("slides") if isinstance(raw_roots.get("slides"), list) else []
    artisanal_roots = ArtisanalRoots(
        title=raw_roots.get("title") or DEFAULT_ARTISANAL_ROOTS.title,
        description=raw_roots.get("description") or DEFAULT_ARTISANAL_ROOTS.description,
        slides=[
            ArtisanalRootsSlide(
                id=slide.get("id") or f"ars-{index}",
                image_url=slide.get("image_url") or "",
                alt_text=slide.get("alt_text") or "",
                data_ai_hint=slide.get("data_ai_hint") or "",
            )
            for index, slide in enumerate(raw_roots_slides)
            if isinstance(slide, dict)
        ],
    )

    raw_items = raw.get("social_commerce_items")
    social_items = [
        SocialCommerceItem(
            id=item.get("id") or f"scs-{index}",
            image_url=item.get("image_url") or "",
            link_url=item.get("link_url") or "#",
            alt_text=item.get("alt_text") or "",
            data_ai_hint=item.get("data_ai_hint") or "",
            display_order=item.get("display_order") or 0,
        )
        for index, item in enumerate(raw_items if isinstance(raw_items, list) else [])
        if isinstance(item, dict)
    ]
    social_items.sort(key=lambda i: i.display_order)

    raw_section = raw.get("promotional_posts_section")
    if not isinstance(raw_section, dict):
        raw_section = {}
    defaults = PromotionalPostsSection()
    section = PromotionalPostsSection(
        enabled=bool(raw_section.get("enabled", defaults.enabled)),
        title=raw_section.get("title") or defaults.title,
        max_items=_clamp_max_items(raw_section.get("max_items"), defaults.max_items),
    )

    return HomepageContent(
        hero_slides=_normalise_hero_slides(raw.get("hero_slides")),
        artisanal_roots=artisanal_roots,
        social_commerce_items=social_items,
        promotional_posts_section=section,
        hero_video_autoplay=raw.get("hero_video_autoplay", True) is not False,
    )


# ---------------------------------------------------------------------------
# Promotions
# ---------------------------------------------------------------------------

def promotion_is_live(post: PromotionalPostResponse, now: Optional[datetime] = None) -> bool:
    """True when the post is active and ``now`` falls inside its validity window."""
    if not post.is_active:
        return False
    now = now or datetime.now(timezone.utc)
    if post.valid_from and _aware(post.valid_from) > now:
        return False
    if post.valid_until and _aware(post.valid_until) < now:
        return False
    return True


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def promo_to_slide(post: PromotionalPostResponse, order_offset: int, index: int) -> HeroSlide:
    return HeroSlide(
        id=post.id or f"promo-slide-{index}",
        title=post.title,
        description=post.description or "",
        image_url=post.image_url,
        alt_text=post.image_alt_text or post.title,
        data_ai_hint=post.data_ai_hint or "promotion offer sale",
        cta_text=post.cta_text or "Learn More",
        cta_link=post.cta_link or f"/products?promo={post.slug}",
        duration=DEFAULT_SLIDE_DURATION_MS,
        display_order=order_offset + (post.display_order or index * 10),
        is_promo=True,
        background_color=post.background_color,
        text_color=post.text_color,
    )


def build_carousel(
    content: HomepageContent,
    promotions: Iterable[PromotionalPostResponse],
) -> list[HeroSlide]:
    """Combine configured hero slides with promotional slides.

    Promotions are appended after the configured slides (their order is
    offset by ``len(base) * 10``) and capped at the section's max_items.
    """
    base = sorted(content.hero_slides, key=lambda s: s.display_order or 0)
    section = content.promotional_posts_section or PromotionalPostsSection()

    promo_slides: list[HeroSlide] = []
    if section.enabled:
        picked = list(promotions)[: section.max_items]
        picked.sort(key=lambda p: p.display_order or 0)
        offset = len(base) * 10
        promo_slides = [
            promo_to_slide(post, offset, index) for index, post in enumerate(picked)
        ]

    slides = base + promo_slides
    if not slides:
        return [FALLBACK_HERO_SLIDE]
    return slides
