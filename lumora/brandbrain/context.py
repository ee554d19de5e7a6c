"""
Brand brain context: the plain-text summary of a brand that grounds chat.

The summary is assembled from the brand row, its heaviest topics and its
latest content items. Vector insights are looked up separately with
get_brand_insights, keyed on the text the team is asking about.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from lumora.brandbrain.retrieval import BrandVectorMatch, search_brand_vectors
from lumora.core.models import Brand, ContentItem, Topic
from lumora.integrations.deepseek import generate_embedding

logger = logging.getLogger(__name__)

MAX_CONTEXT_TOPICS = 20
MAX_CONTEXT_CONTENT = 10
SUMMARY_TOPICS = 5
SUMMARY_CONTENT = 3


@dataclass
class BrandBrainContext:
    brand: Brand | None
    topics: list[Topic] = field(default_factory=list)
    recent_content: list[ContentItem] = field(default_factory=list)
    summary: str = ""
    vectors: list[BrandVectorMatch] = field(default_factory=list)


def _list_line(label: str, values: Sequence[str] | None) -> str:
    if not values:
        return ""
    return f"{label}: {', '.join(values)}"


def _format_date(value) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def build_context_summary(
    brand: Brand | None,
    topics: Sequence[Topic],
    recent_content: Sequence[ContentItem],
) -> str:
    pieces: list[str] = []

    if brand is not None:
        pieces.append(f"Brand name: {brand.name}")
        if brand.mission:
            pieces.append(f"Mission: {brand.mission}")
        if brand.voice_tone:
            pieces.append(f"Voice: {brand.voice_tone}")
        if brand.target_audience:
            pieces.append(f"Audience: {brand.target_audience}")
        if brand.visual_lexicon:
            pieces.append(f"Visual lexicon: {brand.visual_lexicon}")
        pieces.append(_list_line("Do", brand.dos))
        pieces.append(_list_line("Don't", brand.donts))
        pieces.append(_list_line("Proof points", brand.proof_points))
        pieces.append(_list_line("CTA library", brand.cta_library))

    if topics:
        top = "; ".join(
            f"{topic.label} (weight {topic.weight})" for topic in topics[:SUMMARY_TOPICS]
        )
        pieces.append(f"Top topics: {top}")

    if recent_content:
        items = " | ".join(
            f"{_format_date(item.date_target)} • {item.platform} • {item.status}"
            for item in recent_content[:SUMMARY_CONTENT]
        )
        pieces.append(f"Recent content: {items}")

    return "\n".join(piece for piece in pieces if piece)


def get_brand_brain_context(brand_id) -> BrandBrainContext:
    """Load a brand with its top topics and latest content, plus the summary."""
    brand = Brand.objects.filter(id=brand_id).first()
    if brand is None:
        return BrandBrainContext(brand=None)

    topics = list(Topic.objects.filter(brand=brand).order_by("-weight")[:MAX_CONTEXT_TOPICS])
    recent_content = list(
        ContentItem.objects.filter(brand=brand).order_by("-date_target")[:MAX_CONTEXT_CONTENT]
    )

    return BrandBrainContext(
        brand=brand,
        topics=topics,
        recent_content=recent_content,
        summary=build_context_summary(brand, topics, recent_content),
    )


def get_brand_insights(brand_id, text: str, limit: int = 5) -> list[BrandVectorMatch]:
    """
    Vector matches for text. Never raises; lookup failures return [].
    """
    if not text or not text.strip():
        return []
    try:
        embedding = generate_embedding(text)
        return search_brand_vectors(str(brand_id), embedding, limit=limit)
    except Exception as exc:
        logger.warning("Brand insights lookup failed brand_id=%s: %s", brand_id, exc)
        return []
