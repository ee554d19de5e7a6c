"""
Generation runner: one topic + platform + date -> stored content.

The LLM call happens first; the content item and its generations are
then written in a single transaction, so a failed generation insert
leaves no orphan content item behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from django.db import transaction

from lumora.core.enums import ContentStatus, Platform
from lumora.core.models import Brand, Cameo, ContentItem, Generation
from lumora.generation.content_engine import PromptGenerationRequest, generate_content
from lumora.generation.dto import CameoBrief, GeneratedContent

logger = logging.getLogger(__name__)

SUPPORTED_PLATFORMS: tuple[str, ...] = tuple(Platform.values)


@dataclass
class GenerationContext:
    brand: Brand
    visual_keywords: list[str] = field(default_factory=list)
    negative_prompts: list[str] = field(default_factory=list)
    cameos: list[CameoBrief] = field(default_factory=list)


@dataclass
class GenerationResult:
    content_item: ContentItem
    generations: list[Generation]
    generated: GeneratedContent
    topic: str


def parse_visual_keywords(value: str | None) -> list[str]:
    if not value:
        return []
    return [keyword.strip() for keyword in value.split(",") if keyword.strip()]


def load_generation_context(brand_id: UUID) -> GenerationContext:
    """
    Raises:
        Brand.DoesNotExist: If brand not found
    """
    brand = Brand.objects.get(id=brand_id)
    cameos = [
        CameoBrief(
            name=cameo.name,
            description=cameo.description,
            visual_description=cameo.visual_description,
        )
        for cameo in Cameo.objects.filter(brand=brand).order_by("name")
    ]
    return GenerationContext(
        brand=brand,
        visual_keywords=parse_visual_keywords(brand.visual_lexicon),
        negative_prompts=list(brand.negative_prompts or []),
        cameos=cameos,
    )


def generate_and_store_content(
    context: GenerationContext,
    topic: str,
    platform: str,
    date_target: date,
) -> GenerationResult:
    """
    Generate prompts for a topic and store them as a new content item.

    Raises:
        ValueError: If topic is blank or platform unsupported
        DeepSeekError: When generation fails
    """
    topic = topic.strip()
    if not topic:
        raise ValueError("Topic is required")
    if platform not in SUPPORTED_PLATFORMS:
        raise ValueError("Unsupported platform")

    generated = generate_content(
        PromptGenerationRequest(
            brand=context.brand,
            topic=topic,
            platform=platform,
            visual_keywords=context.visual_keywords,
            negative_prompts=context.negative_prompts,
            cameos=context.cameos,
        )
    )

    with transaction.atomic():
        content_item = ContentItem.objects.create(
            brand=context.brand,
            date_target=date_target,
            platform=platform,
            status=ContentStatus.PROMPTED,
            notes=topic,
        )
        generations = Generation.objects.bulk_create(
            [
                Generation(
                    content_item=content_item,
                    prompt_text=prompt,
                    title=generated.title if index == 0 else f"{generated.title} (v{index + 1})",
                    description=generated.description,
                    tags=generated.tags,
                    thumbnail_brief=generated.thumbnail_brief,
                    model_params={"platform": platform, "topic": topic},
                )
                for index, prompt in enumerate(generated.prompts)
            ]
        )

    logger.info(
        "CONTENT_GENERATED brand_id=%s content_item_id=%s platform=%s generations=%d",
        context.brand.id,
        content_item.id,
        platform,
        len(generations),
    )
    return GenerationResult(
        content_item=content_item,
        generations=generations,
        generated=generated,
        topic=topic,
    )
