"""
Brands Service.

Brand CRUD and the topic deck. Create and update take the full onboarding
form; update replaces the topic deck wholesale. Both re-ingest the brand
into brand_vectors after the transaction commits. Ingestion is
best-effort and never fails the write.
"""

from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction

from lumora.brandbrain.ingestion import IngestableBrand, ingest_brand_profile
from lumora.core.dto import BrandForm, TopicInput
from lumora.core.models import Brand, Topic

logger = logging.getLogger(__name__)


def _brand_fields(form: BrandForm) -> dict:
    return {
        "name": form.name,
        "mission": form.mission,
        "voice_tone": form.voice_tone,
        "target_audience": form.target_audience,
        "visual_lexicon": ", ".join(form.visual_keywords),
        "dos": form.dos,
        "donts": form.donts,
        "proof_points": form.proof_points,
        "cta_library": form.cta_library,
        "negative_prompts": form.negative_prompts,
        "platform_constraints": form.platform_constraints(),
    }


def _create_topics(brand: Brand, topics: list[TopicInput]) -> list[Topic]:
    return Topic.objects.bulk_create(
        [
            Topic(
                brand=brand,
                label=topic.label,
                weight=topic.weight,
                min_frequency=topic.min_frequency,
                max_frequency=topic.max_frequency,
                examples=topic.examples,
            )
            for topic in topics
        ]
    )


def _ingest_best_effort(brand: IngestableBrand, topics: list[TopicInput], action: str) -> None:
    try:
        ingest_brand_profile(brand, topics)
    except Exception as exc:
        logger.warning("Vector ingestion failed after brand %s brand_id=%s: %s", action, brand.id, exc)


def create_brand(form: BrandForm) -> Brand:
    """
    Create a brand and its topic deck in one transaction.

    Returns:
        The created Brand
    """
    with transaction.atomic():
        brand = Brand.objects.create(**_brand_fields(form))
        _create_topics(brand, form.topics)

    logger.info("BRAND_CREATED brand_id=%s topics=%d", brand.id, len(form.topics))
    _ingest_best_effort(IngestableBrand.from_model(brand), form.topics, "create")
    return brand


def list_brands() -> list[Brand]:
    return list(Brand.objects.order_by("-created_at"))


def get_brand(brand_id: UUID) -> Brand:
    """
    Raises:
        Brand.DoesNotExist: If brand not found
    """
    return Brand.objects.get(id=brand_id)


def get_brand_with_topics(brand_id: UUID) -> tuple[Brand, list[Topic]]:
    """
    Raises:
        Brand.DoesNotExist: If brand not found
    """
    brand = get_brand(brand_id)
    return brand, list_topics(brand.id)


def update_brand(brand_id: UUID, form: BrandForm) -> Brand:
    """
    Update a brand and replace its topic deck in one transaction.

    Raises:
        Brand.DoesNotExist: If brand not found
    """
    with transaction.atomic():
        brand = Brand.objects.select_for_update().get(id=brand_id)
        for field, value in _brand_fields(form).items():
            setattr(brand, field, value)
        brand.save()

        Topic.objects.filter(brand=brand).delete()
        _create_topics(brand, form.topics)

    logger.info("BRAND_UPDATED brand_id=%s topics=%d", brand.id, len(form.topics))
    _ingest_best_effort(IngestableBrand.from_form(str(brand.id), form), form.topics, "update")
    return brand


def delete_brand(brand_id: UUID) -> None:
    """
    Delete a brand. Topics, content, cameos and vectors cascade.

    Raises:
        Brand.DoesNotExist: If brand not found
    """
    deleted, _ = Brand.objects.filter(id=brand_id).delete()
    if not deleted:
        raise Brand.DoesNotExist(f"Brand {brand_id} not found")
    logger.info("BRAND_DELETED brand_id=%s", brand_id)


def list_topics(brand_id: UUID) -> list[Topic]:
    return list(Topic.objects.filter(brand_id=brand_id).order_by("-weight", "label"))
