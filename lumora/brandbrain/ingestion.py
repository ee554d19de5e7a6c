"""
Brand profile ingestion into brand_vectors.

A brand becomes up to three profile rows plus one row per topic:

    profile::positioning   name, mission, voice, audience, visuals
    profile::guardrails    do / don't / avoid-visuals lists
    profile::proof         proof points and CTAs
    topic::<slug>          one per topic in the deck

Each row is embedded and upserted on (brand_id, source_key), so
re-ingesting a brand updates rows in place. Topic rows whose slug is no
longer in the deck are pruned first.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from lumora.brandbrain.vector_store import (
    TOPIC_SOURCE_PREFIX,
    BrandVectorPayload,
    BrandVectorStore,
    get_vector_store,
)
from lumora.core.enums import BrandVectorType
from lumora.integrations.deepseek import generate_embedding

if TYPE_CHECKING:
    from lumora.core.dto import BrandForm
    from lumora.core.models import Brand

logger = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


# =============================================================================
# INPUT SHAPES
# =============================================================================


@dataclass
class IngestableBrand:
    """The subset of brand fields that feeds the profile rows."""

    id: str | None
    name: str
    mission: str | None = None
    voice_tone: str | None = None
    target_audience: str | None = None
    visual_lexicon: str | None = None
    dos: list[str] = field(default_factory=list)
    donts: list[str] = field(default_factory=list)
    proof_points: list[str] = field(default_factory=list)
    cta_library: list[str] = field(default_factory=list)
    negative_prompts: list[str] = field(default_factory=list)

    @classmethod
    def from_model(cls, brand: "Brand") -> "IngestableBrand":
        return cls(
            id=str(brand.id) if brand.id else None,
            name=brand.name,
            mission=brand.mission,
            voice_tone=brand.voice_tone,
            target_audience=brand.target_audience,
            visual_lexicon=brand.visual_lexicon,
            dos=list(brand.dos or []),
            donts=list(brand.donts or []),
            proof_points=list(brand.proof_points or []),
            cta_library=list(brand.cta_library or []),
            negative_prompts=list(brand.negative_prompts or []),
        )

    @classmethod
    def from_form(cls, brand_id: str, form: "BrandForm") -> "IngestableBrand":
        return cls(
            id=brand_id,
            name=form.name,
            mission=form.mission or None,
            voice_tone=form.voice_tone or None,
            target_audience=form.target_audience or None,
            visual_lexicon=", ".join(form.visual_keywords) or None,
            dos=list(form.dos),
            donts=list(form.donts),
            proof_points=list(form.proof_points),
            cta_library=list(form.cta_library),
            negative_prompts=list(form.negative_prompts),
        )


@dataclass
class NormalizedTopic:
    label: str
    weight: int | None = None
    min_frequency: int | None = None
    max_frequency: int | None = None
    examples: list[str] = field(default_factory=list)


def _topic_value(topic: Any, *names: str) -> Any:
    """First non-None value among names, read from a mapping or attributes."""
    for name in names:
        if isinstance(topic, Mapping):
            value = topic.get(name)
        else:
            value = getattr(topic, name, None)
        if value is not None:
            return value
    return None


def normalize_topic(topic: Any) -> NormalizedTopic:
    """
    Normalize a Topic model, TopicInput or raw dict.

    Raw dicts may use either snake_case or camelCase frequency keys.
    """
    return NormalizedTopic(
        label=str(_topic_value(topic, "label") or "").strip(),
        weight=_topic_value(topic, "weight"),
        min_frequency=_topic_value(topic, "min_frequency", "minFrequency"),
        max_frequency=_topic_value(topic, "max_frequency", "maxFrequency"),
        examples=list(_topic_value(topic, "examples") or []),
    )


def sanitize_source_key(value: str, fallback: str) -> str:
    """Lowercase slug of value (a-z0-9 and single dashes), or fallback if empty."""
    slug = _NON_SLUG.sub("-", value.lower()).strip("-")
    return slug or fallback


# =============================================================================
# ENTRY BUILDING
# =============================================================================


def _bullets(heading: str, values: list[str]) -> str | None:
    if not values:
        return None
    return f"{heading}:\n- " + "\n- ".join(values)


def _join(parts: Iterable[str | None], separator: str) -> str:
    return separator.join(part for part in parts if part)


def build_brand_vector_entries(
    brand: IngestableBrand,
    topics: Iterable[Any] = (),
) -> tuple[list[BrandVectorPayload], list[str]]:
    """
    Build the brand_vectors rows for a brand.

    Returns:
        (entries, topic_keys) - topic_keys are the topic source keys to keep
    """
    brand_id = str(brand.id)
    profile_metadata = {"name": brand.name}
    entries: list[BrandVectorPayload] = []

    positioning = _join(
        [
            f"Brand: {brand.name}",
            f"Mission: {brand.mission}" if brand.mission else None,
            f"Voice: {brand.voice_tone}" if brand.voice_tone else None,
            f"Audience: {brand.target_audience}" if brand.target_audience else None,
            f"Visuals: {brand.visual_lexicon}" if brand.visual_lexicon else None,
        ],
        "\n",
    )
    guardrails = _join(
        [
            _bullets("Do", brand.dos),
            _bullets("Don't", brand.donts),
            _bullets("Avoid visuals", brand.negative_prompts),
        ],
        "\n\n",
    )
    proof = _join(
        [
            _bullets("Proof points", brand.proof_points),
            _bullets("CTAs", brand.cta_library),
        ],
        "\n\n",
    )

    for entry_type, source_key, content in (
        (BrandVectorType.POSITIONING, "profile::positioning", positioning),
        (BrandVectorType.GUARDRAILS, "profile::guardrails", guardrails),
        (BrandVectorType.SOCIAL_PROOF, "profile::proof", proof),
    ):
        if content:
            entries.append(
                BrandVectorPayload(
                    brand_id=brand_id,
                    type=entry_type.value,
                    source_key=source_key,
                    content=content,
                    metadata=dict(profile_metadata),
                )
            )

    normalized = [t for t in (normalize_topic(topic) for topic in topics) if t.label]
    topic_keys: list[str] = []

    for index, topic in enumerate(normalized):
        source_key = TOPIC_SOURCE_PREFIX + sanitize_source_key(topic.label, f"topic-{index}")
        topic_keys.append(source_key)

        content = _join(
            [
                f"Topic: {topic.label}",
                f"Weight: {topic.weight}" if topic.weight else None,
                f"Min frequency: {topic.min_frequency}" if topic.min_frequency else None,
                f"Max frequency: {topic.max_frequency}" if topic.max_frequency else None,
                _bullets("Examples", topic.examples),
            ],
            "\n",
        )
        entries.append(
            BrandVectorPayload(
                brand_id=brand_id,
                type=BrandVectorType.TOPIC.value,
                source_key=source_key,
                content=content,
                metadata={
                    "label": topic.label,
                    "weight": topic.weight,
                    "min_frequency": topic.min_frequency,
                    "max_frequency": topic.max_frequency,
                },
            )
        )

    return entries, topic_keys


# =============================================================================
# INGESTION
# =============================================================================


def ingest_brand_profile(
    brand: "IngestableBrand | Brand",
    topics: Iterable[Any] = (),
    *,
    store: BrandVectorStore | None = None,
    embed: Callable[[str], list[float]] | None = None,
) -> int:
    """
    Embed and upsert a brand's profile and topic rows.

    Pruning stale topic rows is best-effort; upsert failures propagate.

    Args:
        brand: IngestableBrand or Brand model instance
        topics: Topic models, TopicInputs or dicts
        store: Optional BrandVectorStore (defaults to the Supabase-backed store)
        embed: Optional embedding function (defaults to generate_embedding)

    Returns:
        Number of rows upserted (0 if the brand has no id)
    """
    if not isinstance(brand, IngestableBrand):
        brand = IngestableBrand.from_model(brand)
    if not brand.id:
        return 0

    store = store or get_vector_store()
    embed = embed or generate_embedding

    entries, topic_keys = build_brand_vector_entries(brand, topics)

    try:
        store.prune_topics(brand.id, topic_keys)
    except Exception as exc:
        logger.warning("Failed to prune topic vectors brand_id=%s: %s", brand.id, exc)

    for entry in entries:
        store.upsert(entry, embed(entry.content))

    logger.info(
        "BRAND_INGEST_COMPLETE brand_id=%s entries=%d topics=%d",
        brand.id,
        len(entries),
        len(topic_keys),
    )
    return len(entries)
