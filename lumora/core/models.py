"""
Lumora domain models.

Table names match the hosted Supabase schema so the ORM and the
supabase client (used for brand_vectors) address the same database.

Scoping hierarchy:
- Brand → has many Topics, ContentItems, Cameos, FocusSessions
- ContentItem → has many Generations

brand_vectors is NOT an ORM model: it lives in postgres only (pgvector)
and is created by lumora.brandbrain migrations. See lumora.brandbrain.vector_store.
"""

import uuid

from django.db import models

from .enums import ContentStatus


# =============================================================================
# ABSTRACT BASE CLASSES
# =============================================================================


class TimestampedModel(models.Model):
    """
    Abstract base class with created_at and updated_at timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# =============================================================================
# BRAND & TOPIC DECK
# =============================================================================


class Brand(TimestampedModel):
    """
    Brand entity - the identity every other record hangs off.

    visual_lexicon is the comma-joined list of visual keywords.
    platform_constraints holds {platforms, preferences, metadata} where
    metadata carries the onboarding fields without a dedicated column
    (language_style, core_values, aesthetic_references, legal_claims).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    mission = models.TextField(null=True, blank=True)
    voice_tone = models.TextField(null=True, blank=True)
    target_audience = models.TextField(null=True, blank=True)
    visual_lexicon = models.TextField(null=True, blank=True)
    dos = models.JSONField(default=list, blank=True)
    donts = models.JSONField(default=list, blank=True)
    proof_points = models.JSONField(default=list, blank=True)
    cta_library = models.JSONField(default=list, blank=True)
    negative_prompts = models.JSONField(default=list, blank=True)
    platform_constraints = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "brands"
        indexes = [
            models.Index(fields=["-created_at"], name="idx_brands_created"),
        ]

    def __str__(self):
        return self.name


class Topic(models.Model):
    """
    Weighted topic in a brand's topic deck.

    Higher weight means the topic is picked more often by bulk generation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(
        Brand,
        on_delete=models.CASCADE,
        related_name="topics",
    )
    label = models.CharField(max_length=255)
    weight = models.IntegerField(default=1)
    min_frequency = models.IntegerField(null=True, blank=True)
    max_frequency = models.IntegerField(null=True, blank=True)
    examples = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "topics"
        indexes = [
            models.Index(fields=["brand", "-weight"], name="idx_topics_brand_weight"),
        ]

    def __str__(self):
        return f"{self.label} ({self.weight})"


# =============================================================================
# CONTENT
# =============================================================================


class ContentItem(TimestampedModel):
    """
    A planned piece of content for one platform on one date.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(
        Brand,
        on_delete=models.CASCADE,
        related_name="content_items",
    )
    date_target = models.DateField()
    platform = models.CharField(max_length=50)
    status = models.CharField(
        max_length=20,
        choices=ContentStatus.choices,
        default=ContentStatus.IDEA,
    )
    notes = models.TextField(null=True, blank=True)
    attachments = models.JSONField(null=True, blank=True)
    blocker_reason = models.TextField(null=True, blank=True)
    files = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "content_items"
        indexes = [
            models.Index(fields=["brand", "date_target"], name="idx_content_brand_date"),
            models.Index(fields=["brand", "status"], name="idx_content_brand_status"),
        ]

    def __str__(self):
        return f"{self.platform} @ {self.date_target} [{self.status}]"


class Generation(models.Model):
    """
    One LLM prompt variation for a content item.

    model_params records the inputs ({platform, topic}) that produced it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    content_item = models.ForeignKey(
        ContentItem,
        on_delete=models.CASCADE,
        related_name="generations",
    )
    prompt_text = models.TextField()
    title = models.TextField()
    description = models.TextField()
    tags = models.JSONField(default=list, blank=True)
    thumbnail_brief = models.TextField(null=True, blank=True)
    model_params = models.JSONField(null=True, blank=True)
    critique_score = models.FloatField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "generations"
        indexes = [
            models.Index(fields=["content_item", "created_at"], name="idx_generations_item_created"),
        ]

    def __str__(self):
        return self.title


class Cameo(TimestampedModel):
    """Recurring on-screen character a brand can feature in video prompts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(
        Brand,
        on_delete=models.CASCADE,
        related_name="cameos",
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    visual_description = models.TextField(blank=True, default="")
    reference_images = models.JSONField(null=True, blank=True)
    usage_notes = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "cameos"

    def __str__(self):
        return self.name


# =============================================================================
# FOCUS SESSIONS
# =============================================================================


class FocusSession(models.Model):
    """Logged block of focused work time, optionally tied to a brand."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(
        Brand,
        on_delete=models.SET_NULL,
        related_name="focus_sessions",
        null=True,
        blank=True,
    )
    duration_minutes = models.PositiveIntegerField()
    started_at = models.DateTimeField()
    ended_at = models.DateTimeField()
    notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "focus_sessions"
        indexes = [
            models.Index(fields=["-started_at"], name="idx_focus_started"),
        ]

    def __str__(self):
        return f"{self.duration_minutes}m @ {self.started_at:%Y-%m-%d}"
