"""
Lumora domain enums.

All enums are Django TextChoices, stored as lowercase strings.
"""

from django.db import models


class Platform(models.TextChoices):
    """Short-form video platforms supported by generation."""
    TIKTOK = "tiktok", "TikTok"
    INSTAGRAM = "instagram", "Instagram"
    YOUTUBE = "youtube", "YouTube"


class ContentStatus(models.TextChoices):
    """Lifecycle status of a content item (one per workflow stage)."""
    IDEA = "idea", "Idea"
    PROMPTED = "prompted", "Prompted"
    GENERATED = "generated", "Generated"
    ENHANCED = "enhanced", "Enhanced"
    QC = "qc", "QC"
    SCHEDULED = "scheduled", "Scheduled"
    PUBLISHED = "published", "Published"


class BrandVectorType(models.TextChoices):
    """Kinds of rows stored in brand_vectors."""
    POSITIONING = "positioning", "Positioning"
    GUARDRAILS = "guardrails", "Guardrails"
    SOCIAL_PROOF = "social-proof", "Social proof"
    TOPIC = "topic", "Topic"
