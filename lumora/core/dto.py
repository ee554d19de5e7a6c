"""
Lumora core DTOs.

Pydantic v2 request shapes for the brand onboarding form. The form is the
single write contract for brands: create and update both take a full
BrandForm, and update replaces the topic deck wholesale.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator


# =============================================================================
# BRAND FORM
# =============================================================================


class PlatformToggles(BaseModel):
    """Which platforms the brand publishes to."""
    tiktok: bool = False
    instagram: bool = False
    youtube: bool = False


class TopicInput(BaseModel):
    """One entry of the topic deck as submitted by the onboarding form."""
    label: str = Field(min_length=1)
    weight: int = Field(default=1, ge=1, le=10)
    min_frequency: int | None = None
    max_frequency: int | None = None
    examples: list[str] = Field(default_factory=list)


class BrandForm(BaseModel):
    """
    Brand onboarding form.

    Grouped by onboarding step: basic info, mission & values, audience &
    tone, visual lexicon, content rules, proof & CTAs, platforms, topics.
    """

    name: str = Field(min_length=1)
    logo: str | None = None
    primary_color: str | None = None

    mission: str | None = None
    core_values: list[str] = Field(default_factory=list)

    target_audience: str | None = None
    voice_tone: str | None = None
    language_style: str | None = None

    visual_keywords: list[str] = Field(default_factory=list)
    aesthetic_references: list[str] = Field(default_factory=list)
    negative_prompts: list[str] = Field(default_factory=list)

    dos: list[str] = Field(default_factory=list)
    donts: list[str] = Field(default_factory=list)
    legal_claims: list[str] = Field(default_factory=list)

    proof_points: list[str] = Field(default_factory=list)
    cta_library: list[str] = Field(default_factory=list)

    platforms: PlatformToggles = Field(default_factory=PlatformToggles)
    platform_preferences: dict[str, Any] = Field(default_factory=dict)

    topics: list[TopicInput] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Brand name is required")
        return value

    def platform_constraints(self) -> dict[str, Any]:
        """Build the platform_constraints JSON stored on the brand row."""
        return {
            "platforms": self.platforms.model_dump(),
            "preferences": self.platform_preferences,
            "metadata": {
                "language_style": self.language_style or "",
                "core_values": self.core_values,
                "aesthetic_references": self.aesthetic_references,
                "legal_claims": self.legal_claims,
            },
        }


# =============================================================================
# CAMEO UPDATE
# =============================================================================


class CameoUpdate(BaseModel):
    """
    Partial cameo update. Only keys present in the request are written;
    unknown keys are ignored.
    """

    name: str | None = None
    description: str | None = None
    visual_description: str | None = None
    reference_images: list[str] | None = None
    usage_notes: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Cameo name cannot be blank")
        return value.strip()

    @field_validator("description", "visual_description")
    @classmethod
    def _none_to_empty(cls, value: str | None) -> str:
        return value or ""

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


# =============================================================================
# HELPERS
# =============================================================================


def summarize_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
