"""
Generation DTOs.

Pydantic v2 shapes for the LLM JSON contracts (content prompts, brand
suggestions, script upgrades) and for the script-upgrade request. LLM
output is parsed leniently: missing or null fields fall back to empty
values, and camelCase keys are accepted alongside snake_case.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


def _none_to_empty(value: Any, empty: Any) -> Any:
    return empty if value is None else value


# =============================================================================
# CONTENT GENERATION
# =============================================================================


class CameoBrief(BaseModel):
    """A cameo character as injected into the generation prompt."""
    name: str
    description: str = ""
    visual_description: str = ""


class GeneratedContent(BaseModel):
    """
    One generation run: several prompt variations sharing metadata.

    voiceover_script defaults to the description when the model omits it.
    """

    prompts: list[str] = Field(default_factory=list)
    title: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    thumbnail_brief: str = Field(
        default="",
        validation_alias=AliasChoices("thumbnail_brief", "thumbnailBrief"),
    )
    voiceover_script: str = Field(
        default="",
        validation_alias=AliasChoices("voiceover_script", "voiceoverScript"),
    )

    @field_validator("prompts", "tags", mode="before")
    @classmethod
    def _lists_default(cls, value: Any) -> Any:
        return _none_to_empty(value, [])

    @field_validator("title", "description", "thumbnail_brief", "voiceover_script", mode="before")
    @classmethod
    def _strings_default(cls, value: Any) -> Any:
        return _none_to_empty(value, "")

    @model_validator(mode="after")
    def _default_voiceover(self) -> "GeneratedContent":
        if not self.voiceover_script:
            self.voiceover_script = self.description
        return self


# =============================================================================
# BRAND SUGGESTIONS
# =============================================================================

SUGGESTION_FIELDS = (
    "target_audience",
    "voice_tone",
    "language_style",
    "core_values",
    "visual_keywords",
    "aesthetic_references",
    "negative_prompts",
    "dos",
    "donts",
    "proof_points",
    "cta_library",
    "legal_claims",
)


def normalize_suggestion_list(value: Any) -> list[str]:
    """A string becomes [stripped]; list items are stringified; blanks drop."""
    if isinstance(value, list):
        items = [item.strip() if isinstance(item, str) else str(item) for item in value]
        return [item for item in items if item]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class BrandSuggestions(BaseModel):
    """Suggestion chips for each onboarding field."""

    target_audience: list[str] = Field(default_factory=list)
    voice_tone: list[str] = Field(default_factory=list)
    language_style: list[str] = Field(default_factory=list)
    core_values: list[str] = Field(default_factory=list)
    visual_keywords: list[str] = Field(default_factory=list)
    aesthetic_references: list[str] = Field(default_factory=list)
    negative_prompts: list[str] = Field(default_factory=list)
    dos: list[str] = Field(default_factory=list)
    donts: list[str] = Field(default_factory=list)
    proof_points: list[str] = Field(default_factory=list)
    cta_library: list[str] = Field(default_factory=list)
    legal_claims: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            name: normalize_suggestion_list(data.get(name, data.get(_camel(name))))
            for name in SUGGESTION_FIELDS
        }


# =============================================================================
# YOUTUBE SCRIPT UPGRADE
# =============================================================================


class ScriptUpgradeRequest(BaseModel):
    transcript_text: str = Field(min_length=1)
    video_title: str = Field(min_length=1)
    duration_seconds: float | None = None
    channel_name: str | None = None
    goal: str | None = None
    issues: str | None = None
    audience: str | None = None
    tone: str | None = None
    call_to_action: str | None = None


class ScriptOutlineBeat(BaseModel):
    label: str = ""
    summary: str = ""
    detail: str = ""
    upgrade: str | None = None


class ScriptUpgrade(BaseModel):
    hook: str = ""
    refined_idea: str = Field(
        default="",
        validation_alias=AliasChoices("refined_idea", "refinedIdea"),
    )
    outline: list[ScriptOutlineBeat] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    ctas: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    closing: str = ""

    @field_validator("hook", "refined_idea", "closing", mode="before")
    @classmethod
    def _strings_default(cls, value: Any) -> Any:
        return _none_to_empty(value, "")

    @field_validator("improvements", "ctas", "risks", mode="before")
    @classmethod
    def _lists_default(cls, value: Any) -> Any:
        return _none_to_empty(value, [])

    @field_validator("outline", mode="before")
    @classmethod
    def _outline_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []
