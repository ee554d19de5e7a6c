"""
Content Engine.

Prompt building for the three DeepSeek JSON flows:
- generate_content: prompt variations + metadata for one video
- generate_brand_suggestions: onboarding suggestion chips
- generate_script_upgrade: tightened outline for a YouTube transcript

Retries, error mapping and JSON parsing live in the DeepSeek client;
this module only owns the prompts and the output contracts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lumora.generation.dto import (
    BrandSuggestions,
    CameoBrief,
    GeneratedContent,
    ScriptUpgrade,
    ScriptUpgradeRequest,
)
from lumora.integrations.deepseek import DeepSeekClient, get_default_client

if TYPE_CHECKING:
    from lumora.core.models import Brand


# =============================================================================
# PLATFORM RULES
# =============================================================================

PLATFORM_CONSTRAINTS = {
    "tiktok": "Vertical 9:16 format, 15-60 seconds, hook in first 3 seconds, trending audio-friendly",
    "instagram": "9:16 Reels format, 15-90 seconds, aesthetic-focused, shareable",
    "youtube": "16:9 or 9:16 Shorts, 15-60 seconds for Shorts, engaging thumbnail needed",
}
DEFAULT_PLATFORM_CONSTRAINTS = "Vertical video, short-form content"

TITLE_LIMITS = {"tiktok": 150, "instagram": 125, "youtube": 100}
DESCRIPTION_LIMITS = {"tiktok": 2200, "instagram": 2200, "youtube": 5000}
HASHTAG_COUNTS = {"tiktok": 5, "instagram": 10, "youtube": 5}


def get_platform_constraints(platform: str) -> str:
    return PLATFORM_CONSTRAINTS.get(platform.lower(), DEFAULT_PLATFORM_CONSTRAINTS)


def get_title_limit(platform: str) -> int:
    return TITLE_LIMITS.get(platform.lower(), 100)


def get_description_limit(platform: str) -> int:
    return DESCRIPTION_LIMITS.get(platform.lower(), 500)


def get_hashtag_count(platform: str) -> int:
    return HASHTAG_COUNTS.get(platform.lower(), 5)


# =============================================================================
# CONTENT GENERATION
# =============================================================================

CONTENT_SYSTEM_PROMPT = (
    "You are an expert content creator and prompt engineer specializing in "
    "creating video content prompts for social media. Your task is to generate "
    "creative, platform-specific content based on brand guidelines."
)


@dataclass
class PromptGenerationRequest:
    brand: "Brand"
    topic: str
    platform: str
    visual_keywords: list[str] = field(default_factory=list)
    negative_prompts: list[str] = field(default_factory=list)
    cameos: list[CameoBrief] = field(default_factory=list)


def _joined(values) -> str:
    return ", ".join(values or [])


def build_content_prompt(request: PromptGenerationRequest) -> str:
    brand = request.brand
    platform = request.platform
    visual_style = _joined(request.visual_keywords) or (brand.visual_lexicon or "")
    negative = _joined(request.negative_prompts) or _joined(brand.negative_prompts)

    if request.cameos:
        cameo_section = "\n".join(
            f"- {cameo.name}: {cameo.description} (visuals: {cameo.visual_description})"
            for cameo in request.cameos
        )
    else:
        cameo_section = "(none specified)"

    return f"""
Generate content for a {platform} video about: {request.topic}

BRAND CONTEXT:
- Name: {brand.name}
- Mission: {brand.mission or ""}
- Target Audience: {brand.target_audience or ""}
- Voice/Tone: {brand.voice_tone or ""}
- Visual Style: {visual_style}

BRAND RULES:
DO: {_joined(brand.dos)}
DON'T: {_joined(brand.donts)}

VISUAL GUIDELINES:
Positive: {visual_style}
Negative (avoid): {negative}

CAMEO CHARACTERS TO FEATURE:
{cameo_section}

PLATFORM CONSTRAINTS:
{get_platform_constraints(platform)}

Generate the following in JSON format:
{{
  "prompts": [
    "prompt_variation_1",
    "prompt_variation_2",
    "prompt_variation_3"
  ],
  "title": "Catchy, platform-appropriate title",
  "description": "Engaging description with CTA",
  "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"],
  "thumbnail_brief": "Description of an attention-grabbing thumbnail"
}}

IMPORTANT:
1. Each prompt should be detailed, specific, and optimized for text-to-video generation
2. Include camera angles, lighting, mood, and visual elements
3. Incorporate brand visual keywords naturally
4. Follow all brand do's and don'ts
5. Title should be under {get_title_limit(platform)} characters
6. Description should be under {get_description_limit(platform)} characters
7. Use {get_hashtag_count(platform)} relevant hashtags
"""


def generate_content(
    request: PromptGenerationRequest,
    client: DeepSeekClient | None = None,
) -> GeneratedContent:
    """
    Generate prompt variations and metadata for one video.

    Raises:
        DeepSeekError: When generation fails after retries
    """
    client = client or get_default_client()
    return client.generate_json(
        system_prompt=CONTENT_SYSTEM_PROMPT,
        user_prompt=build_content_prompt(request),
        target=GeneratedContent,
        flow="generate_content",
        temperature=0.8,
        max_tokens=2000,
    )


# =============================================================================
# BRAND SUGGESTIONS
# =============================================================================

SUGGESTIONS_SYSTEM_PROMPT = (
    "You are a brand strategist who generates concise suggestion lists to help "
    "founders define their brand foundations."
)


def build_suggestions_prompt(name: str, mission: str) -> str:
    return f"""
BRAND NAME: {name}
MISSION: {mission}

Provide JSON with arrays of 3-5 concise suggestions for each field:
{{
  "target_audience": ["..."],
  "voice_tone": ["..."],
  "language_style": ["..."],
  "core_values": ["..."],
  "visual_keywords": ["..."],
  "aesthetic_references": ["..."],
  "negative_prompts": ["..."],
  "dos": ["..."],
  "donts": ["..."],
  "proof_points": ["..."],
  "cta_library": ["..."],
  "legal_claims": ["..."]
}}

Guidelines:
- Keep entries short (under 12 words)
- Tailor recommendations to the mission statement
- Use diverse vocabulary
- Legal claims should focus on risky statements to avoid
"""


def generate_brand_suggestions(
    name: str,
    mission: str,
    client: DeepSeekClient | None = None,
) -> BrandSuggestions:
    """
    Raises:
        DeepSeekError: When generation fails after retries
    """
    client = client or get_default_client()
    return client.generate_json(
        system_prompt=SUGGESTIONS_SYSTEM_PROMPT,
        user_prompt=build_suggestions_prompt(name, mission),
        target=BrandSuggestions,
        flow="brand_suggestions",
    )


# =============================================================================
# SCRIPT UPGRADE
# =============================================================================

SCRIPT_SYSTEM_PROMPT = (
    "You are a senior YouTube script showrunner. You tighten pacing, craft "
    "stronger hooks, and rewrite scripts into concise outlines while respecting "
    "the creator's voice."
)


def build_script_upgrade_prompt(request: ScriptUpgradeRequest) -> str:
    duration = request.duration_seconds if request.duration_seconds is not None else "Unknown"
    meta_block = f"""TITLE: {request.video_title}
CHANNEL: {request.channel_name or "Unknown"}
DURATION: {duration} seconds
GOAL: {request.goal or "Increase retention"}
ISSUES TO FIX: {request.issues or "None provided"}
INTENDED AUDIENCE: {request.audience or "General"}
TONE: {request.tone or "Energetic"}
CTA FOCUS: {request.call_to_action or "Encourage viewers to subscribe"}"""

    return f'''Refine the following YouTube script transcript. Keep the creator's expertise but remove repetition, tighten pacing, and reframe it around a bold hook.

{meta_block}

ORIGINAL TRANSCRIPT:
"""
{request.transcript_text}
"""

Return JSON with this exact shape:
{{
  "hook": "single captivating opening line",
  "refined_idea": "core premise tightened into one sentence",
  "outline": [
    {{
      "label": "Beat label",
      "summary": "one sentence beat summary",
      "detail": "two to three sentences elaborating the beat",
      "upgrade": "specific change vs original"
    }}
  ],
  "improvements": ["list of concrete upgrade bullet points"],
  "ctas": ["2-3 short CTA variations"],
  "risks": ["call out any claims, compliance or retention risks"],
  "closing": "one sentence closing line"
}}

Rules:
- Outline must be chronological, 4-8 beats.
- Keep language concise (<= 20 words per sentence when possible).
- Improvements should be specific ("Cut redundant anecdote in minute 4" etc.).
- If transcript lacks detail, propose creative fills but label them as suggestions.
'''


def generate_script_upgrade(
    request: ScriptUpgradeRequest,
    client: DeepSeekClient | None = None,
) -> ScriptUpgrade:
    """
    Raises:
        DeepSeekError: When generation fails after retries
    """
    client = client or get_default_client()
    return client.generate_json(
        system_prompt=SCRIPT_SYSTEM_PROMPT,
        user_prompt=build_script_upgrade_prompt(request),
        target=ScriptUpgrade,
        flow="script_upgrade",
    )
