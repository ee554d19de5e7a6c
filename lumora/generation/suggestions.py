"""
Brand foundation suggestions for the onboarding wizard.

The LLM call is bounded by BRAND_SUGGESTIONS_TIMEOUT_S. Without an API
key, or when the call times out or fails for any reason other than a
rejected request ("invalid"), deterministic fallback suggestions are
returned instead.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from django.conf import settings

from lumora.generation.content_engine import generate_brand_suggestions
from lumora.generation.dto import BrandSuggestions
from lumora.integrations.deepseek import DeepSeekClient, DeepSeekError, get_default_client

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 8.0
MISSION_FOCUS_MAX_CHARS = 80


@dataclass
class SuggestionResult:
    suggestions: BrandSuggestions
    fallback: bool = False
    error: str | None = None


def build_fallback_suggestions(name: str, mission: str) -> BrandSuggestions:
    brand_name = name or "the brand"
    mission_fragment = mission or "delivering remarkable experiences"
    if len(mission_fragment) > MISSION_FOCUS_MAX_CHARS:
        mission_focus = mission_fragment[:77] + "..."
    else:
        mission_focus = mission_fragment

    return BrandSuggestions(
        target_audience=[
            f"{brand_name} loyalists",
            f"People motivated by {mission_focus.lower()}",
            "Modern digital explorers",
        ],
        voice_tone=["Warm expert", "Bold storyteller", "Precision-driven"],
        language_style=["Conversational", "Solution-focused", "Narrative-first"],
        core_values=["Innovation", "Clarity", "Integrity", "Community"],
        visual_keywords=["cinematic", "vibrant", "editorial", "future-forward"],
        aesthetic_references=["Apple keynote", "Vogue editorial", "Documentary realism"],
        negative_prompts=["overly corporate", "flat lighting", "generic stock visuals"],
        dos=["Lead with outcomes", "Show behind-the-scenes moments", "Highlight community wins"],
        donts=["Avoid jargon", "Skip fear-based hooks", "No unverified claims"],
        proof_points=[
            "Featured in leading publications",
            "5k+ customers served",
            "Backed by industry experts",
        ],
        cta_library=["Start your next chapter", "See how it works", "Claim your spot today"],
        legal_claims=["Avoid guaranteed results", "Do not imply medical outcomes"],
    )


def _call_with_timeout(
    name: str,
    mission: str,
    client: DeepSeekClient,
    timeout_s: float,
) -> BrandSuggestions:
    # No context manager: leaving it would block until a timed-out call finishes
    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(generate_brand_suggestions, name, mission, client)
        try:
            return future.result(timeout=timeout_s)
        except FutureTimeoutError as exc:
            raise DeepSeekError("Suggestion timeout", "network", 504) from exc
    finally:
        executor.shutdown(wait=False)


def suggest_brand_foundations(
    name: str,
    mission: str,
    client: DeepSeekClient | None = None,
    timeout_s: float | None = None,
) -> SuggestionResult:
    """
    Suggestion chips for a brand name + mission.

    Raises:
        DeepSeekError: Only for "invalid" errors (request rejected by DeepSeek)
    """
    client = client or get_default_client()
    if not client.configured:
        return SuggestionResult(build_fallback_suggestions(name, mission), fallback=True)

    if timeout_s is None:
        timeout_s = getattr(settings, "BRAND_SUGGESTIONS_TIMEOUT_S", DEFAULT_TIMEOUT_S)

    try:
        suggestions = _call_with_timeout(name, mission, client, timeout_s)
    except DeepSeekError as exc:
        if exc.code == "invalid":
            raise
        logger.warning("Brand suggestions falling back code=%s: %s", exc.code, exc.message)
        return SuggestionResult(
            build_fallback_suggestions(name, mission),
            fallback=True,
            error=exc.message,
        )
    except Exception as exc:
        logger.warning("Brand suggestions falling back: %s", exc)
        return SuggestionResult(
            build_fallback_suggestions(name, mission),
            fallback=True,
            error=str(exc),
        )

    return SuggestionResult(suggestions)
