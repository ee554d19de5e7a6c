"""
Content engine prompt and contract tests.
"""

from unittest.mock import patch

import pytest

from lumora.generation.content_engine import (
    CONTENT_SYSTEM_PROMPT,
    PromptGenerationRequest,
    build_content_prompt,
    build_script_upgrade_prompt,
    generate_brand_suggestions,
    generate_content,
    generate_script_upgrade,
    get_description_limit,
    get_hashtag_count,
    get_platform_constraints,
    get_title_limit,
)
from lumora.generation.dto import (
    BrandSuggestions,
    CameoBrief,
    GeneratedContent,
    ScriptUpgrade,
    ScriptUpgradeRequest,
)


class TestPlatformRules:
    @pytest.mark.parametrize(
        "platform,title,description,hashtags",
        [
            ("tiktok", 150, 2200, 5),
            ("Instagram", 125, 2200, 10),
            ("youtube", 100, 5000, 5),
            ("vimeo", 100, 500, 5),
        ],
    )
    def test_limits(self, platform, title, description, hashtags):
        assert get_title_limit(platform) == title
        assert get_description_limit(platform) == description
        assert get_hashtag_count(platform) == hashtags

    def test_unknown_platform_constraints(self):
        assert get_platform_constraints("vimeo") == "Vertical video, short-form content"


@pytest.mark.django_db
class TestContentPrompt:
    def test_includes_brand_rules_and_cameos(self, brand):
        prompt = build_content_prompt(
            PromptGenerationRequest(
                brand=brand,
                topic="Cold brew at home",
                platform="instagram",
                visual_keywords=["golden hour", "steam"],
                cameos=[CameoBrief(name="Maya", description="Head roaster", visual_description="apron")],
            )
        )

        assert "Generate content for a instagram video about: Cold brew at home" in prompt
        assert "- Name: Northwind Coffee" in prompt
        assert "DO: Show the roast" in prompt
        assert "DON'T: Mock other cafes" in prompt
        assert "Positive: golden hour, steam" in prompt
        assert "Negative (avoid): plastic cups" in prompt
        assert "- Maya: Head roaster (visuals: apron)" in prompt
        assert "Title should be under 125 characters" in prompt
        assert "Use 10 relevant hashtags" in prompt

    def test_falls_back_to_brand_visual_lexicon(self, brand):
        prompt = build_content_prompt(PromptGenerationRequest(brand=brand, topic="x", platform="tiktok"))

        assert "Visual Style: golden hour, steam, ceramic" in prompt
        assert "(none specified)" in prompt

    def test_generate_content_uses_json_mode_contract(self, brand, deepseek_client):
        generated = GeneratedContent(prompts=["p1"], title="T", description="D")
        with patch.object(deepseek_client, "generate_json", return_value=generated) as mock_generate:
            result = generate_content(
                PromptGenerationRequest(brand=brand, topic="x", platform="tiktok"),
                client=deepseek_client,
            )

        assert result is generated
        kwargs = mock_generate.call_args.kwargs
        assert kwargs["system_prompt"] == CONTENT_SYSTEM_PROMPT
        assert kwargs["target"] is GeneratedContent
        assert kwargs["flow"] == "generate_content"
        assert kwargs["temperature"] == 0.8


class TestGeneratedContentContract:
    def test_nulls_and_camel_case(self):
        content = GeneratedContent.model_validate(
            {"prompts": None, "title": None, "description": "Desc", "thumbnailBrief": "Close-up"}
        )

        assert content.prompts == []
        assert content.title == ""
        assert content.thumbnail_brief == "Close-up"
        assert content.voiceover_script == "Desc"

    def test_explicit_voiceover_kept(self):
        content = GeneratedContent.model_validate({"description": "D", "voiceover_script": "V"})
        assert content.voiceover_script == "V"


class TestBrandSuggestionsContract:
    def test_normalizes_strings_and_camel_case(self):
        suggestions = BrandSuggestions.model_validate(
            {
                "targetAudience": "Remote workers ",
                "voice_tone": ["Warm", "  ", 3],
                "ctaLibrary": None,
            }
        )

        assert suggestions.target_audience == ["Remote workers"]
        assert suggestions.voice_tone == ["Warm", "3"]
        assert suggestions.cta_library == []

    def test_generate_brand_suggestions_flow(self, deepseek_client):
        with patch.object(deepseek_client, "generate_json", return_value=BrandSuggestions()) as mock_generate:
            generate_brand_suggestions("Northwind", "Coffee for all", client=deepseek_client)

        kwargs = mock_generate.call_args.kwargs
        assert kwargs["flow"] == "brand_suggestions"
        assert "BRAND NAME: Northwind" in kwargs["user_prompt"]
        assert "MISSION: Coffee for all" in kwargs["user_prompt"]


class TestScriptUpgrade:
    def test_prompt_defaults(self):
        prompt = build_script_upgrade_prompt(
            ScriptUpgradeRequest(transcript_text="So today we brew.", video_title="V60 Guide")
        )

        assert "TITLE: V60 Guide" in prompt
        assert "CHANNEL: Unknown" in prompt
        assert "DURATION: Unknown seconds" in prompt
        assert "GOAL: Increase retention" in prompt
        assert "CTA FOCUS: Encourage viewers to subscribe" in prompt
        assert '"""\nSo today we brew.\n"""' in prompt

    def test_lenient_output(self):
        upgrade = ScriptUpgrade.model_validate(
            {"hook": None, "refinedIdea": "Brew better", "outline": "nope", "ctas": None}
        )

        assert upgrade.hook == ""
        assert upgrade.refined_idea == "Brew better"
        assert upgrade.outline == []
        assert upgrade.ctas == []

    def test_generate_script_upgrade_flow(self, deepseek_client, provider_reply):
        reply = provider_reply(
            '{"hook": "Stop brewing wrong", "outline": [{"label": "Intro", "summary": "s"}], "improvements": ["Cut the ad"]}'
        )
        with patch.object(deepseek_client, "_call_provider", return_value=reply):
            upgrade = generate_script_upgrade(
                ScriptUpgradeRequest(transcript_text="t", video_title="v"),
                client=deepseek_client,
            )

        assert upgrade.hook == "Stop brewing wrong"
        assert upgrade.outline[0].label == "Intro"
        assert upgrade.outline[0].upgrade is None
        assert upgrade.improvements == ["Cut the ad"]
