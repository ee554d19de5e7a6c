"""
Generation runner and bulk run tests.

generate_content is patched at the runner's import site; persistence runs
against the test database.
"""

import random
from datetime import date
from unittest.mock import patch

import pytest

from lumora.core.models import Cameo, ContentItem, Generation
from lumora.generation.bulk import BulkDayResult, run_bulk_generation
from lumora.generation.dto import GeneratedContent
from lumora.generation.runner import (
    generate_and_store_content,
    load_generation_context,
    parse_visual_keywords,
)
from lumora.integrations.deepseek import DeepSeekError

GENERATE_PATH = "lumora.generation.runner.generate_content"


def generated(**overrides):
    data = {
        "prompts": ["Slow pour over at dawn", "Barista close-up", "Steam rising"],
        "title": "Morning ritual",
        "description": "Our weekly roast, brewed slow.",
        "tags": ["#coffee", "#ritual"],
        "thumbnail_brief": "Cup on a sunlit table",
    }
    data.update(overrides)
    return GeneratedContent.model_validate(data)


class TestParseVisualKeywords:
    def test_splits_and_trims(self):
        assert parse_visual_keywords(" golden hour, steam ,, ceramic ") == ["golden hour", "steam", "ceramic"]

    def test_empty(self):
        assert parse_visual_keywords(None) == []


@pytest.mark.django_db
class TestLoadGenerationContext:
    def test_loads_brand_keywords_and_cameos(self, brand):
        Cameo.objects.create(brand=brand, name="Zed", description="Courier")
        Cameo.objects.create(brand=brand, name="Maya", description="Head roaster", visual_description="apron")

        context = load_generation_context(brand.id)

        assert context.brand == brand
        assert context.visual_keywords == ["golden hour", "steam", "ceramic"]
        assert context.negative_prompts == ["plastic cups"]
        assert [c.name for c in context.cameos] == ["Maya", "Zed"]


@pytest.mark.django_db
class TestGenerateAndStoreContent:
    @patch(GENERATE_PATH)
    def test_stores_item_and_versioned_generations(self, mock_generate, brand):
        mock_generate.return_value = generated()
        context = load_generation_context(brand.id)

        result = generate_and_store_content(context, "  Brewing tips ", "tiktok", date(2026, 4, 1))

        item = ContentItem.objects.get(id=result.content_item.id)
        assert item.status == "prompted"
        assert item.notes == "Brewing tips"
        assert item.date_target == date(2026, 4, 1)
        titles = list(
            Generation.objects.filter(content_item=item).order_by("title").values_list("title", flat=True)
        )
        assert titles == ["Morning ritual", "Morning ritual (v2)", "Morning ritual (v3)"]
        generation = Generation.objects.filter(content_item=item).first()
        assert generation.model_params == {"platform": "tiktok", "topic": "Brewing tips"}
        assert generation.tags == ["#coffee", "#ritual"]

        request = mock_generate.call_args.args[0]
        assert request.topic == "Brewing tips"
        assert request.visual_keywords == ["golden hour", "steam", "ceramic"]

    @patch(GENERATE_PATH)
    def test_llm_failure_writes_nothing(self, mock_generate, brand):
        mock_generate.side_effect = DeepSeekError("rate limited", "rate_limit", 429)
        context = load_generation_context(brand.id)

        with pytest.raises(DeepSeekError):
            generate_and_store_content(context, "Brewing tips", "tiktok", date(2026, 4, 1))

        assert ContentItem.objects.count() == 0

    @patch(GENERATE_PATH)
    def test_generation_insert_failure_rolls_back_item(self, mock_generate, brand):
        mock_generate.return_value = generated()
        context = load_generation_context(brand.id)

        with patch.object(Generation.objects, "bulk_create", side_effect=RuntimeError("insert failed")):
            with pytest.raises(RuntimeError):
                generate_and_store_content(context, "Brewing tips", "tiktok", date(2026, 4, 1))

        assert ContentItem.objects.count() == 0

    @pytest.mark.parametrize(
        "topic,platform,message",
        [("   ", "tiktok", "Topic is required"), ("Tips", "vimeo", "Unsupported platform")],
    )
    def test_validation(self, brand, topic, platform, message):
        context = load_generation_context(brand.id)

        with pytest.raises(ValueError, match=message):
            generate_and_store_content(context, topic, platform, date(2026, 4, 1))


@pytest.mark.django_db
class TestBulkGeneration:
    @patch("lumora.generation.bulk.generate_and_store_content")
    def test_one_item_per_day_with_failures_recorded(self, mock_store, brand, topics):
        mock_store.side_effect = [None, DeepSeekError("down", "server", 503), None]
        context = load_generation_context(brand.id)

        results, summary = run_bulk_generation(
            context, topics, "youtube", 3, date(2026, 1, 30), rng=random.Random(5)
        )

        assert [r.date for r in results] == ["2026-01-30", "2026-01-31", "2026-02-01"]
        assert [r.status for r in results] == ["success", "failed", "success"]
        assert results[1].error == "down"
        assert summary.requested == 3
        assert summary.successes == 2
        assert summary.failures == 1
        for call, result in zip(mock_store.call_args_list, results):
            assert call.args[1] == result.topic
            assert call.args[2] == "youtube"

    def test_result_dict_omits_missing_error(self):
        assert "error" not in BulkDayResult("2026-01-01", "Tips", "tiktok", "success").to_dict()
        assert BulkDayResult("2026-01-01", "Tips", "tiktok", "failed", "x").to_dict()["error"] == "x"
