"""
Brand suggestion fallback tests.
"""

import time
from unittest.mock import patch

import pytest

from lumora.generation.dto import BrandSuggestions
from lumora.generation.suggestions import build_fallback_suggestions, suggest_brand_foundations
from lumora.integrations.deepseek import DeepSeekClient, DeepSeekConfig, DeepSeekError

CALL_PATH = "lumora.generation.suggestions.generate_brand_suggestions"


class TestFallbackSuggestions:
    def test_uses_name_and_mission(self):
        suggestions = build_fallback_suggestions("Northwind", "Making Coffee Approachable")

        assert suggestions.target_audience[0] == "Northwind loyalists"
        assert suggestions.target_audience[1] == "People motivated by making coffee approachable"
        assert len(suggestions.core_values) == 4

    def test_long_mission_is_truncated(self):
        suggestions = build_fallback_suggestions("N", "x" * 120)

        audience = suggestions.target_audience[1]
        assert audience.endswith("...")
        assert len(audience) == len("People motivated by ") + 80

    def test_blank_inputs(self):
        suggestions = build_fallback_suggestions("", "")

        assert suggestions.target_audience[0] == "the brand loyalists"
        assert suggestions.target_audience[1] == "People motivated by delivering remarkable experiences"


class TestSuggestBrandFoundations:
    def test_unconfigured_client_falls_back(self):
        client = DeepSeekClient(config=DeepSeekConfig(api_key=None))

        with patch(CALL_PATH) as mock_call:
            result = suggest_brand_foundations("Northwind", "Coffee", client=client)

        assert result.fallback is True
        assert result.error is None
        mock_call.assert_not_called()

    def test_success(self, deepseek_client):
        suggestions = BrandSuggestions(voice_tone=["Warm"])
        with patch(CALL_PATH, return_value=suggestions):
            result = suggest_brand_foundations("Northwind", "Coffee", client=deepseek_client)

        assert result.fallback is False
        assert result.suggestions.voice_tone == ["Warm"]

    def test_server_error_falls_back(self, deepseek_client):
        with patch(CALL_PATH, side_effect=DeepSeekError("DeepSeek down", "server", 503)):
            result = suggest_brand_foundations("Northwind", "Coffee", client=deepseek_client)

        assert result.fallback is True
        assert result.error == "DeepSeek down"

    def test_unexpected_error_falls_back(self, deepseek_client):
        with patch(CALL_PATH, side_effect=RuntimeError("boom")):
            result = suggest_brand_foundations("Northwind", "Coffee", client=deepseek_client)

        assert result.fallback is True
        assert result.error == "boom"

    def test_invalid_error_propagates(self, deepseek_client):
        with patch(CALL_PATH, side_effect=DeepSeekError("Bad request", "invalid", 400)):
            with pytest.raises(DeepSeekError) as exc_info:
                suggest_brand_foundations("Northwind", "Coffee", client=deepseek_client)

        assert exc_info.value.status == 400

    def test_timeout_falls_back(self, deepseek_client):
        def slow(*_args):
            time.sleep(0.5)
            return BrandSuggestions()

        started = time.monotonic()
        with patch(CALL_PATH, side_effect=slow):
            result = suggest_brand_foundations("Northwind", "Coffee", client=deepseek_client, timeout_s=0.05)

        assert time.monotonic() - started < 0.4
        assert result.fallback is True
        assert result.error == "Suggestion timeout"
