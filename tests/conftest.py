"""
Pytest configuration for Lumora tests.

Settings come from lumora.settings_test (SQLite in-memory, integration
credentials blanked). No test reaches a real external service: DeepSeek,
Supabase, ElevenLabs, Kie.ai and YouTube are all replaced with mocks.
"""

from datetime import date

import pytest

from lumora.integrations.deepseek import DeepSeekClient, DeepSeekConfig, reset_default_client
from lumora.integrations.supabase import reset_supabase_client


@pytest.fixture(autouse=True)
def reset_shared_clients():
    """Drop cached DeepSeek and Supabase clients between tests."""
    reset_default_client()
    reset_supabase_client()
    yield
    reset_default_client()
    reset_supabase_client()


@pytest.fixture
def client():
    """Django test client fixture."""
    from django.test import Client
    return Client()


@pytest.fixture
def deepseek_client():
    """A configured DeepSeek client that never sleeps between retries."""
    return DeepSeekClient(
        config=DeepSeekConfig(api_key="test-key"),
        sleep=lambda _seconds: None,
    )


@pytest.fixture
def provider_reply():
    """Build the dict DeepSeekClient._call_provider returns."""

    def build(content: str) -> dict:
        return {"content": content, "usage": {"prompt_tokens": 10, "completion_tokens": 20}}

    return build


# =============================================================================
# MODEL FIXTURES
# =============================================================================


@pytest.fixture
def brand(db):
    from lumora.core.models import Brand

    return Brand.objects.create(
        name="Northwind Coffee",
        mission="Make specialty coffee approachable",
        voice_tone="Warm and witty",
        target_audience="Remote workers",
        visual_lexicon="golden hour, steam, ceramic",
        dos=["Show the roast"],
        donts=["Mock other cafes"],
        proof_points=["Roasted weekly"],
        cta_library=["Order a bag"],
        negative_prompts=["plastic cups"],
    )


@pytest.fixture
def topics(brand):
    from lumora.core.models import Topic

    return [
        Topic.objects.create(brand=brand, label="Brewing tips", weight=5),
        Topic.objects.create(brand=brand, label="Origin stories", weight=3),
        Topic.objects.create(brand=brand, label="Team moments", weight=1),
    ]


@pytest.fixture
def content_item(brand):
    from lumora.core.models import ContentItem

    return ContentItem.objects.create(
        brand=brand,
        date_target=date(2026, 3, 14),
        platform="tiktok",
        status="idea",
    )
