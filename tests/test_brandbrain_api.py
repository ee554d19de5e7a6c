"""
Brand brain HTTP tests: /api/brand-chat, /api/brand-ingest, /api/brain/upload.

DeepSeek is unconfigured under settings_test, so chat replies take the
fallback path unless generate_brand_chat_response is patched.
"""

import json
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.test import Client

from lumora.brandbrain.chat import ChatReply
from lumora.brandbrain.retrieval import BrandVectorMatch

VIEWS = "lumora.brandbrain.api.views"


def post_json(client: Client, url: str, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


@pytest.mark.django_db
class TestBrandChat:
    @patch(f"{VIEWS}.get_brand_insights", return_value=[])
    def test_fallback_reply_without_api_key(self, _insights, client: Client, brand):
        response = post_json(client, "/api/brand-chat", {"brand_id": str(brand.id), "prompt": "Ideas?"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["fallback"] is True
        assert data["error"]
        assert data["response"].startswith("(Northwind Coffee) Ideas?")
        assert data["insights"] == []

    @patch(f"{VIEWS}.generate_brand_chat_response")
    @patch(f"{VIEWS}.get_brand_insights")
    def test_passes_history_and_insights(self, mock_insights, mock_generate, client: Client, brand):
        insight = BrandVectorMatch.from_row({"id": "1", "type": "topic", "content": "Topic: Brewing tips"})
        mock_insights.return_value = [insight]
        mock_generate.return_value = ChatReply(response="Let's do a V60 reel.", fallback=False)
        history = [{"role": "system", "content": "x"}] + [
            {"role": "user" if i % 2 == 0 else "assistant", "content": f"m{i}"} for i in range(7)
        ]

        response = post_json(
            client,
            "/api/brand-chat",
            {"brand_id": str(brand.id), "prompt": "Ideas?", "history": history},
        )

        data = response.json()
        assert data["response"] == "Let's do a V60 reel."
        assert data["fallback"] is False
        assert data["insights"][0]["content"] == "Topic: Brewing tips"
        mock_insights.assert_called_once_with(brand.id, "Ideas?", 6)
        kwargs = mock_generate.call_args.kwargs
        assert [m.content for m in kwargs["history"]] == ["m2", "m3", "m4", "m5", "m6"]
        assert kwargs["context_summary"].startswith("Brand name: Northwind Coffee")

    def test_missing_prompt(self, client: Client, brand):
        response = post_json(client, "/api/brand-chat", {"brand_id": str(brand.id)})

        assert response.status_code == 400
        assert response.json()["error"] == "brand_id and prompt are required"

    def test_unknown_brand(self, client: Client):
        response = post_json(client, "/api/brand-chat", {"brand_id": str(uuid4()), "prompt": "hi"})

        assert response.status_code == 404

    def test_invalid_json(self, client: Client):
        response = client.post("/api/brand-chat", data="{nope", content_type="application/json")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON body"


@pytest.mark.django_db
class TestBrandIngest:
    @patch(f"{VIEWS}.ingest_brand_profile", return_value=6)
    def test_ingests_brand_and_topics(self, mock_ingest, client: Client, brand, topics):
        response = post_json(client, "/api/brand-ingest", {"brand_id": str(brand.id)})

        assert response.status_code == 200
        assert response.json() == {"success": True, "entries": 6}
        args = mock_ingest.call_args.args
        assert args[0] == brand
        assert {t.label for t in args[1]} == {"Brewing tips", "Origin stories", "Team moments"}

    def test_unknown_brand(self, client: Client):
        response = post_json(client, "/api/brand-ingest", {"brand_id": "not-a-uuid"})

        assert response.status_code == 404
        assert response.json()["error"] == "Brand not found"

    def test_supabase_unconfigured_returns_500(self, client: Client, brand):
        response = post_json(client, "/api/brand-ingest", {"brand_id": str(brand.id)})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to ingest brand"


@pytest.mark.django_db
class TestBrainUpload:
    @patch(f"{VIEWS}.get_brand_insights", return_value=[])
    @patch(f"{VIEWS}.generate_brand_chat_response")
    def test_summarizes_files(self, mock_generate, _insights, client: Client, brand):
        mock_generate.return_value = ChatReply(response="Next: cut the B-roll.", fallback=False)

        response = post_json(
            client,
            "/api/brain/upload",
            {"brand_id": str(brand.id), "files": [{"name": "shoot.mov", "size": 1024}]},
        )

        assert response.json() == {"success": True, "summary": "Next: cut the B-roll."}
        kwargs = mock_generate.call_args.kwargs
        assert kwargs["context_summary"].endswith("(Uploaded files processed)")
        assert kwargs["prompt"].startswith("Review these files and summarize next steps: [")
        assert "shoot.mov" in kwargs["prompt"]

    def test_missing_files(self, client: Client, brand):
        response = post_json(client, "/api/brain/upload", {"brand_id": str(brand.id), "files": []})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing brand_id or files"
