"""
Media HTTP tests: ElevenLabs, Sora (Kie.ai), captions, video proxy.

Provider clients are patched at the package level the views resolve them
from; with nothing patched, settings_test leaves both unconfigured.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.test import Client

from lumora.integrations.elevenlabs import ElevenLabsError, SpeechResult
from lumora.integrations.kie import KieError, TaskStatus

ELEVENLABS_CLIENT = "lumora.integrations.elevenlabs.get_default_client"
KIE_CLIENT = "lumora.integrations.kie.get_default_client"
UPSTREAM_GET = "lumora.media.api.views.requests.get"

VIDEO_URL = "https://tempfile.aiquickdraw.com/r/abc.mp4"


def post_json(client: Client, url: str, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def alignment_payload(text):
    return {
        "characters": list(text),
        "character_start_times_seconds": [round(i * 0.1, 3) for i in range(len(text))],
        "character_end_times_seconds": [round((i + 1) * 0.1, 3) for i in range(len(text))],
    }


# =============================================================================
# ELEVENLABS
# =============================================================================


class TestElevenLabsVoices:
    @patch(ELEVENLABS_CLIENT)
    def test_lists_voices(self, mock_factory, client: Client):
        mock_factory.return_value.fetch_voices.return_value = [{"voice_id": "v1", "name": "Rachel"}]

        response = client.get("/api/elevenlabs/voices")

        assert response.status_code == 200
        assert response.json() == {"success": True, "voices": [{"voice_id": "v1", "name": "Rachel"}]}

    def test_unconfigured_is_500(self, client: Client):
        response = client.get("/api/elevenlabs/voices")

        assert response.status_code == 500
        assert response.json()["error"] == "ELEVENLABS_API_KEY is not configured"

    @patch(ELEVENLABS_CLIENT)
    def test_provider_error_is_502(self, mock_factory, client: Client):
        mock_factory.return_value.fetch_voices.side_effect = ElevenLabsError("quota exceeded", status_code=429)

        response = client.get("/api/elevenlabs/voices")

        assert response.status_code == 502
        assert response.json()["error"] == "quota exceeded"


class TestElevenLabsSpeech:
    @patch(ELEVENLABS_CLIENT)
    def test_returns_audio_and_words(self, mock_factory, client: Client):
        mock_factory.return_value.generate_speech.return_value = SpeechResult(
            audio_base64="QUJD",
            model_id="eleven_multilingual_v2",
            alignment=alignment_payload("Hi there"),
        )

        response = post_json(client, "/api/elevenlabs/speech", {"text": "Hi there", "voice_id": "v1"})

        assert response.status_code == 200
        data = response.json()
        assert data["audio_base64"] == "QUJD"
        assert data["model_id"] == "eleven_multilingual_v2"
        assert data["words"] == [
            {"id": "w1", "text": "Hi", "start": 0.0, "end": 0.2},
            {"id": "w2", "text": "there", "start": 0.3, "end": 0.8},
        ]
        call = mock_factory.return_value.generate_speech.call_args
        assert call.args == ("Hi there", "v1")
        assert call.kwargs["model_id"] == "eleven_multilingual_v2"
        assert call.kwargs["voice_settings"] is None

    @patch(ELEVENLABS_CLIENT)
    def test_without_alignment_spreads_words(self, mock_factory, client: Client):
        mock_factory.return_value.generate_speech.return_value = SpeechResult(audio_base64="QUJD", model_id="m")

        response = post_json(client, "/api/elevenlabs/speech", {"text": "one two", "voice_id": "v1"})

        assert [(w["start"], w["end"]) for w in response.json()["words"]] == [(0.0, 0.4), (0.4, 0.8)]

    @patch(ELEVENLABS_CLIENT)
    def test_malformed_alignment_is_ignored(self, mock_factory, client: Client):
        mock_factory.return_value.generate_speech.return_value = SpeechResult(
            audio_base64="QUJD",
            model_id="m",
            alignment={"characters": ["a", "b"], "character_start_times_seconds": [0.0]},
        )

        response = post_json(client, "/api/elevenlabs/speech", {"text": "ab", "voice_id": "v1"})

        assert response.status_code == 200
        assert response.json()["words"] == [{"id": "w1", "text": "ab", "start": 0.0, "end": 0.4}]

    @patch(ELEVENLABS_CLIENT)
    def test_null_alignment_time_is_ignored(self, mock_factory, client: Client):
        mock_factory.return_value.generate_speech.return_value = SpeechResult(
            audio_base64="QUJD",
            model_id="m",
            alignment={"characters": ["a", "b"], "character_start_times_seconds": [0.0, None]},
        )

        response = post_json(client, "/api/elevenlabs/speech", {"text": "ab", "voice_id": "v1"})

        assert response.status_code == 200
        assert response.json()["words"] == [{"id": "w1", "text": "ab", "start": 0.0, "end": 0.4}]

    @pytest.mark.parametrize("payload", [{"text": "hi"}, {"voice_id": "v1"}, {"text": "  ", "voice_id": "v1"}])
    def test_requires_text_and_voice(self, client: Client, payload):
        response = post_json(client, "/api/elevenlabs/speech", payload)

        assert response.status_code == 400
        assert response.json()["error"] == "text and voice_id are required"


# =============================================================================
# SORA
# =============================================================================


class TestSoraCreate:
    @patch(KIE_CLIENT)
    def test_creates_task(self, mock_factory, client: Client):
        mock_factory.return_value.create_sora_task.return_value = "task-1"

        response = post_json(
            client,
            "/api/sora/create",
            {"prompt": "  Latte art close-up ", "aspect_ratio": "portrait", "n_frames": 15},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "task_id": "task-1"}
        call = mock_factory.return_value.create_sora_task.call_args
        assert call.args == ("Latte art close-up",)
        assert call.kwargs == {
            "aspect_ratio": "portrait",
            "n_frames": "15",
            "remove_watermark": True,
            "callback_url": None,
        }

    @pytest.mark.parametrize(
        "payload,error",
        [
            ({"prompt": ""}, "Prompt is required and must be a non-empty string"),
            ({"prompt": 12}, "Prompt is required and must be a non-empty string"),
            ({"prompt": "p", "aspect_ratio": "square"}, "aspect_ratio must be landscape or portrait"),
            ({"prompt": "p", "n_frames": "20"}, "n_frames must be 10 or 15"),
        ],
    )
    def test_validation(self, client: Client, payload, error):
        response = post_json(client, "/api/sora/create", payload)

        assert response.status_code == 400
        assert response.json()["error"] == error

    def test_unconfigured_is_500(self, client: Client):
        response = post_json(client, "/api/sora/create", {"prompt": "p"})

        assert response.status_code == 500
        assert response.json()["error"] == "KIE_API_KEY is not configured"

    @patch(KIE_CLIENT)
    def test_provider_error_is_502(self, mock_factory, client: Client):
        mock_factory.return_value.create_sora_task.side_effect = KieError("Insufficient credits")

        response = post_json(client, "/api/sora/create", {"prompt": "p"})

        assert response.status_code == 502
        assert response.json()["error"] == "Insufficient credits"


class TestSoraStatus:
    @patch(KIE_CLIENT)
    def test_returns_status(self, mock_factory, client: Client):
        mock_factory.return_value.query_task_status.return_value = TaskStatus.from_payload(
            {"taskId": "task-1", "state": "success", "resultJson": '{"resultUrls": ["v.mp4"]}'}
        )

        response = client.get("/api/sora/status?task_id=task-1")

        status = response.json()["status"]
        assert status["state"] == "success"
        assert status["parsed_results"]["result_urls"] == ["v.mp4"]
        mock_factory.return_value.query_task_status.assert_called_once_with("task-1")

    def test_requires_task_id(self, client: Client):
        response = client.get("/api/sora/status")

        assert response.status_code == 400
        assert response.json()["error"] == "task_id parameter is required"


class TestSoraGenerateCaptions:
    def test_vtt_by_default(self, client: Client):
        alignment = [
            {"character": c, "start": round(i * 0.1, 3), "end": round((i + 1) * 0.1, 3)}
            for i, c in enumerate("Hi there friend")
        ]

        response = post_json(client, "/api/sora/generate-captions", {"alignment": alignment})

        data = response.json()
        assert data["count"] == 2
        assert data["captions"][0]["text"] == "Hi there"
        assert data["formatted"].startswith("WEBVTT\n\n1\n00:00:00.000 --> 00:00:00.900\nHi there\n")

    def test_srt_with_custom_grouping(self, client: Client):
        alignment = [
            {"character": c, "start": round(i * 0.1, 3), "end": round((i + 1) * 0.1, 3)}
            for i, c in enumerate("Hi there friend")
        ]

        response = post_json(
            client,
            "/api/sora/generate-captions",
            {"alignment": alignment, "format": "srt", "max_words_per_caption": 3},
        )

        data = response.json()
        assert data["count"] == 1
        assert data["formatted"] == "1\n00:00:00,000 --> 00:00:01,500\nHi there friend\n"

    def test_word_by_word(self, client: Client):
        alignment = [{"character": c, "start": i * 0.1} for i, c in enumerate("a b")]

        response = post_json(client, "/api/sora/generate-captions", {"alignment": alignment, "format": "word-by-word"})

        data = response.json()
        assert [c["text"] for c in data["captions"]] == ["a", "b"]
        assert json.loads(data["formatted"])[1]["text"] == "b"

    @pytest.mark.parametrize(
        "payload,error",
        [
            ({}, "Alignment data is required and must be a non-empty array"),
            ({"alignment": []}, "Alignment data is required and must be a non-empty array"),
            ({"alignment": [{"character": "a", "start": 0}], "format": "ass"}, "format must be one of: srt, vtt, json, word-by-word"),
        ],
    )
    def test_validation(self, client: Client, payload, error):
        response = post_json(client, "/api/sora/generate-captions", payload)

        assert response.status_code == 400
        assert response.json()["error"] == error

    def test_malformed_alignment(self, client: Client):
        response = post_json(client, "/api/sora/generate-captions", {"alignment": [{"character": "a"}]})

        assert response.status_code == 400

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_json_literals_rejected(self, client: Client, literal):
        body = '{"alignment": [{"character": "a", "start": %s}], "format": "vtt"}' % literal

        response = client.post("/api/sora/generate-captions", data=body, content_type="application/json")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid JSON body"}


# =============================================================================
# VIDEO PROXY
# =============================================================================


def upstream_response(status_code=200, headers=None, chunks=(b"abc", b"def")):
    upstream = MagicMock()
    upstream.status_code = status_code
    upstream.ok = status_code < 400
    upstream.headers = headers or {}
    upstream.iter_content.return_value = iter(chunks)
    return upstream


class TestVideoProxy:
    @patch(UPSTREAM_GET)
    def test_streams_with_range(self, mock_get, client: Client):
        upstream = upstream_response(
            206,
            {"Content-Type": "video/mp4", "Content-Length": "6", "Content-Range": "bytes 0-5/100", "Accept-Ranges": "bytes"},
        )
        mock_get.return_value = upstream

        response = client.get("/api/video/proxy", {"url": VIDEO_URL}, HTTP_RANGE="bytes=0-5")

        assert response.status_code == 206
        assert b"".join(response.streaming_content) == b"abcdef"
        assert response["Content-Type"] == "video/mp4"
        assert response["Content-Range"] == "bytes 0-5/100"
        assert response["Cache-Control"] == "private, max-age=86400, immutable"
        assert mock_get.call_args.kwargs["headers"] == {"Range": "bytes=0-5"}
        assert mock_get.call_args.kwargs["stream"] is True
        upstream.close.assert_called_once()

    @pytest.mark.parametrize(
        "url,status,error",
        [
            (None, 400, "url query parameter is required"),
            ("not a url", 400, "Invalid url parameter"),
            ("ftp://tempfile.aiquickdraw.com/a.mp4", 400, "Only http/https protocols are supported"),
            ("https://evil.example.com/a.mp4", 403, "Host is not allowed for proxying"),
        ],
    )
    def test_rejections(self, client: Client, url, status, error):
        params = {"url": url} if url else {}

        response = client.get("/api/video/proxy", params)

        assert response.status_code == status
        assert response.json()["error"] == error

    @patch(UPSTREAM_GET)
    def test_upstream_error_status_passes_through(self, mock_get, client: Client):
        mock_get.return_value = upstream_response(404)

        response = client.get("/api/video/proxy", {"url": VIDEO_URL})

        assert response.status_code == 404
        assert response.json()["error"] == "Failed to fetch upstream resource (404)"

    @patch(UPSTREAM_GET, side_effect=requests.ConnectionError("reset"))
    def test_network_error_is_502(self, _mock_get, client: Client):
        response = client.get("/api/video/proxy", {"url": VIDEO_URL})

        assert response.status_code == 502


# =============================================================================
# CAPTION PRESETS
# =============================================================================


class TestCaptionPresetsEndpoint:
    def test_lists_presets(self, client: Client):
        data = client.get("/api/captions/presets").json()

        assert data["default_style"]["font_family"] == "Inter"
        assert [p["id"] for p in data["presets"]] == ["glass-blue", "electric", "minimal"]

    def test_single_preset(self, client: Client):
        data = client.get("/api/captions/presets?id=electric").json()

        assert data["preset"]["style"]["uppercase"] is True

    def test_unknown_preset(self, client: Client):
        response = client.get("/api/captions/presets?id=neon")

        assert response.status_code == 404
