"""
ElevenLabs text-to-speech client.

Two primitives:
1. fetch_voices() -> list[dict]
2. generate_speech(text, voice_id, ...) -> SpeechResult

Endpoints (https://api.elevenlabs.io/v1):
- GET  /voices
- POST /text-to-speech/{voice_id}/with-timestamps  - base64 audio + character alignment
- POST /text-to-speech/{voice_id}                  - raw audio/mpeg (fallback)

Authentication via the xi-api-key header.
"""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"
DEFAULT_MODEL_ID = "eleven_multilingual_v2"
REQUEST_TIMEOUT_S = 60


class ElevenLabsError(Exception):
    """Raised when ElevenLabs is unconfigured or returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.message = message
        self.status_code = status_code
        self.body = body[:500] if body else None
        super().__init__(message)


@dataclass
class SpeechResult:
    """
    Synthesized speech.

    alignment is the provider's character alignment payload as returned, or
    None when the fallback endpoint (audio only) had to be used.
    """

    audio_base64: str
    model_id: str
    alignment: Any = None


class ElevenLabsClient:
    """HTTP client for the ElevenLabs v1 API."""

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL):
        if not api_key:
            raise ElevenLabsError("ELEVENLABS_API_KEY is not configured")
        self.base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update({"xi-api-key": api_key})

    def fetch_voices(self) -> list[dict[str, Any]]:
        """List the voices available to this account."""
        response = self._request(
            "GET",
            "/voices",
            operation="voices",
            headers={"Accept": "application/json"},
        )
        try:
            payload = response.json()
        except ValueError:
            payload = None

        voices = (payload.get("voices") or []) if isinstance(payload, dict) else None
        if not isinstance(voices, list):
            raise ElevenLabsError(
                "ElevenLabs returned an invalid voices payload",
                status_code=response.status_code,
                body=response.text,
            )
        return voices

    def generate_speech(
        self,
        text: str,
        voice_id: str,
        model_id: str = DEFAULT_MODEL_ID,
        voice_settings: dict[str, Any] | None = None,
    ) -> SpeechResult:
        """
        Synthesize text with the given voice.

        Tries the with-timestamps endpoint first so captions can be aligned.
        If that fails for any reason, requests plain audio/mpeg and returns it
        base64-encoded with no alignment. Errors from the fallback propagate.
        """
        body: dict[str, Any] = {"text": text, "model_id": model_id}
        if voice_settings:
            body["voice_settings"] = voice_settings
        voice_path = quote(voice_id, safe="")

        try:
            response = self._request(
                "POST",
                f"/text-to-speech/{voice_path}/with-timestamps",
                operation="speech_timestamps",
                json=body,
                headers={"Accept": "application/json"},
            )
            data = response.json()
            audio = data.get("audio_base64") or data.get("audio")
            if not audio:
                raise ElevenLabsError("ElevenLabs did not return audio data")
            return SpeechResult(
                audio_base64=audio,
                model_id=data.get("model_id") or model_id,
                alignment=data.get("alignment"),
            )
        except (ElevenLabsError, ValueError) as exc:
            logger.warning(
                "ELEVENLABS_TIMESTAMPS_FALLBACK voice_id=%s error=%s", voice_id, exc
            )

        response = self._request(
            "POST",
            f"/text-to-speech/{voice_path}",
            operation="speech",
            json=body,
            headers={"Accept": "audio/mpeg"},
        )
        return SpeechResult(
            audio_base64=base64.b64encode(response.content).decode("ascii"),
            model_id=model_id,
        )

    def _request(self, method: str, path: str, *, operation: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}{path}"
        call_start_ms = time.monotonic() * 1000
        logger.info("ELEVENLABS_CALL_START op=%s url=%s", operation, url)

        try:
            response = self._session.request(method, url, timeout=REQUEST_TIMEOUT_S, **kwargs)
        except requests.RequestException as e:
            duration_ms = int(time.monotonic() * 1000 - call_start_ms)
            logger.error(
                "ELEVENLABS_CALL_ERROR op=%s status=NETWORK duration_ms=%d error=%s",
                operation,
                duration_ms,
                str(e),
            )
            raise ElevenLabsError(f"Request to ElevenLabs failed: {e}") from e

        duration_ms = int(time.monotonic() * 1000 - call_start_ms)
        if not response.ok:
            logger.error(
                "ELEVENLABS_CALL_ERROR op=%s status=HTTP_ERROR duration_ms=%d http_status=%d error=%s",
                operation,
                duration_ms,
                response.status_code,
                response.text[:200],
            )
            raise ElevenLabsError(
                response.text.strip()[:500] or f"ElevenLabs request failed with {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info(
            "ELEVENLABS_CALL_COMPLETE op=%s duration_ms=%d http_status=%d",
            operation,
            duration_ms,
            response.status_code,
        )
        return response


def get_default_client() -> ElevenLabsClient:
    """
    Build a client from Django settings.

    Raises:
        ElevenLabsError: If ELEVENLABS_API_KEY is not set
    """
    return ElevenLabsClient(
        api_key=getattr(settings, "ELEVENLABS_API_KEY", ""),
        base_url=getattr(settings, "ELEVENLABS_BASE_URL", DEFAULT_BASE_URL),
    )
