"""
Media API views.

- GET /api/elevenlabs/voices - TTS voices for the account
- POST /api/elevenlabs/speech - synthesize speech + timed words
- POST /api/sora/create - start a Sora 2 text-to-video task
- GET /api/sora/status - task state + parsed result urls
- POST /api/sora/generate-captions - captions from character alignment
- GET /api/video/proxy - stream an allow-listed video with Range support
- GET /api/captions/presets - default caption style and named presets
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import requests
from django.conf import settings
from django.http import JsonResponse, StreamingHttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from lumora.core.api.responses import (
    InvalidJSONBody,
    error_response,
    parse_json_body,
    success_response,
)
from lumora.integrations import elevenlabs, kie
from lumora.media.captions import (
    CaptionOptions,
    alignment_from_payload,
    build_words_from_alignment,
    format_as_json,
    format_as_srt,
    format_as_vtt,
    generate_captions,
    generate_word_captions,
)
from lumora.media.presets import CAPTION_PRESETS, DEFAULT_CAPTION_STYLE, get_caption_preset

logger = logging.getLogger(__name__)

CAPTION_FORMATS = ("srt", "vtt", "json", "word-by-word")
ASPECT_RATIOS = ("landscape", "portrait")
FRAME_COUNTS = ("10", "15")

PROXY_CHUNK_BYTES = 64 * 1024
PROXY_TIMEOUT_S = 30
PROXY_PASSTHROUGH_HEADERS = ("Content-Type", "Content-Length", "Accept-Ranges", "Content-Range")
PROXY_CACHE_CONTROL = "private, max-age=86400, immutable"


def _provider_error(exc, provider: str) -> JsonResponse:
    logger.warning("%s call failed status=%s: %s", provider, exc.status_code, exc.message)
    return error_response(exc.message, status=502)


def _positive_int(value) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return None
    return value


# =============================================================================
# ELEVENLABS
# =============================================================================


@require_http_methods(["GET"])
def elevenlabs_voices(request) -> JsonResponse:
    """
    GET /api/elevenlabs/voices

    Response 200: {"success": true, "voices": [{"voice_id", "name", ...}]}
    """
    try:
        client = elevenlabs.get_default_client()
    except elevenlabs.ElevenLabsError as exc:
        return error_response(exc.message, status=500)

    try:
        voices = client.fetch_voices()
    except elevenlabs.ElevenLabsError as exc:
        return _provider_error(exc, "ElevenLabs")

    return success_response(voices=voices)


@csrf_exempt
@require_http_methods(["POST"])
def elevenlabs_speech(request) -> JsonResponse:
    """
    POST /api/elevenlabs/speech

    Request JSON:
    {"text": "...", "voice_id": "...", "model_id"?: "...", "voice_settings"?: {...}}

    Response 200:
    {"success": true, "audio_base64": "...", "words": [{"id", "text", "start", "end"}], "model_id": "..."}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    text = body.get("text")
    voice_id = body.get("voice_id")
    if not isinstance(text, str) or not text.strip() or not isinstance(voice_id, str) or not voice_id:
        return error_response("text and voice_id are required")

    model_id = body.get("model_id") or elevenlabs.DEFAULT_MODEL_ID
    voice_settings = body.get("voice_settings") if isinstance(body.get("voice_settings"), dict) else None

    try:
        client = elevenlabs.get_default_client()
    except elevenlabs.ElevenLabsError as exc:
        return error_response(exc.message, status=500)

    try:
        result = client.generate_speech(text, voice_id, model_id=model_id, voice_settings=voice_settings)
    except elevenlabs.ElevenLabsError as exc:
        return _provider_error(exc, "ElevenLabs")

    try:
        alignment = alignment_from_payload(result.alignment)
    except ValueError as exc:
        logger.warning("Ignoring malformed speech alignment voice_id=%s: %s", voice_id, exc)
        alignment = []

    words = build_words_from_alignment(alignment, text)
    return success_response(
        audio_base64=result.audio_base64,
        words=[word.to_dict() for word in words],
        model_id=result.model_id,
    )


# =============================================================================
# SORA (KIE.AI)
# =============================================================================


@csrf_exempt
@require_http_methods(["POST"])
def sora_create(request) -> JsonResponse:
    """
    POST /api/sora/create

    Request JSON:
    {"prompt": "...", "aspect_ratio"?: "landscape|portrait", "n_frames"?: "10|15",
     "remove_watermark"?: true, "callback_url"?: "..."}

    Response 200: {"success": true, "task_id": "..."}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    prompt = body.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return error_response("Prompt is required and must be a non-empty string")

    aspect_ratio = body.get("aspect_ratio") or "landscape"
    if aspect_ratio not in ASPECT_RATIOS:
        return error_response("aspect_ratio must be landscape or portrait")

    n_frames = str(body.get("n_frames") or "10")
    if n_frames not in FRAME_COUNTS:
        return error_response("n_frames must be 10 or 15")

    remove_watermark = body.get("remove_watermark")
    callback_url = body.get("callback_url") if isinstance(body.get("callback_url"), str) else None

    try:
        client = kie.get_default_client()
    except kie.KieError as exc:
        return error_response(exc.message, status=500)

    try:
        task_id = client.create_sora_task(
            prompt.strip(),
            aspect_ratio=aspect_ratio,
            n_frames=n_frames,
            remove_watermark=True if remove_watermark is None else bool(remove_watermark),
            callback_url=callback_url,
        )
    except kie.KieError as exc:
        return _provider_error(exc, "Kie")

    return success_response(task_id=task_id)


@require_http_methods(["GET"])
def sora_status(request) -> JsonResponse:
    """
    GET /api/sora/status?task_id=...

    Response 200:
    {"success": true, "status": {"task_id", "state", ..., "parsed_results": {...} | null}}
    """
    task_id = request.GET.get("task_id", "").strip()
    if not task_id:
        return error_response("task_id parameter is required")

    try:
        client = kie.get_default_client()
    except kie.KieError as exc:
        return error_response(exc.message, status=500)

    try:
        status = client.query_task_status(task_id)
    except kie.KieError as exc:
        return _provider_error(exc, "Kie")

    return success_response(status=status.to_dict())


@csrf_exempt
@require_http_methods(["POST"])
def sora_generate_captions(request) -> JsonResponse:
    """
    POST /api/sora/generate-captions

    Request JSON:
    {"alignment": [{"character", "start", "end"}], "format"?: "srt|vtt|json|word-by-word",
     "max_words_per_caption"?: 2, "max_chars_per_caption"?: 20}

    Response 200: {"success": true, "captions": [...], "formatted": "...", "count": N}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    raw_alignment = body.get("alignment")
    if not isinstance(raw_alignment, list) or not raw_alignment:
        return error_response("Alignment data is required and must be a non-empty array")

    caption_format = body.get("format") or "vtt"
    if caption_format not in CAPTION_FORMATS:
        return error_response(f"format must be one of: {', '.join(CAPTION_FORMATS)}")

    try:
        alignment = alignment_from_payload(raw_alignment)
    except ValueError as exc:
        return error_response(str(exc))

    if caption_format == "word-by-word":
        captions = generate_word_captions(alignment)
        formatted = format_as_json(captions)
    else:
        options = CaptionOptions()
        max_words = _positive_int(body.get("max_words_per_caption"))
        max_chars = _positive_int(body.get("max_chars_per_caption"))
        if max_words:
            options.max_words_per_caption = max_words
        if max_chars:
            options.max_chars_per_caption = max_chars

        captions = generate_captions(alignment, options)
        if caption_format == "srt":
            formatted = format_as_srt(captions)
        elif caption_format == "json":
            formatted = format_as_json(captions)
        else:
            formatted = format_as_vtt(captions)

    return success_response(
        captions=[caption.to_dict() for caption in captions],
        formatted=formatted,
        count=len(captions),
    )


# =============================================================================
# VIDEO PROXY
# =============================================================================


def _stream_upstream(upstream: requests.Response):
    try:
        yield from upstream.iter_content(chunk_size=PROXY_CHUNK_BYTES)
    finally:
        upstream.close()


@require_http_methods(["GET"])
def video_proxy(request):
    """
    GET /api/video/proxy?url=https://tempfile.aiquickdraw.com/...

    Streams the upstream body. The Range header is forwarded so players can
    seek; 206 partial responses pass through unchanged.
    """
    target_url = request.GET.get("url")
    if not target_url:
        return error_response("url query parameter is required")

    try:
        parsed = urlparse(target_url)
    except ValueError:
        return error_response("Invalid url parameter")
    if not parsed.scheme or not parsed.netloc:
        return error_response("Invalid url parameter")

    if parsed.scheme not in ("http", "https"):
        return error_response("Only http/https protocols are supported")

    allowed_hosts = getattr(settings, "VIDEO_PROXY_ALLOWED_HOSTS", [])
    if parsed.hostname not in allowed_hosts:
        return error_response("Host is not allowed for proxying", status=403)

    upstream_headers = {}
    if request.headers.get("Range"):
        upstream_headers["Range"] = request.headers["Range"]

    try:
        upstream = requests.get(
            target_url,
            headers=upstream_headers,
            stream=True,
            timeout=PROXY_TIMEOUT_S,
        )
    except requests.RequestException as exc:
        logger.warning("Video proxy upstream failed host=%s: %s", parsed.hostname, exc)
        return error_response("Failed to fetch upstream resource", status=502)

    if not upstream.ok and upstream.status_code != 206:
        upstream.close()
        return error_response(
            f"Failed to fetch upstream resource ({upstream.status_code})",
            status=upstream.status_code,
        )

    response = StreamingHttpResponse(_stream_upstream(upstream), status=upstream.status_code)
    for header in PROXY_PASSTHROUGH_HEADERS:
        value = upstream.headers.get(header)
        if value:
            response[header] = value
    response["Cache-Control"] = PROXY_CACHE_CONTROL
    return response


# =============================================================================
# CAPTION PRESETS
# =============================================================================


@require_http_methods(["GET"])
def caption_presets(request) -> JsonResponse:
    """
    GET /api/captions/presets[?id=glass-blue]

    Response 200:
    {"success": true, "default_style": {...}, "presets": [{"id", "name", "description", "style"}]}
    or, with ?id=, {"success": true, "preset": {...}}
    """
    preset_id = request.GET.get("id")
    if preset_id:
        preset = get_caption_preset(preset_id)
        if preset is None:
            return error_response("Preset not found", status=404)
        return success_response(preset=preset.model_dump())

    return success_response(
        default_style=DEFAULT_CAPTION_STYLE.model_dump(),
        presets=[preset.model_dump() for preset in CAPTION_PRESETS],
    )
