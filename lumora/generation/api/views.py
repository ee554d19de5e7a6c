"""
Generation API views.

- POST /api/generate - one content item + generations for topic/platform/date
- POST /api/bulk - N days of content with weighted topic selection
- POST /api/brand-suggestions - onboarding suggestion chips (fallback aware)
- GET /api/topics/:brand_id/variety - distinct weighted topics avoiding recent ones
- POST /api/youtube/transcript - fetch a YouTube transcript
- POST /api/youtube/refine - LLM script upgrade for a transcript
"""

from __future__ import annotations

import logging
from datetime import date

from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from pydantic import ValidationError

from lumora.core.api.responses import (
    InvalidJSONBody,
    error_response,
    parse_json_body,
    parse_uuid,
    success_response,
)
from lumora.core.dto import summarize_validation_error
from lumora.core.models import Brand, Topic
from lumora.core.serializers import content_item_to_dict, generation_to_dict, topic_to_dict
from lumora.generation.bulk import MAX_BULK_DAYS, run_bulk_generation
from lumora.generation.content_engine import generate_script_upgrade
from lumora.generation.dto import ScriptUpgradeRequest
from lumora.generation.runner import (
    SUPPORTED_PLATFORMS,
    generate_and_store_content,
    load_generation_context,
)
from lumora.generation.suggestions import suggest_brand_foundations
from lumora.generation.topics import get_topic_variety
from lumora.integrations.deepseek import DeepSeekError
from lumora.integrations.youtube import YoutubeTranscriptError, fetch_transcript

logger = logging.getLogger(__name__)


def _deepseek_error_response(exc: DeepSeekError) -> JsonResponse:
    return error_response(exc.message, status=exc.status or 500, code=exc.code)


def _parse_date(value) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return parse_date(value[:10])
    except ValueError:
        return None


def _normalized_platform(value) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


# =============================================================================
# CONTENT GENERATION
# =============================================================================


@csrf_exempt
@require_http_methods(["POST"])
def generate(request) -> JsonResponse:
    """
    POST /api/generate

    Request JSON:
    {"brand_id": "uuid", "topic": "...", "platform": "tiktok", "date_target": "YYYY-MM-DD"}

    Response 200:
    {"success": true, "content_item": {...}, "generations": [...], "generated": {...}, "topic": "..."}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body.get("brand_id"))
    topic = body.get("topic").strip() if isinstance(body.get("topic"), str) else ""
    platform = _normalized_platform(body.get("platform"))

    if not brand_id or not topic or platform not in SUPPORTED_PLATFORMS:
        return error_response("Brand, topic, and supported platform are required.")

    date_target = _parse_date(body.get("date_target"))
    if date_target is None:
        return error_response("A valid target date is required.")

    try:
        context = load_generation_context(brand_id)
    except Brand.DoesNotExist:
        return error_response("Brand not found", status=404)

    try:
        result = generate_and_store_content(context, topic, platform, date_target)
    except DeepSeekError as exc:
        logger.warning("Generate failed brand_id=%s code=%s: %s", brand_id, exc.code, exc.message)
        return _deepseek_error_response(exc)
    except Exception:
        logger.exception("Generate failed brand_id=%s", brand_id)
        return error_response("Failed to generate content", status=500)

    return success_response(
        content_item=content_item_to_dict(result.content_item),
        generations=[generation_to_dict(g) for g in result.generations],
        generated=result.generated.model_dump(),
        topic=result.topic,
    )


@csrf_exempt
@require_http_methods(["POST"])
def bulk(request) -> JsonResponse:
    """
    POST /api/bulk

    Request JSON:
    {"brand_id": "uuid", "platform": "tiktok", "days": 7, "start_date"?: "YYYY-MM-DD"}

    Response 200:
    {"success": true, "results": [...], "summary": {"requested", "successes", "failures"}}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body.get("brand_id"))
    platform = _normalized_platform(body.get("platform"))
    if not brand_id or platform not in SUPPORTED_PLATFORMS:
        return error_response("Brand and supported platform are required.")

    days = body.get("days")
    if (
        isinstance(days, bool)
        or not isinstance(days, (int, float))
        or not float(days).is_integer()
        or not 1 <= days <= MAX_BULK_DAYS
    ):
        return error_response(f"Days must be between 1 and {MAX_BULK_DAYS}.")

    raw_start = body.get("start_date")
    start_date = _parse_date(raw_start) if raw_start else timezone.localdate()
    if start_date is None:
        return error_response("A valid start date is required.")

    try:
        context = load_generation_context(brand_id)
    except Brand.DoesNotExist:
        return error_response("Brand not found", status=404)

    topics = list(Topic.objects.filter(brand_id=brand_id).order_by("-weight"))
    if not topics:
        return error_response("No topics configured for this brand.")

    results, summary = run_bulk_generation(context, topics, platform, int(days), start_date)

    return success_response(
        results=[result.to_dict() for result in results],
        summary={
            "requested": summary.requested,
            "successes": summary.successes,
            "failures": summary.failures,
        },
    )


# =============================================================================
# BRAND SUGGESTIONS + TOPIC VARIETY
# =============================================================================


@csrf_exempt
@require_http_methods(["POST"])
def brand_suggestions(request) -> JsonResponse:
    """
    POST /api/brand-suggestions

    Request JSON: {"name": "...", "mission": "..."}

    Response 200:
    {"success": true, "suggestions": {...}, "fallback"?: true, "error"?: "..."}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    name = body.get("name")
    mission = body.get("mission")
    if not isinstance(name, str) or not name.strip() or not isinstance(mission, str) or not mission.strip():
        return error_response("Missing name or mission")

    try:
        result = suggest_brand_foundations(name.strip(), mission.strip())
    except DeepSeekError as exc:
        return error_response(exc.message, status=exc.status or 500)

    payload = {"suggestions": result.suggestions.model_dump()}
    if result.fallback:
        payload["fallback"] = True
    if result.error:
        payload["error"] = result.error
    return success_response(**payload)


@require_http_methods(["GET"])
def topic_variety(request, brand_id: str) -> JsonResponse:
    """
    GET /api/topics/:brand_id/variety?count=3&recent=<id>,<id>

    Response 200: {"success": true, "topics": [...]}
    """
    parsed_id = parse_uuid(brand_id)
    if not parsed_id:
        return error_response("Invalid brand_id")

    try:
        count = int(request.GET.get("count", "3"))
    except ValueError:
        return error_response("count must be an integer")
    if count < 1:
        return error_response("count must be at least 1")

    recent = [value for value in request.GET.get("recent", "").split(",") if value]
    topics = list(Topic.objects.filter(brand_id=parsed_id).order_by("-weight"))
    selected = get_topic_variety(topics, count, recent)
    return success_response(topics=[topic_to_dict(t) for t in selected])


# =============================================================================
# YOUTUBE
# =============================================================================


@csrf_exempt
@require_http_methods(["POST"])
def youtube_transcript(request) -> JsonResponse:
    """
    POST /api/youtube/transcript

    Request JSON: {"url": "https://youtu.be/...", "language"?: "en"}

    Response 200: {"success": true, "transcript": TranscriptPayload}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    url = body.get("url")
    if not isinstance(url, str) or not url.strip():
        return error_response("A valid YouTube URL or ID is required.")

    language = body.get("language") if isinstance(body.get("language"), str) else None

    try:
        transcript = fetch_transcript(url, language)
    except YoutubeTranscriptError as exc:
        return error_response(exc.message)
    except Exception:
        logger.exception("Transcript fetch failed url=%s", url)
        return error_response("Failed to fetch the YouTube transcript.", status=500)

    return success_response(transcript=transcript.to_dict())


@csrf_exempt
@require_http_methods(["POST"])
def youtube_refine(request) -> JsonResponse:
    """
    POST /api/youtube/refine

    Request JSON: ScriptUpgradeRequest
    {"transcript_text": "...", "video_title": "...", "duration_seconds"?, "channel_name"?,
     "goal"?, "issues"?, "audience"?, "tone"?, "call_to_action"?}

    Response 200: {"success": true, "upgrade": ScriptUpgrade}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    if not body.get("transcript_text") or not body.get("video_title"):
        return error_response("Transcript text and video title are required.")

    try:
        upgrade_request = ScriptUpgradeRequest.model_validate(body)
    except ValidationError as exc:
        return error_response(summarize_validation_error(exc))

    try:
        upgrade = generate_script_upgrade(upgrade_request)
    except DeepSeekError as exc:
        return _deepseek_error_response(exc)
    except Exception:
        logger.exception("Script refinement failed")
        return error_response("Failed to generate the upgraded script.", status=500)

    return success_response(upgrade=upgrade.model_dump())
