"""
Brand brain API views.

- POST /api/brand-chat    - chat with the brand brain
- POST /api/brand-ingest  - (re)ingest brand profile + topics into brand_vectors
- POST /api/brain/upload  - summarise uploaded file descriptors into next steps
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from lumora.brandbrain.chat import ChatMessage, generate_brand_chat_response
from lumora.brandbrain.context import get_brand_brain_context, get_brand_insights
from lumora.brandbrain.ingestion import ingest_brand_profile
from lumora.core.api.responses import (
    InvalidJSONBody,
    error_response,
    parse_json_body,
    parse_uuid,
    success_response,
)
from lumora.core.models import Brand

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 5
CHAT_INSIGHT_LIMIT = 6
UPLOAD_INSIGHT_LIMIT = 5
UPLOAD_FILES_PREVIEW_CHARS = 2000


def _parse_history(raw) -> list[ChatMessage]:
    if not isinstance(raw, list):
        return []
    history = []
    for message in raw[-HISTORY_LIMIT:]:
        if not isinstance(message, dict):
            continue
        role = message.get("role")
        if role not in ("user", "assistant"):
            continue
        history.append(ChatMessage(role=role, content=str(message.get("content", ""))))
    return history


@csrf_exempt
@require_http_methods(["POST"])
def brand_chat(request) -> JsonResponse:
    """
    POST /api/brand-chat

    Request body:
        {"brand_id": "uuid", "prompt": "...", "history": [{"role", "content"}]}

    Response:
        {"success": true, "response", "fallback", "error", "insights": [...]}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body.get("brand_id"))
    prompt = body.get("prompt")
    if not brand_id or not isinstance(prompt, str) or not prompt.strip():
        return error_response("brand_id and prompt are required")

    try:
        context = get_brand_brain_context(brand_id)
        if context.brand is None:
            return error_response("Brand not found", status=404)

        insights = get_brand_insights(brand_id, prompt, CHAT_INSIGHT_LIMIT)
        reply = generate_brand_chat_response(
            brand_name=context.brand.name,
            context_summary=context.summary,
            history=_parse_history(body.get("history")),
            prompt=prompt,
            vector_insights=insights,
        )
    except Exception:
        logger.exception("Brand chat failed brand_id=%s", brand_id)
        return error_response("Failed to chat with brand", status=500)

    return success_response(
        response=reply.response,
        fallback=reply.fallback,
        error=reply.error,
        insights=[insight.to_dict() for insight in insights],
    )


@csrf_exempt
@require_http_methods(["POST"])
def brand_ingest(request) -> JsonResponse:
    """
    POST /api/brand-ingest

    Request body:
        {"brand_id": "uuid"}

    Response:
        {"success": true, "entries": 5}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body.get("brand_id"))
    brand = Brand.objects.filter(id=brand_id).first() if brand_id else None
    if brand is None:
        return error_response("Brand not found", status=404)

    try:
        entries = ingest_brand_profile(brand, brand.topics.all())
    except Exception:
        logger.exception("Brand ingest failed brand_id=%s", brand_id)
        return error_response("Failed to ingest brand", status=500)

    return success_response(entries=entries)


@csrf_exempt
@require_http_methods(["POST"])
def brain_upload(request) -> JsonResponse:
    """
    POST /api/brain/upload

    Request body:
        {"brand_id": "uuid", "files": [{"name": "...", ...}]}

    Response:
        {"success": true, "summary": "..."}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body.get("brand_id"))
    files = body.get("files")
    if not brand_id or not files:
        return error_response("Missing brand_id or files")

    try:
        context = get_brand_brain_context(brand_id)
        insights = get_brand_insights(brand_id, context.summary, UPLOAD_INSIGHT_LIMIT)
        preview = json.dumps(files)[:UPLOAD_FILES_PREVIEW_CHARS]
        reply = generate_brand_chat_response(
            brand_name=context.brand.name if context.brand else "Brand",
            context_summary=f"{context.summary}\n(Uploaded files processed)",
            history=[],
            prompt=f"Review these files and summarize next steps: {preview}",
            vector_insights=insights,
        )
    except Exception:
        logger.exception("Brain upload failed brand_id=%s", brand_id)
        return error_response("Failed to process files", status=500)

    return success_response(summary=reply.response)
