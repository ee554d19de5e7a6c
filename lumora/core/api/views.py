"""
Core API views.

Implements:
- GET /healthz - liveness + DB probe
- GET/POST /api/brands - list and create brands
- GET/PUT/DELETE /api/brands/:brand_id - read, update, delete a brand
- GET /api/topics/:brand_id - topic deck
- GET /api/brands/:brand_id/content - content items by date
- GET /api/brands/:brand_id/content/by-status - content grouped by stage
- POST /api/content - create content item
- GET/PATCH /api/content/:item_id - read / update content item
- GET /api/content/:item_id/generations - generations for an item
- GET/POST /api/brands/:brand_id/cameos - list / create cameos
- PATCH/DELETE /api/cameos/:cameo_id - update / delete cameo
- GET/POST /api/focus-sessions - list / log focus sessions
- GET /api/workflow/stages - the workflow stages

No auth.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import connection
from django.http import JsonResponse
from django.utils.dateparse import parse_date, parse_datetime
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from pydantic import ValidationError

from lumora.core import services
from lumora.core.api.responses import (
    InvalidJSONBody,
    error_response,
    parse_json_body,
    parse_uuid,
    success_response,
)
from lumora.core.dto import BrandForm, CameoUpdate, summarize_validation_error
from lumora.core.enums import ContentStatus
from lumora.core.models import Brand, Cameo, ContentItem
from lumora.core.serializers import (
    brand_to_dict,
    cameo_to_dict,
    content_item_to_dict,
    focus_session_to_dict,
    generation_to_dict,
    topic_to_dict,
)
from lumora.core.workflow import WORKFLOW_STAGES

logger = logging.getLogger(__name__)


# =============================================================================
# HEALTH
# =============================================================================


@require_http_methods(["GET"])
def healthz(request) -> JsonResponse:
    """
    GET /healthz

    Response 200: {"status": "ok", "service": "lumora-backend", "database": "ok"}
    Response 503: same shape with "database": "unavailable"
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        database = "ok"
    except Exception:
        logger.exception("Healthcheck database probe failed")
        database = "unavailable"

    return JsonResponse(
        {
            "status": "ok" if database == "ok" else "degraded",
            "service": "lumora-backend",
            "database": database,
        },
        status=200 if database == "ok" else 503,
    )


# =============================================================================
# BRANDS
# =============================================================================


def _parse_brand_form(request) -> BrandForm | JsonResponse:
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))
    try:
        return BrandForm.model_validate(body)
    except ValidationError as exc:
        return error_response(summarize_validation_error(exc))


@csrf_exempt
@require_http_methods(["GET", "POST"])
def brands_list_create(request) -> JsonResponse:
    """
    GET /api/brands - List all brands.
    POST /api/brands - Create a brand from the onboarding form.
    """
    if request.method == "GET":
        return _list_brands(request)
    return _create_brand(request)


def _list_brands(request) -> JsonResponse:
    """
    GET /api/brands

    Response 200: {"success": true, "brands": [...]}
    """
    brands = services.list_brands()
    return success_response(brands=[brand_to_dict(b) for b in brands])


def _create_brand(request) -> JsonResponse:
    """
    POST /api/brands

    Request JSON: BrandForm
    Response 201: {"success": true, "brand_id": "uuid"}
    """
    form = _parse_brand_form(request)
    if isinstance(form, JsonResponse):
        return form

    try:
        brand = services.create_brand(form)
    except Exception:
        logger.exception("Brand creation failed")
        return error_response("Failed to create brand", status=500)

    return success_response(status=201, brand_id=str(brand.id))


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def brand_detail(request, brand_id: str) -> JsonResponse:
    """
    GET/PUT/DELETE /api/brands/:brand_id
    """
    parsed_id = parse_uuid(brand_id)
    if not parsed_id:
        return error_response("Invalid brand_id")

    if request.method == "GET":
        return _get_brand(parsed_id)
    if request.method == "PUT":
        return _update_brand(request, parsed_id)
    return _delete_brand(parsed_id)


def _get_brand(brand_id) -> JsonResponse:
    """
    Response 200: {"success": true, "brand": {...}, "topics": [...]}
    Response 404 if not found.
    """
    try:
        brand, topics = services.get_brand_with_topics(brand_id)
    except Brand.DoesNotExist:
        return error_response("Brand not found", status=404)
    return success_response(
        brand=brand_to_dict(brand),
        topics=[topic_to_dict(t) for t in topics],
    )


def _update_brand(request, brand_id) -> JsonResponse:
    form = _parse_brand_form(request)
    if isinstance(form, JsonResponse):
        return form

    try:
        services.update_brand(brand_id, form)
    except Brand.DoesNotExist:
        return error_response("Brand not found", status=404)
    except Exception:
        logger.exception("Brand update failed brand_id=%s", brand_id)
        return error_response("Failed to update brand", status=500)

    return success_response()


def _delete_brand(brand_id) -> JsonResponse:
    try:
        services.delete_brand(brand_id)
    except Brand.DoesNotExist:
        return error_response("Brand not found", status=404)
    return success_response()


@require_http_methods(["GET"])
def brand_topics(request, brand_id: str) -> JsonResponse:
    """
    GET /api/topics/:brand_id

    Response 200: {"success": true, "topics": [...]} ordered by weight desc
    """
    parsed_id = parse_uuid(brand_id)
    if not parsed_id:
        return error_response("Invalid brand_id")
    topics = services.list_topics(parsed_id)
    return success_response(topics=[topic_to_dict(t) for t in topics])


# =============================================================================
# CONTENT
# =============================================================================


@require_http_methods(["GET"])
def brand_content(request, brand_id: str) -> JsonResponse:
    """
    GET /api/brands/:brand_id/content

    Response 200: {"success": true, "items": [...]} ordered by date_target
    """
    parsed_id = parse_uuid(brand_id)
    if not parsed_id:
        return error_response("Invalid brand_id")
    items = services.list_content_items(parsed_id)
    return success_response(items=[content_item_to_dict(i) for i in items])


@require_http_methods(["GET"])
def brand_content_by_status(request, brand_id: str) -> JsonResponse:
    """
    GET /api/brands/:brand_id/content/by-status

    Response 200: {"success": true, "by_status": {"idea": [...], ..., "published": [...]}}
    """
    parsed_id = parse_uuid(brand_id)
    if not parsed_id:
        return error_response("Invalid brand_id")
    grouped = services.content_items_by_status(parsed_id)
    return success_response(
        by_status={
            status: [content_item_to_dict(i) for i in items]
            for status, items in grouped.items()
        }
    )


@csrf_exempt
@require_http_methods(["POST"])
def content_create(request) -> JsonResponse:
    """
    POST /api/content

    Request JSON:
    {"brand_id": "uuid", "date_target": "YYYY-MM-DD", "platform": "tiktok", "status"?: "idea"}

    Response 201: {"success": true, "item": {...}}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body.get("brand_id"))
    platform = body.get("platform")
    if not brand_id or not isinstance(platform, str) or not platform.strip():
        return error_response("brand_id and platform are required")

    date_target = _parse_date(body.get("date_target"))
    if date_target is None:
        return error_response("A valid date_target is required")

    if not Brand.objects.filter(id=brand_id).exists():
        return error_response("Brand not found", status=404)

    try:
        item = services.create_content_item(
            brand_id=brand_id,
            date_target=date_target,
            platform=platform.strip().lower(),
            status=body.get("status") or ContentStatus.IDEA,
        )
    except ValueError as exc:
        return error_response(str(exc))

    return success_response(status=201, item=content_item_to_dict(item))


@csrf_exempt
@require_http_methods(["GET", "PATCH"])
def content_detail(request, item_id: str) -> JsonResponse:
    """
    GET /api/content/:item_id - item with its brand
    PATCH /api/content/:item_id - update status and/or notes/attachments
    """
    parsed_id = parse_uuid(item_id)
    if not parsed_id:
        return error_response("Invalid item_id")

    if request.method == "GET":
        return _get_content_item(parsed_id)
    return _patch_content_item(request, parsed_id)


def _get_content_item(item_id) -> JsonResponse:
    try:
        item = services.get_content_item(item_id)
    except ContentItem.DoesNotExist:
        return error_response("Content item not found", status=404)
    return success_response(item=content_item_to_dict(item), brand=brand_to_dict(item.brand))


def _patch_content_item(request, item_id) -> JsonResponse:
    """
    Request JSON (all keys optional; only keys present are written):
    {"status": "qc", "notes": "...", "attachments": {...}}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    details = {key: body[key] for key in ("notes", "attachments") if key in body}
    if "status" not in body and not details:
        return error_response("Nothing to update")

    try:
        if "status" in body:
            item = services.update_content_status(item_id, body["status"])
        if details:
            item = services.update_content_details(item_id, **details)
    except ContentItem.DoesNotExist:
        return error_response("Content item not found", status=404)
    except ValueError as exc:
        return error_response(str(exc))

    return success_response(item=content_item_to_dict(item))


@require_http_methods(["GET"])
def content_generations(request, item_id: str) -> JsonResponse:
    """
    GET /api/content/:item_id/generations

    Response 200: {"success": true, "generations": [...]} oldest first
    """
    parsed_id = parse_uuid(item_id)
    if not parsed_id:
        return error_response("Invalid item_id")
    generations = services.list_generations(parsed_id)
    return success_response(generations=[generation_to_dict(g) for g in generations])


# =============================================================================
# CAMEOS
# =============================================================================


@csrf_exempt
@require_http_methods(["GET", "POST"])
def cameos_list_create(request, brand_id: str) -> JsonResponse:
    """
    GET/POST /api/brands/:brand_id/cameos
    """
    parsed_id = parse_uuid(brand_id)
    if not parsed_id:
        return error_response("Invalid brand_id")

    if request.method == "GET":
        cameos = services.list_cameos(parsed_id)
        return success_response(cameos=[cameo_to_dict(c) for c in cameos])
    return _create_cameo(request, parsed_id)


def _create_cameo(request, brand_id) -> JsonResponse:
    """
    Request JSON:
    {"name": "...", "description": "...", "visual_description": "...",
     "reference_images"?: [...], "usage_notes"?: "..."}

    Response 201: {"success": true, "cameo": {...}}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    name = body.get("name")
    if not isinstance(name, str) or not name.strip():
        return error_response("name is required")

    if not Brand.objects.filter(id=brand_id).exists():
        return error_response("Brand not found", status=404)

    cameo = services.create_cameo(
        brand_id=brand_id,
        name=name.strip(),
        description=body.get("description") or "",
        visual_description=body.get("visual_description") or "",
        reference_images=body.get("reference_images"),
        usage_notes=body.get("usage_notes"),
    )
    return success_response(status=201, cameo=cameo_to_dict(cameo))


@csrf_exempt
@require_http_methods(["PATCH", "DELETE"])
def cameo_detail(request, cameo_id: str) -> JsonResponse:
    """
    PATCH/DELETE /api/cameos/:cameo_id
    """
    parsed_id = parse_uuid(cameo_id)
    if not parsed_id:
        return error_response("Invalid cameo_id")

    if request.method == "DELETE":
        try:
            services.delete_cameo(parsed_id)
        except Cameo.DoesNotExist:
            return error_response("Cameo not found", status=404)
        return success_response()

    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    try:
        update = CameoUpdate.model_validate(body)
    except ValidationError as exc:
        return error_response(summarize_validation_error(exc))

    try:
        cameo = services.update_cameo(parsed_id, update.changes())
    except Cameo.DoesNotExist:
        return error_response("Cameo not found", status=404)
    return success_response(cameo=cameo_to_dict(cameo))


# =============================================================================
# FOCUS SESSIONS
# =============================================================================


@csrf_exempt
@require_http_methods(["GET", "POST"])
def focus_sessions(request) -> JsonResponse:
    """
    GET /api/focus-sessions?brand_id= - sessions newest first + total_minutes
    POST /api/focus-sessions - log a session
    """
    if request.method == "GET":
        return _list_focus_sessions(request)
    return _log_focus_session(request)


def _list_focus_sessions(request) -> JsonResponse:
    brand_id = None
    raw_brand_id = request.GET.get("brand_id")
    if raw_brand_id:
        brand_id = parse_uuid(raw_brand_id)
        if not brand_id:
            return error_response("Invalid brand_id")

    sessions, total = services.list_focus_sessions(brand_id)
    return success_response(
        sessions=[focus_session_to_dict(s) for s in sessions],
        total_minutes=total,
    )


def _log_focus_session(request) -> JsonResponse:
    """
    Request JSON:
    {"duration_minutes": 25, "brand_id"?: "uuid", "started_at"?: "iso",
     "ended_at"?: "iso", "notes"?: "..."}

    Response 201: {"success": true, "session": {...}}
    """
    try:
        body = parse_json_body(request)
    except InvalidJSONBody as exc:
        return error_response(str(exc))

    brand_id = parse_uuid(body["brand_id"]) if body.get("brand_id") else None
    if brand_id and not Brand.objects.filter(id=brand_id).exists():
        brand_id = None

    try:
        session = services.log_focus_session(
            duration_minutes=body.get("duration_minutes"),
            brand_id=brand_id,
            started_at=_parse_datetime(body.get("started_at")),
            ended_at=_parse_datetime(body.get("ended_at")),
            notes=body.get("notes"),
        )
    except ValueError as exc:
        return error_response(str(exc))

    return success_response(status=201, session=focus_session_to_dict(session))


# =============================================================================
# WORKFLOW
# =============================================================================


@require_http_methods(["GET"])
def workflow_stages(request) -> JsonResponse:
    """
    GET /api/workflow/stages

    Response 200: {"success": true, "stages": [{"key", "label", "description"}, ...]}
    """
    return success_response(stages=[stage.to_dict() for stage in WORKFLOW_STAGES])


# =============================================================================
# HELPERS
# =============================================================================


def _parse_date(value) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return parse_date(value[:10])
    except ValueError:
        return None


def _parse_datetime(value):
    if not isinstance(value, str):
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        return None
