"""
Model → API dict conversion shared by every app's views.
"""

from __future__ import annotations

from lumora.core.models import Brand, Cameo, ContentItem, FocusSession, Generation, Topic


def _iso(value):
    return value.isoformat() if value is not None else None


def brand_to_dict(brand: Brand) -> dict:
    return {
        "id": str(brand.id),
        "name": brand.name,
        "mission": brand.mission,
        "voice_tone": brand.voice_tone,
        "target_audience": brand.target_audience,
        "visual_lexicon": brand.visual_lexicon,
        "dos": brand.dos or [],
        "donts": brand.donts or [],
        "proof_points": brand.proof_points or [],
        "cta_library": brand.cta_library or [],
        "negative_prompts": brand.negative_prompts or [],
        "platform_constraints": brand.platform_constraints or {},
        "created_at": _iso(brand.created_at),
    }


def topic_to_dict(topic: Topic) -> dict:
    return {
        "id": str(topic.id),
        "brand_id": str(topic.brand_id),
        "label": topic.label,
        "weight": topic.weight,
        "min_frequency": topic.min_frequency,
        "max_frequency": topic.max_frequency,
        "examples": topic.examples or [],
        "created_at": _iso(topic.created_at),
    }


def content_item_to_dict(item: ContentItem) -> dict:
    return {
        "id": str(item.id),
        "brand_id": str(item.brand_id),
        "date_target": _iso(item.date_target),
        "platform": item.platform,
        "status": item.status,
        "notes": item.notes,
        "attachments": item.attachments,
        "blocker_reason": item.blocker_reason,
        "files": item.files,
        "created_at": _iso(item.created_at),
        "updated_at": _iso(item.updated_at),
    }


def generation_to_dict(generation: Generation) -> dict:
    return {
        "id": str(generation.id),
        "content_item_id": str(generation.content_item_id),
        "prompt_text": generation.prompt_text,
        "title": generation.title,
        "description": generation.description,
        "tags": generation.tags or [],
        "thumbnail_brief": generation.thumbnail_brief,
        "model_params": generation.model_params,
        "critique_score": generation.critique_score,
        "created_at": _iso(generation.created_at),
    }


def cameo_to_dict(cameo: Cameo) -> dict:
    return {
        "id": str(cameo.id),
        "brand_id": str(cameo.brand_id),
        "name": cameo.name,
        "description": cameo.description,
        "visual_description": cameo.visual_description,
        "reference_images": cameo.reference_images,
        "usage_notes": cameo.usage_notes,
        "created_at": _iso(cameo.created_at),
        "updated_at": _iso(cameo.updated_at),
    }


def focus_session_to_dict(session: FocusSession) -> dict:
    return {
        "id": str(session.id),
        "brand_id": str(session.brand_id) if session.brand_id else None,
        "duration_minutes": session.duration_minutes,
        "started_at": _iso(session.started_at),
        "ended_at": _iso(session.ended_at),
        "notes": session.notes,
    }
