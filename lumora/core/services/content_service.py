"""
Content Service.

Content items move through the workflow stages (idea -> published).
Generations hang off a content item and are listed oldest first so the
v1, v2, v3 ordering of prompt variations is preserved.
"""

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from lumora.core.enums import ContentStatus
from lumora.core.models import ContentItem, Generation
from lumora.core.workflow import STAGE_KEYS, is_stage_key

# Sentinel for "key not supplied" in partial updates
UNSET: Any = object()


def list_content_items(brand_id: UUID) -> list[ContentItem]:
    return list(ContentItem.objects.filter(brand_id=brand_id).order_by("date_target", "created_at"))


def content_items_by_status(brand_id: UUID) -> dict[str, list[ContentItem]]:
    """Group a brand's content under every workflow stage key (empty lists included)."""
    grouped: dict[str, list[ContentItem]] = {key: [] for key in STAGE_KEYS}
    for item in ContentItem.objects.filter(brand_id=brand_id).order_by("date_target"):
        if item.status in grouped:
            grouped[item.status].append(item)
    return grouped


def create_content_item(
    brand_id: UUID,
    date_target: date,
    platform: str,
    status: str = ContentStatus.IDEA,
) -> ContentItem:
    """
    Raises:
        ValueError: If status is not a workflow stage
    """
    if not is_stage_key(status):
        raise ValueError(f"Unknown status: {status}")
    return ContentItem.objects.create(
        brand_id=brand_id,
        date_target=date_target,
        platform=platform,
        status=status,
    )


def get_content_item(item_id: UUID) -> ContentItem:
    """
    Raises:
        ContentItem.DoesNotExist: If item not found
    """
    return ContentItem.objects.select_related("brand").get(id=item_id)


def update_content_status(item_id: UUID, status: str) -> ContentItem:
    """
    Raises:
        ValueError: If status is not a workflow stage
        ContentItem.DoesNotExist: If item not found
    """
    if not is_stage_key(status):
        raise ValueError(f"Unknown status: {status}")
    item = ContentItem.objects.get(id=item_id)
    item.status = status
    item.save(update_fields=["status", "updated_at"])
    return item


def update_content_details(
    item_id: UUID,
    notes: Any = UNSET,
    attachments: Any = UNSET,
) -> ContentItem:
    """
    Write only the supplied keys. Passing None clears a field.

    Raises:
        ContentItem.DoesNotExist: If item not found
    """
    item = ContentItem.objects.get(id=item_id)
    update_fields = []
    if notes is not UNSET:
        item.notes = notes
        update_fields.append("notes")
    if attachments is not UNSET:
        item.attachments = attachments
        update_fields.append("attachments")
    if update_fields:
        item.save(update_fields=[*update_fields, "updated_at"])
    return item


def list_generations(content_item_id: UUID) -> list[Generation]:
    return list(Generation.objects.filter(content_item_id=content_item_id).order_by("created_at"))
