"""
Cameos Service.

Cameos are recurring on-screen characters injected into video prompts.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from lumora.core.models import Cameo

UPDATABLE_FIELDS = ("name", "description", "visual_description", "reference_images", "usage_notes")


def list_cameos(brand_id: UUID) -> list[Cameo]:
    return list(Cameo.objects.filter(brand_id=brand_id).order_by("name"))


def create_cameo(
    brand_id: UUID,
    name: str,
    description: str = "",
    visual_description: str = "",
    reference_images: list[str] | None = None,
    usage_notes: str | None = None,
) -> Cameo:
    return Cameo.objects.create(
        brand_id=brand_id,
        name=name,
        description=description,
        visual_description=visual_description,
        reference_images=reference_images or None,
        usage_notes=usage_notes or None,
    )


def update_cameo(cameo_id: UUID, changes: dict[str, Any]) -> Cameo:
    """
    Apply the supplied fields; unknown keys are ignored.

    Raises:
        Cameo.DoesNotExist: If cameo not found
    """
    cameo = Cameo.objects.get(id=cameo_id)
    fields = [key for key in UPDATABLE_FIELDS if key in changes]
    for key in fields:
        setattr(cameo, key, changes[key])
    cameo.save(update_fields=[*fields, "updated_at"])
    return cameo


def delete_cameo(cameo_id: UUID) -> None:
    """
    Raises:
        Cameo.DoesNotExist: If cameo not found
    """
    deleted, _ = Cameo.objects.filter(id=cameo_id).delete()
    if not deleted:
        raise Cameo.DoesNotExist(f"Cameo {cameo_id} not found")
