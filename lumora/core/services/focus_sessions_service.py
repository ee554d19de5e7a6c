"""
Focus Sessions Service.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any
from uuid import UUID

from django.db.models import Sum
from django.utils import timezone

from lumora.core.models import FocusSession


def log_focus_session(
    duration_minutes: Any,
    brand_id: UUID | None = None,
    started_at: datetime | None = None,
    ended_at: datetime | None = None,
    notes: str | None = None,
) -> FocusSession:
    """
    Record a focus session. Duration is rounded to whole minutes.

    Raises:
        ValueError: If duration is missing, non-numeric or not positive
    """
    try:
        duration = float(duration_minutes)
    except (TypeError, ValueError):
        duration = 0
    if not math.isfinite(duration) or duration <= 0:
        raise ValueError("Duration must be greater than zero.")

    now = timezone.now()
    return FocusSession.objects.create(
        brand_id=brand_id,
        duration_minutes=max(round(duration), 1),
        started_at=started_at or now,
        ended_at=ended_at or now,
        notes=notes,
    )


def list_focus_sessions(brand_id: UUID | None = None) -> tuple[list[FocusSession], int]:
    """
    Returns:
        (sessions newest first, total minutes across them)
    """
    queryset = FocusSession.objects.order_by("-started_at")
    if brand_id is not None:
        queryset = queryset.filter(brand_id=brand_id)
    total = queryset.aggregate(total=Sum("duration_minutes"))["total"] or 0
    return list(queryset), total
