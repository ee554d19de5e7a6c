"""
Bulk generation: one content item per day for N days.

Each day picks a topic by weight and runs the generation runner. A
failure on one day is recorded in its result and the run continues.
"""

from __future__ import annotations

import logging
import random
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Literal, Sequence

from lumora.core.models import Topic
from lumora.generation.runner import GenerationContext, generate_and_store_content
from lumora.generation.topics import select_topic_by_weight

logger = logging.getLogger(__name__)

MAX_BULK_DAYS = 31


@dataclass
class BulkDayResult:
    date: str
    topic: str
    platform: str
    status: Literal["success", "failed"]
    error: str | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["error"] is None:
            del data["error"]
        return data


@dataclass
class BulkRunSummary:
    requested: int
    successes: int
    failures: int


def run_bulk_generation(
    context: GenerationContext,
    topics: Sequence[Topic],
    platform: str,
    days: int,
    start_date: date,
    rng: random.Random | None = None,
) -> tuple[list[BulkDayResult], BulkRunSummary]:
    """
    Generate one item per day starting at start_date.

    Returns:
        (per-day results, summary)
    """
    results: list[BulkDayResult] = []

    for offset in range(days):
        scheduled = start_date + timedelta(days=offset)
        topic = select_topic_by_weight(topics, rng)
        try:
            generate_and_store_content(context, topic.label, platform, scheduled)
        except Exception as exc:
            logger.warning(
                "BULK_DAY_FAILED brand_id=%s date=%s topic=%s: %s",
                context.brand.id,
                scheduled.isoformat(),
                topic.label,
                exc,
            )
            results.append(
                BulkDayResult(scheduled.isoformat(), topic.label, platform, "failed", str(exc))
            )
            continue
        results.append(BulkDayResult(scheduled.isoformat(), topic.label, platform, "success"))

    successes = sum(1 for result in results if result.status == "success")
    summary = BulkRunSummary(
        requested=days,
        successes=successes,
        failures=len(results) - successes,
    )
    logger.info(
        "BULK_RUN_COMPLETE brand_id=%s requested=%d successes=%d failures=%d",
        context.brand.id,
        summary.requested,
        summary.successes,
        summary.failures,
    )
    return results, summary
