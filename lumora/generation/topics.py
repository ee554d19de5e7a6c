"""
Weighted topic selection for the topic deck.

A topic's chance of being picked is its weight over the deck total.
Non-positive weights never win unless every weight is non-positive, in
which case the first topic is returned.
"""

from __future__ import annotations

import random
from typing import Protocol, Sequence, TypeVar


class WeightedTopic(Protocol):
    id: object
    weight: int | None


TopicT = TypeVar("TopicT", bound=WeightedTopic)


def select_topic_by_weight(
    topics: Sequence[TopicT],
    rng: random.Random | None = None,
) -> TopicT | None:
    """Pick one topic with probability proportional to its weight."""
    if not topics:
        return None
    rng = rng or random

    weights = [max(topic.weight or 0, 0) for topic in topics]
    total = sum(weights)
    if total <= 0:
        return topics[0]

    cursor = rng.random() * total
    for topic, weight in zip(topics, weights):
        if cursor < weight:
            return topic
        cursor -= weight

    # Float rounding can leave cursor at or past the last weight
    return topics[-1]


def get_topic_variety(
    topics: Sequence[TopicT],
    count: int,
    recent_ids: Sequence[object] = (),
    rng: random.Random | None = None,
) -> list[TopicT]:
    """
    Pick up to count distinct topics, preferring ones not used recently.

    When fewer than count fresh topics exist, the rest are drawn from the
    recently used ones.
    """
    recent = {str(topic_id) for topic_id in recent_ids}
    fresh = [topic for topic in topics if str(topic.id) not in recent]
    stale = [topic for topic in topics if str(topic.id) in recent]

    selected: list[TopicT] = []
    for pool in (fresh, stale):
        pool = list(pool)
        while pool and len(selected) < count:
            topic = select_topic_by_weight(pool, rng)
            selected.append(topic)
            pool.remove(topic)
    return selected
