"""
Similarity search over brand_vectors via the match_brand_vectors RPC.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from lumora.brandbrain.vector_store import BrandVectorStore, get_vector_store

logger = logging.getLogger(__name__)


@dataclass
class BrandVectorMatch:
    id: str
    type: str
    source_key: str
    content: str
    metadata: dict[str, Any] | None
    similarity: float | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "BrandVectorMatch":
        return cls(
            id=str(row.get("id", "")),
            type=row.get("type", ""),
            source_key=row.get("source_key", ""),
            content=row.get("content", ""),
            metadata=row.get("metadata"),
            similarity=row.get("similarity"),
        )

    @property
    def label(self) -> str | None:
        if not self.metadata:
            return None
        return self.metadata.get("label")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def search_brand_vectors(
    brand_id: str,
    query_embedding: list[float],
    limit: int = 5,
    store: BrandVectorStore | None = None,
) -> list[BrandVectorMatch]:
    """
    Top matches for a brand, most similar first.

    Returns [] if the RPC fails.
    """
    store = store or get_vector_store()
    try:
        rows = store.match(str(brand_id), query_embedding, limit=limit)
    except Exception:
        logger.exception("Vector search failed brand_id=%s", brand_id)
        return []
    return [BrandVectorMatch.from_row(row) for row in rows]
