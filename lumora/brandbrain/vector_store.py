"""
Access to the brand_vectors table through the Supabase client.

Three primitives:
1. upsert(payload, embedding) - one row per (brand_id, source_key)
2. prune_topics(brand_id, keep_keys) - drop topic rows no longer in the deck
3. match(brand_id, query_embedding, limit) - match_brand_vectors RPC
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from supabase import Client

from lumora.integrations.supabase import get_supabase_client

logger = logging.getLogger(__name__)

TABLE = "brand_vectors"
MATCH_FUNCTION = "match_brand_vectors"
UPSERT_CONFLICT_COLUMNS = "brand_id,source_key"
TOPIC_SOURCE_PREFIX = "topic::"


@dataclass
class BrandVectorPayload:
    """A brand_vectors row before embedding."""

    brand_id: str
    type: str
    source_key: str
    content: str
    metadata: dict[str, Any] | None = field(default=None)


class BrandVectorStore:
    """Thin wrapper over the supabase table/RPC calls for brand_vectors."""

    def __init__(self, client: Client | None = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def upsert(self, payload: BrandVectorPayload, embedding: list[float]) -> None:
        self.client.table(TABLE).upsert(
            {
                "brand_id": payload.brand_id,
                "type": payload.type,
                "source_key": payload.source_key,
                "content": payload.content,
                "metadata": payload.metadata,
                "embedding": embedding,
            },
            on_conflict=UPSERT_CONFLICT_COLUMNS,
        ).execute()

    def prune_topics(self, brand_id: str, keep_keys: Sequence[str]) -> None:
        query = (
            self.client.table(TABLE)
            .delete()
            .eq("brand_id", brand_id)
            .like("source_key", f"{TOPIC_SOURCE_PREFIX}%")
        )
        if keep_keys:
            query = query.not_.in_("source_key", list(keep_keys))
        query.execute()

    def match(
        self,
        brand_id: str,
        query_embedding: list[float],
        limit: int = 5,
    ) -> list[dict[str, Any]]:
        response = self.client.rpc(
            MATCH_FUNCTION,
            {
                "brand_id": brand_id,
                "match_count": limit,
                "query_embedding": query_embedding,
            },
        ).execute()
        return list(response.data or [])


def get_vector_store() -> BrandVectorStore:
    return BrandVectorStore()
