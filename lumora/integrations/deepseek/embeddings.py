"""
Text embeddings for the brand_vectors store.

Embedding never fails the caller: without an API key, or when the call
errors, a zero vector of the right width is returned and a warning logged.
Zero vectors keep upserts valid; they just never rank in similarity search.
"""

from __future__ import annotations

import logging

from .client import DeepSeekClient, DeepSeekError, get_default_client

logger = logging.getLogger(__name__)

EMBEDDING_DIMENSIONS = 1536
MAX_INPUT_CHARS = 4000


def fallback_embedding(reason: str | None = None) -> list[float]:
    if reason:
        logger.warning("Embedding fallback reason: %s", reason)
    return [0.0] * EMBEDDING_DIMENSIONS


def generate_embedding(text: str, client: DeepSeekClient | None = None) -> list[float]:
    """
    Embed text, truncated to MAX_INPUT_CHARS.

    Args:
        text: Text to embed
        client: Optional DeepSeekClient (defaults to the shared client)

    Returns:
        EMBEDDING_DIMENSIONS floats
    """
    client = client or get_default_client()
    if not client.configured:
        return fallback_embedding("Missing DEEPSEEK_API_KEY")

    trimmed = text[:MAX_INPUT_CHARS]

    try:
        return client.embed(trimmed)
    except DeepSeekError as exc:
        logger.warning("Embedding generation failed, falling back to zeros: %s", exc)
        return fallback_embedding()
