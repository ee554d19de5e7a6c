"""
DeepSeek integration: chat, JSON-mode generation and embeddings.
"""

from .client import (
    DeepSeekClient,
    DeepSeekConfig,
    DeepSeekError,
    StructuredOutputError,
    get_default_client,
    load_config_from_env,
    parse_structured_output,
    reset_default_client,
)
from .embeddings import EMBEDDING_DIMENSIONS, generate_embedding

__all__ = [
    "DeepSeekClient",
    "DeepSeekConfig",
    "DeepSeekError",
    "EMBEDDING_DIMENSIONS",
    "StructuredOutputError",
    "generate_embedding",
    "get_default_client",
    "load_config_from_env",
    "parse_structured_output",
    "reset_default_client",
]
