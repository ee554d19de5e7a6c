"""
Kie.ai integration (Sora 2 text-to-video jobs).
"""

from .client import (
    KieClient,
    KieError,
    KieTimeoutError,
    TaskStatus,
    get_default_client,
    parse_result_urls,
)

__all__ = [
    "KieClient",
    "KieError",
    "KieTimeoutError",
    "TaskStatus",
    "get_default_client",
    "parse_result_urls",
]
