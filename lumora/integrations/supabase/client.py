"""
Shared supabase-py client.

Relational data goes through the Django ORM; only brand_vectors (upserts,
pruning and the match_brand_vectors RPC) is reached through PostgREST.
The service-role key is preferred so writes bypass row-level security.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from supabase import Client, create_client

logger = logging.getLogger(__name__)

_default_client: Client | None = None


def get_supabase_client() -> Client:
    """
    Get the shared Supabase client, creating it on first use.

    Raises:
        ImproperlyConfigured: If SUPABASE_URL or a Supabase key is missing
    """
    global _default_client
    if _default_client is None:
        url = getattr(settings, "SUPABASE_URL", "")
        key = getattr(settings, "SUPABASE_KEY", "")
        if not url or not key:
            raise ImproperlyConfigured(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) must be set"
            )
        logger.info("SUPABASE_CLIENT_INIT url=%s", url)
        _default_client = create_client(url, key)
    return _default_client


def reset_supabase_client() -> None:
    """Drop the cached client (useful for tests)."""
    global _default_client
    _default_client = None
