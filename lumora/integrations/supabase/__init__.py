"""
Supabase client factory (used for the pgvector brand_vectors store).
"""

from .client import get_supabase_client, reset_supabase_client

__all__ = ["get_supabase_client", "reset_supabase_client"]
