"""Supabase client service."""

import logging
from functools import lru_cache

from supabase import create_client, Client

from mealmatch.config import get_settings

logger = logging.getLogger(__name__)

# Table names (match the web app)
TABLES = {
    "favorites": "favorites",
    "pantry": "pantry_items",
    "shopping_list": "shopping_list_items",
}


@lru_cache
def get_supabase_client() -> Client:
    """Get Supabase client (service role key when available, else anon)."""
    settings = get_settings()
    if not settings.supabase_enabled:
        raise RuntimeError("Supabase is not configured")
    return create_client(settings.supabase_url, settings.supabase_key)
