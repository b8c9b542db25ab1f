"""
Supabase client initialization.

This module contains *only* the database connection setup. Other repository
and service modules obtain the shared clients through `get_supabase()` (sync,
used for table reads/writes and auth checks) and `get_async_supabase()`
(async, used for Realtime channels).

Environment variables:
- SUPABASE_URL: Your Supabase project URL (required)
- SUPABASE_KEY: Your Supabase API key (required)
- LEADS_TABLE: Table holding lead records (default: "leads")
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from supabase import AsyncClient, Client, acreate_client, create_client

# Load environment variables from the .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

LEADS_TABLE: str = os.getenv("LEADS_TABLE", "leads")

_async_client: Optional[AsyncClient] = None


def _credentials() -> Tuple[str, str]:
    # Read credentials from the environment to avoid hard-coding secrets in code.
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return supabase_url, supabase_key


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Return the shared sync Supabase client, creating it on first use."""

    url, key = _credentials()
    return create_client(url, key)


async def get_async_supabase() -> AsyncClient:
    """Return the shared async Supabase client, creating it on first use."""

    global _async_client
    if _async_client is None:
        url, key = _credentials()
        _async_client = await acreate_client(url, key)
    return _async_client


__all__ = ["LEADS_TABLE", "get_supabase", "get_async_supabase"]
