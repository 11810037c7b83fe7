"""Supabase client shared by every db module."""

from functools import lru_cache
from urllib.parse import urlparse

from supabase import Client, create_client

from recall.core.config import get_settings
from recall.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Service-role client for Recall's tables, created once per process.

    Raises:
        RuntimeError: If the client cannot be created from settings
    """
    settings = get_settings()
    try:
        client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client: {e}") from e

    logger.info(f"Supabase client ready for {urlparse(settings.SUPABASE_URL).netloc}")
    return client
