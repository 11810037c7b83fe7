"""Database operations for competitors table."""

from typing import Any
from uuid import UUID

from recall.core.logging import get_logger
from recall.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_competitors(
    user_id: str | UUID,
    brand_id: str | UUID | None = None,
) -> list[dict[str, Any]]:
    """List a user's competitors, optionally for one brand, newest first."""
    supabase = get_supabase()
    query = supabase.table("competitors").select("*").eq("user_id", str(user_id))
    if brand_id:
        query = query.eq("brand_id", str(brand_id))
    response = query.order("created_at", desc=True).execute()
    return response.data or []


def get_competitor(competitor_id: str | UUID, user_id: str | UUID | None) -> dict[str, Any] | None:
    """Get one competitor, scoped to its owner unless user_id is None."""
    supabase = get_supabase()
    query = supabase.table("competitors").select("*").eq("id", str(competitor_id))
    if user_id is not None:
        query = query.eq("user_id", str(user_id))
    response = query.maybe_single().execute()
    return response.data if response else None


def update_competitor(competitor_id: str | UUID, updates: dict[str, Any]) -> dict[str, Any]:
    """Apply updates to a competitor and return the new row."""
    supabase = get_supabase()
    response = (
        supabase.table("competitors")
        .update({**updates, "updated_at": "now()"})
        .eq("id", str(competitor_id))
        .execute()
    )
    if not response.data:
        raise ValueError(f"No data returned from competitor update for {competitor_id}")
    return response.data[0]
