"""Database operations for brand_profiles table."""

from typing import Any
from uuid import UUID

from recall.core.logging import get_logger
from recall.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_brand_profiles(user_id: str | UUID) -> list[dict[str, Any]]:
    """List a user's brand profiles, newest first."""
    supabase = get_supabase()
    response = (
        supabase.table("brand_profiles")
        .select("*")
        .eq("user_id", str(user_id))
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


def list_brand_profiles_by_ids(user_id: str | UUID | None, brand_ids: list[str]) -> list[dict[str, Any]]:
    """Fetch the given brands, once each, in first-seen id order.

    Only the user's own brands are returned unless user_id is None.
    """
    brand_ids = list(dict.fromkeys(str(b) for b in brand_ids))
    if not brand_ids:
        return []
    supabase = get_supabase()
    query = supabase.table("brand_profiles").select("*").in_("id", brand_ids)
    if user_id is not None:
        query = query.eq("user_id", str(user_id))
    response = query.execute()
    rows = {str(row["id"]): row for row in response.data or []}
    return [rows[b] for b in brand_ids if b in rows]


def get_brand_profile(brand_id: str | UUID, user_id: str | UUID | None) -> dict[str, Any] | None:
    """Get one brand profile, scoped to its owner unless user_id is None."""
    supabase = get_supabase()
    query = supabase.table("brand_profiles").select("*").eq("id", str(brand_id))
    if user_id is not None:
        query = query.eq("user_id", str(user_id))
    response = query.maybe_single().execute()
    return response.data if response else None


def update_brand_profile(brand_id: str | UUID, updates: dict[str, Any]) -> dict[str, Any]:
    """Apply updates to a brand profile and return the new row."""
    supabase = get_supabase()
    response = (
        supabase.table("brand_profiles")
        .update({**updates, "updated_at": "now()"})
        .eq("id", str(brand_id))
        .execute()
    )
    if not response.data:
        raise ValueError(f"No data returned from brand profile update for {brand_id}")
    return response.data[0]
