"""Database operations for brand_score_history table (append-only)."""

from typing import Any
from uuid import UUID

from recall.core.logging import get_logger
from recall.core.scoring.types import BRAND_SCORE_COLUMNS, ScoreSet
from recall.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_score_history(brand_id: str | UUID, user_id: str | UUID) -> list[dict[str, Any]]:
    """List score snapshots for a brand, oldest first."""
    supabase = get_supabase()
    response = (
        supabase.table("brand_score_history")
        .select("*")
        .eq("brand_id", str(brand_id))
        .eq("user_id", str(user_id))
        .order("created_at", desc=False)
        .execute()
    )
    return response.data or []


def get_latest_score_entry(brand_id: str | UUID, user_id: str | UUID) -> dict[str, Any] | None:
    """Most recent snapshot for a brand, or None when it was never scored."""
    supabase = get_supabase()
    response = (
        supabase.table("brand_score_history")
        .select("*")
        .eq("brand_id", str(brand_id))
        .eq("user_id", str(user_id))
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    rows = response.data or []
    return rows[0] if rows else None


def append_score_entry(
    brand_id: str | UUID,
    user_id: str | UUID,
    score_set: ScoreSet,
    overall_score: int,
) -> dict[str, Any]:
    """Append one snapshot. Rows are never updated afterwards."""
    supabase = get_supabase()
    row = {
        "brand_id": str(brand_id),
        "user_id": str(user_id),
        "recall_score": overall_score,
        **score_set.to_columns(BRAND_SCORE_COLUMNS),
    }
    response = supabase.table("brand_score_history").insert(row).execute()
    if not response.data:
        raise ValueError("No data returned from score history insert")
    logger.info(f"Appended score history for brand {brand_id}: {overall_score}")
    return response.data[0]
