"""Database operations for notification_history table."""

from typing import Any
from uuid import UUID

from recall.core.logging import get_logger
from recall.db.supabase_client import get_supabase

logger = get_logger(__name__)


def record_notification(
    user_id: str | UUID,
    notification_type: str,
    email_sent_to: str,
    subject: str,
    status: str,
    brand_id: str | UUID | None = None,
    error_message: str | None = None,
    score_data: dict | None = None,
) -> dict:
    """Record one dispatch attempt."""
    supabase = get_supabase()
    row: dict = {
        "user_id": str(user_id),
        "notification_type": notification_type,
        "email_sent_to": email_sent_to,
        "subject": subject,
        "status": status,
    }
    if brand_id:
        row["brand_id"] = str(brand_id)
    if error_message:
        row["error_message"] = error_message
    if score_data:
        row["score_data"] = score_data

    result = supabase.table("notification_history").insert(row).execute()
    if not result.data:
        raise ValueError("No data returned from notification history insert")
    return result.data[0]


def list_notification_history(
    user_id: str | UUID,
    limit: int = 50,
    offset: int = 0,
) -> list[dict]:
    """List a user's notification history with brand names, newest first."""
    supabase = get_supabase()
    result = (
        supabase.table("notification_history")
        .select("*, brand_profiles (brand_name)")
        .eq("user_id", str(user_id))
        .order("created_at", desc=True)
        .range(offset, offset + limit - 1)
        .execute()
    )
    return result.data or []
