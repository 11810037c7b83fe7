"""Database operations for notification_preferences table.

Exactly one row per user: created with defaults on first access and
updated in place afterwards.
"""

from typing import Any
from uuid import UUID

from recall.core.config import get_settings
from recall.core.logging import get_logger
from recall.core.scoring.triggers import validate_preferences
from recall.core.scoring.types import NotificationPreferences
from recall.db.supabase_client import get_supabase

logger = get_logger(__name__)

UPDATABLE_FIELDS = {
    "email_notifications_enabled",
    "notify_on_threshold",
    "notify_on_improvement",
    "threshold_value",
    "improvement_threshold",
    "notification_email",
}


def default_preferences(email: str | None) -> dict[str, Any]:
    """Column values for a freshly created preferences row."""
    settings = get_settings()
    return {
        "email_notifications_enabled": True,
        "notify_on_threshold": True,
        "notify_on_improvement": True,
        "threshold_value": settings.DEFAULT_THRESHOLD_VALUE,
        "improvement_threshold": settings.DEFAULT_IMPROVEMENT_THRESHOLD,
        "notification_email": email,
    }


def get_preferences(user_id: str | UUID) -> dict[str, Any] | None:
    """Get a user's preferences row, or None if it does not exist yet."""
    supabase = get_supabase()
    response = (
        supabase.table("notification_preferences")
        .select("*")
        .eq("user_id", str(user_id))
        .maybe_single()
        .execute()
    )
    return response.data if response else None


def get_or_create_preferences(user_id: str | UUID, email: str | None = None) -> dict[str, Any]:
    """
    Get a user's preferences, inserting the defaults on first access.

    Args:
        user_id: Owning user
        email: Default destination for a new row (the user's own address)

    Returns:
        Preferences row
    """
    existing = get_preferences(user_id)
    if existing:
        return existing

    supabase = get_supabase()
    row = {"user_id": str(user_id), **default_preferences(email)}
    response = supabase.table("notification_preferences").insert(row).execute()
    if not response.data:
        raise ValueError("No data returned from notification preferences insert")

    logger.info(f"Created default notification preferences for user {user_id}")
    return response.data[0]


def update_preferences(user_id: str | UUID, updates: dict[str, Any]) -> dict[str, Any]:
    """
    Update a user's preferences in place. Unknown keys are ignored.

    Raises:
        ConfigurationError: If the merged thresholds are out of range
        ValueError: If the user has no preferences row
    """
    existing = get_preferences(user_id)
    if not existing:
        raise ValueError(f"No notification preferences for user {user_id}")

    filtered = {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS}
    if not filtered:
        return existing

    validate_preferences(NotificationPreferences.from_row({**existing, **filtered}))

    supabase = get_supabase()
    response = (
        supabase.table("notification_preferences")
        .update({**filtered, "updated_at": "now()"})
        .eq("user_id", str(user_id))
        .execute()
    )
    if not response.data:
        raise ValueError("No data returned from notification preferences update")
    return response.data[0]
