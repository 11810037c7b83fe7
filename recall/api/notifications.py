"""Notification API: score notification preferences and delivery history."""

from fastapi import APIRouter, Depends, HTTPException, Query

from recall.core.auth_middleware import AuthContext, require_auth
from recall.core.logging import get_logger
from recall.core.schemas_notifications import (
    NotificationHistoryItem,
    PreferencesResponse,
    PreferencesUpdate,
)
from recall.core.scoring import ConfigurationError
from recall.db import notification_history as history_db
from recall.db import notification_preferences as prefs_db

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications")


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(auth: AuthContext = Depends(require_auth)) -> PreferencesResponse:
    """Get the caller's preferences, creating the defaults on first access."""
    try:
        row = prefs_db.get_or_create_preferences(auth.user_id, auth.email)
        return PreferencesResponse.from_row(row)

    except Exception as e:
        logger.error(f"Error loading notification preferences: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load preferences") from e


@router.patch("/preferences", response_model=PreferencesResponse)
async def update_preferences(
    body: PreferencesUpdate,
    auth: AuthContext = Depends(require_auth),
) -> PreferencesResponse:
    """Update the caller's preferences. Out-of-range thresholds are a 422."""
    try:
        prefs_db.get_or_create_preferences(auth.user_id, auth.email)
        row = prefs_db.update_preferences(auth.user_id, body.to_columns())
        return PreferencesResponse.from_row(row)

    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error updating notification preferences: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update preferences") from e


@router.get("/history", response_model=list[NotificationHistoryItem])
async def list_history(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    auth: AuthContext = Depends(require_auth),
) -> list[NotificationHistoryItem]:
    """Sent and failed score notifications, newest first."""
    try:
        rows = history_db.list_notification_history(auth.user_id, limit=limit, offset=offset)
        return [NotificationHistoryItem.from_row(r) for r in rows]

    except Exception as e:
        logger.error(f"Error listing notification history: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list notification history") from e
