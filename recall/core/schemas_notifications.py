"""Pydantic schemas for notification endpoints."""

from typing import Any

from pydantic import BaseModel

from recall.core.scoring.types import NotificationPreferences


class PreferencesResponse(NotificationPreferences):
    user_id: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PreferencesResponse":
        prefs = NotificationPreferences.from_row(row)
        return cls(user_id=str(row["user_id"]), **prefs.model_dump())


class PreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    enabled: bool | None = None
    notify_on_threshold: bool | None = None
    notify_on_improvement: bool | None = None
    threshold_value: int | None = None
    improvement_threshold: int | None = None
    destination_email: str | None = None

    def to_columns(self) -> dict[str, Any]:
        fields = self.model_dump(exclude_none=True)
        columns = {
            "enabled": "email_notifications_enabled",
            "destination_email": "notification_email",
        }
        return {columns.get(k, k): v for k, v in fields.items()}


class NotificationHistoryItem(BaseModel):
    id: str
    notification_type: str
    email_sent_to: str
    subject: str
    status: str
    brand_id: str | None = None
    brand_name: str | None = None
    error_message: str | None = None
    score_data: dict[str, Any] | None = None
    created_at: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "NotificationHistoryItem":
        brand = row.get("brand_profiles") or {}
        return cls(
            id=str(row["id"]),
            notification_type=row["notification_type"],
            email_sent_to=row["email_sent_to"],
            subject=row["subject"],
            status=row.get("status") or "sent",
            brand_id=str(row["brand_id"]) if row.get("brand_id") else None,
            brand_name=brand.get("brand_name"),
            error_message=row.get("error_message"),
            score_data=row.get("score_data"),
            created_at=str(row["created_at"]),
        )
