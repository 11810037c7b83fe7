"""Tests for notification preference and history endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from recall.core.auth_middleware import AuthContext, UserRole, require_auth
from recall.core.scoring import ConfigurationError
from recall.main import app

client = TestClient(app)

AUTH = AuthContext(user_id="user-1", email="owner@acme.test", role=UserRole.USER, token="jwt")


def _prefs_row(**overrides) -> dict:
    row = {
        "id": "pref-1",
        "user_id": "user-1",
        "email_notifications_enabled": True,
        "notify_on_threshold": True,
        "notify_on_improvement": True,
        "threshold_value": 70,
        "improvement_threshold": 10,
        "notification_email": "owner@acme.test",
    }
    row.update(overrides)
    return row


@pytest.fixture(autouse=True)
def authenticated():
    app.dependency_overrides[require_auth] = lambda: AUTH
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def mock_prefs_db():
    with patch("recall.api.notifications.prefs_db") as mock:
        yield mock


class TestPreferences:
    def test_get_creates_defaults(self, mock_prefs_db):
        mock_prefs_db.get_or_create_preferences.return_value = _prefs_row()

        response = client.get("/v1/notifications/preferences")

        assert response.status_code == 200
        data = response.json()
        assert data["enabled"] is True
        assert data["threshold_value"] == 70
        assert data["destination_email"] == "owner@acme.test"
        mock_prefs_db.get_or_create_preferences.assert_called_once_with("user-1", "owner@acme.test")

    def test_patch_maps_field_names(self, mock_prefs_db):
        mock_prefs_db.update_preferences.return_value = _prefs_row(
            email_notifications_enabled=False, threshold_value=85
        )

        response = client.patch(
            "/v1/notifications/preferences",
            json={"enabled": False, "threshold_value": 85},
        )

        assert response.status_code == 200
        assert response.json()["enabled"] is False
        mock_prefs_db.update_preferences.assert_called_once_with(
            "user-1", {"email_notifications_enabled": False, "threshold_value": 85}
        )

    def test_patch_out_of_range(self, mock_prefs_db):
        mock_prefs_db.update_preferences.side_effect = ConfigurationError(
            "threshold_value must be an integer in [0, 100], got 150",
            field="threshold_value",
            value=150,
        )

        response = client.patch("/v1/notifications/preferences", json={"threshold_value": 150})

        assert response.status_code == 422
        assert "threshold_value" in response.json()["detail"]

    def test_patch_wrong_type(self, mock_prefs_db):
        response = client.patch("/v1/notifications/preferences", json={"threshold_value": "high"})

        assert response.status_code == 422
        mock_prefs_db.update_preferences.assert_not_called()


class TestHistory:
    def test_lists_with_brand_name(self):
        rows = [
            {
                "id": "n1",
                "user_id": "user-1",
                "brand_id": "brand-1",
                "notification_type": "threshold_reached",
                "email_sent_to": "owner@acme.test",
                "subject": "🎉 Acme has reached a Recall Score of 72!",
                "status": "sent",
                "score_data": {"currentScore": 72, "threshold": 70},
                "created_at": "2026-02-01T00:00:00+00:00",
                "brand_profiles": {"brand_name": "Acme"},
            }
        ]

        with patch("recall.api.notifications.history_db") as history_db:
            history_db.list_notification_history.return_value = rows
            response = client.get("/v1/notifications/history?limit=10")

        assert response.status_code == 200
        data = response.json()
        assert data[0]["brand_name"] == "Acme"
        assert data[0]["score_data"]["currentScore"] == 72
        history_db.list_notification_history.assert_called_once_with("user-1", limit=10, offset=0)
