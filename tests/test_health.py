"""Tests for the app shell: health check and mounted v1 routes."""

import pytest
from fastapi.testclient import TestClient

from recall.main import app

client = TestClient(app)


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize(
    "path,method",
    [
        ("/v1/brands", "get"),
        ("/v1/brands/compare", "post"),
        ("/v1/brands/{brand_id}/optimize", "post"),
        ("/v1/brands/{brand_id}/score-history", "get"),
        ("/v1/brands/{brand_id}/competitors", "get"),
        ("/v1/competitors/{competitor_id}/analyze", "post"),
        ("/v1/notifications/preferences", "get"),
        ("/v1/notifications/preferences", "patch"),
        ("/v1/notifications/history", "get"),
    ],
)
def test_v1_routes_are_mounted(path, method):
    paths = app.openapi()["paths"]
    assert method in paths[path]
