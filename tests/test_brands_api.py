"""Tests for brand and competitor API endpoints with mocked services."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from recall.core.auth_middleware import SYSTEM_USER_ID, AuthContext, UserRole, require_auth
from recall.core.score_provider import ScoreProviderError
from recall.core.scoring import ConfigurationError, ScoredEntity
from recall.main import app
from recall.services.score_workflow import BrandRescoreResult, EntityNotFoundError
from tests.factories import brand_row, competitor_row

client = TestClient(app)

AUTH = AuthContext(user_id="user-1", email="owner@acme.test", role=UserRole.USER, token="jwt")
ADMIN = AuthContext(user_id=SYSTEM_USER_ID, email=None, role=UserRole.ADMIN, token="api-key")


@pytest.fixture(autouse=True)
def authenticated():
    app.dependency_overrides[require_auth] = lambda: AUTH
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def mock_brands_db():
    with patch("recall.api.brands.brands_db") as mock:
        yield mock


class TestListBrands:
    def test_lists_with_recomputed_overall(self, mock_brands_db):
        # Stored recall_score is stale; the response recomputes it
        mock_brands_db.list_brand_profiles.return_value = [brand_row(recall_score=12)]

        response = client.get("/v1/brands")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["brands"][0]["overall_score"] == 70
        mock_brands_db.list_brand_profiles.assert_called_once_with("user-1")

    def test_db_error(self, mock_brands_db):
        mock_brands_db.list_brand_profiles.side_effect = Exception("DB error")

        response = client.get("/v1/brands")

        assert response.status_code == 500


class TestCompareBrands:
    def test_report(self, mock_brands_db):
        mock_brands_db.list_brand_profiles_by_ids.return_value = [
            brand_row("b1"),
            brand_row("b2", semantic_clarity_score=95, authority_score=95),
        ]

        response = client.post("/v1/brands/compare", json={"brand_ids": ["b1", "b2"]})

        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["ranking"]] == ["b2", "b1"]
        assert data["lowest_overall"]["id"] == "b1"
        assert len(data["gaps"]) == 2

    def test_fewer_than_two_scored(self, mock_brands_db):
        mock_brands_db.list_brand_profiles_by_ids.return_value = [
            brand_row("b1"),
            brand_row("b2", is_optimized=False),
        ]

        response = client.post("/v1/brands/compare", json={"brand_ids": ["b1", "b2"]})

        assert response.status_code == 422
        assert "at least 2" in response.json()["detail"]

    def test_duplicate_ids_count_once(self, mock_brands_db):
        mock_brands_db.list_brand_profiles_by_ids.return_value = [brand_row("b1")]

        response = client.post("/v1/brands/compare", json={"brand_ids": ["b1", "b1"]})

        assert response.status_code == 422
        assert "at least 2" in response.json()["detail"]
        mock_brands_db.list_brand_profiles_by_ids.assert_called_once_with("user-1", ["b1"])

    def test_admin_compares_across_owners(self, mock_brands_db):
        app.dependency_overrides[require_auth] = lambda: ADMIN
        mock_brands_db.list_brand_profiles_by_ids.return_value = [
            brand_row("b1"),
            brand_row("b2", user_id="user-2", semantic_clarity_score=95),
        ]

        response = client.post("/v1/brands/compare", json={"brand_ids": ["b1", "b2"]})

        assert response.status_code == 200
        mock_brands_db.list_brand_profiles_by_ids.assert_called_once_with(None, ["b1", "b2"])


class TestOptimizeBrand:
    def test_success(self):
        result = BrandRescoreResult(
            brand=ScoredEntity.from_brand_row(brand_row()),
            previous_score=None,
            overall_score=70,
            events=[],
            dispatch_results=[],
            optimization={},
        )

        with patch("recall.api.brands.rescore_brand", new_callable=AsyncMock, return_value=result) as mock:
            response = client.post("/v1/brands/brand-1/optimize")

        assert response.status_code == 200
        assert response.json()["overall_score"] == 70
        mock.assert_awaited_once_with(AUTH, "brand-1")

    @pytest.mark.parametrize(
        "error,status_code",
        [
            (EntityNotFoundError("Brand missing not found"), 404),
            (ConfigurationError("bad threshold", field="threshold_value", value=150), 422),
            (ScoreProviderError("Rate limits exceeded", 429), 429),
            (ScoreProviderError("Payment required", 402), 402),
            (ScoreProviderError("Model output could not be validated to schema"), 502),
            (ScoreProviderError("AI gateway error: 500", 500), 502),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_error_mapping(self, error, status_code):
        with patch("recall.api.brands.rescore_brand", new_callable=AsyncMock, side_effect=error):
            response = client.post("/v1/brands/brand-1/optimize")

        assert response.status_code == status_code


class TestScoreHistory:
    def test_history_and_trend(self, mock_brands_db):
        mock_brands_db.get_brand_profile.return_value = brand_row()
        rows = [
            {
                "id": "h2",
                "brand_id": "brand-1",
                "semantic_clarity_score": 80,
                "intent_alignment_score": 80,
                "authority_score": 80,
                "consistency_score": 80,
                "explainability_score": 80,
                "created_at": "2026-02-01T00:00:00Z",
            },
            {
                "id": "h1",
                "brand_id": "brand-1",
                "semantic_clarity_score": 60,
                "intent_alignment_score": 60,
                "authority_score": 60,
                "consistency_score": 60,
                "explainability_score": 60,
                "created_at": "2026-01-01T00:00:00Z",
            },
        ]

        with patch("recall.api.brands.history_db") as history_db:
            history_db.list_score_history.return_value = rows
            response = client.get("/v1/brands/brand-1/score-history")

        assert response.status_code == 200
        data = response.json()
        assert [e["id"] for e in data["entries"]] == ["h1", "h2"]
        assert data["trend"]["change"] == 20
        mock_brands_db.get_brand_profile.assert_called_once_with("brand-1", "user-1")
        history_db.list_score_history.assert_called_once_with("brand-1", "user-1")

    def test_admin_reads_owner_history(self, mock_brands_db):
        app.dependency_overrides[require_auth] = lambda: ADMIN
        mock_brands_db.get_brand_profile.return_value = brand_row(user_id="user-2")

        with patch("recall.api.brands.history_db") as history_db:
            history_db.list_score_history.return_value = []
            response = client.get("/v1/brands/brand-1/score-history")

        assert response.status_code == 200
        mock_brands_db.get_brand_profile.assert_called_once_with("brand-1", None)
        history_db.list_score_history.assert_called_once_with("brand-1", "user-2")

    def test_unknown_brand(self, mock_brands_db):
        mock_brands_db.get_brand_profile.return_value = None

        response = client.get("/v1/brands/missing/score-history")

        assert response.status_code == 404


class TestBrandCompetitors:
    def test_differences(self, mock_brands_db):
        mock_brands_db.get_brand_profile.return_value = brand_row()

        with patch("recall.api.brands.competitors_db") as competitors_db:
            competitors_db.list_competitors.return_value = [
                competitor_row("c1"),
                competitor_row("c2", last_analyzed_at=None),
            ]
            response = client.get("/v1/brands/brand-1/competitors")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["competitors"][0]["difference"]["difference"] == 10
        assert data["competitors"][0]["difference"]["standing"] == "ahead"
        assert data["competitors"][1]["difference"] is None


class TestAnalyzeCompetitor:
    def test_success(self):
        competitor = ScoredEntity.from_competitor_row(competitor_row())

        with patch(
            "recall.api.competitors.rescore_competitor", new_callable=AsyncMock, return_value=competitor
        ) as mock:
            response = client.post("/v1/competitors/comp-1/analyze")

        assert response.status_code == 200
        assert response.json()["overall_score"] == 60
        mock.assert_awaited_once_with(AUTH, "comp-1")

    def test_rate_limited(self):
        with patch(
            "recall.api.competitors.rescore_competitor",
            new_callable=AsyncMock,
            side_effect=ScoreProviderError("Rate limits exceeded", 429),
        ):
            response = client.post("/v1/competitors/comp-1/analyze")

        assert response.status_code == 429


class TestAuthRequired:
    def test_missing_credentials(self):
        app.dependency_overrides.clear()

        response = client.get("/v1/brands")

        assert response.status_code == 401
