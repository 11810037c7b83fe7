"""API endpoints for brand scoring, history and comparison."""

from fastapi import APIRouter, Depends, HTTPException, Path

from recall.core.auth_middleware import AuthContext, require_auth
from recall.core.logging import get_logger
from recall.core.schemas_brands import (
    BrandListResponse,
    CompareRequest,
    CompetitorComparison,
    CompetitorListResponse,
    ScoreHistoryResponse,
)
from recall.core.score_provider import ScoreProviderError
from recall.core.scoring import (
    ComparisonReport,
    ScoredEntity,
    ScoreHistoryEntry,
    ScoringError,
    compare_entities,
    order_history,
    score_difference,
    summarize_trend,
)
from recall.db import brand_profiles as brands_db
from recall.db import competitors as competitors_db
from recall.db import score_history as history_db
from recall.services.score_workflow import BrandRescoreResult, EntityNotFoundError, rescore_brand

logger = get_logger(__name__)

router = APIRouter(prefix="/brands")


def provider_error_status(e: ScoreProviderError) -> int:
    """HTTP status for a gateway failure; unknown upstream errors are a 502."""
    if e.status_code in (402, 429, 503):
        return e.status_code
    return 502


def _load_brand(brand_id: str, auth: AuthContext) -> tuple[ScoredEntity, str]:
    """Brand visible to the caller, with the id of the user who owns it."""
    row = brands_db.get_brand_profile(brand_id, auth.owner_scope)
    if not row:
        raise HTTPException(status_code=404, detail="Brand not found")
    return ScoredEntity.from_brand_row(row), str(row["user_id"])


@router.get("", response_model=BrandListResponse)
async def list_brands(auth: AuthContext = Depends(require_auth)) -> BrandListResponse:
    """List the caller's brands with their current overall scores."""
    try:
        brands = [ScoredEntity.from_brand_row(r) for r in brands_db.list_brand_profiles(auth.user_id)]
        return BrandListResponse(brands=brands, total=len(brands))

    except Exception as e:
        logger.error(f"Error listing brands: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list brands") from e


@router.post("/compare", response_model=ComparisonReport)
async def compare_brands(
    body: CompareRequest,
    auth: AuthContext = Depends(require_auth),
) -> ComparisonReport:
    """
    Rank the requested brands and find where each should improve first.

    Returns 422 when fewer than two of the brands have been scored.
    """
    try:
        rows = brands_db.list_brand_profiles_by_ids(auth.owner_scope, body.brand_ids)
        entities = [ScoredEntity.from_brand_row(r) for r in rows]
        return compare_entities(entities, body.score_key)

    except ScoringError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error comparing brands: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to compare brands") from e


@router.post("/{brand_id}/optimize", response_model=BrandRescoreResult)
async def optimize_brand(
    brand_id: str = Path(..., description="Brand profile id"),
    auth: AuthContext = Depends(require_auth),
) -> BrandRescoreResult:
    """Re-score a brand and send any score notifications it earns."""
    try:
        return await rescore_brand(auth, brand_id)

    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ScoringError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ScoreProviderError as e:
        raise HTTPException(status_code=provider_error_status(e), detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error optimizing brand {brand_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to optimize brand") from e


@router.get("/{brand_id}/score-history", response_model=ScoreHistoryResponse)
async def get_score_history(
    brand_id: str = Path(..., description="Brand profile id"),
    auth: AuthContext = Depends(require_auth),
) -> ScoreHistoryResponse:
    """Score snapshots for a brand, oldest first, with a trend summary."""
    try:
        _, owner_id = _load_brand(brand_id, auth)
        entries = order_history(
            [ScoreHistoryEntry.from_row(r) for r in history_db.list_score_history(brand_id, owner_id)]
        )
        return ScoreHistoryResponse(brand_id=brand_id, entries=entries, trend=summarize_trend(entries))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error loading score history for {brand_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load score history") from e


@router.get("/{brand_id}/competitors", response_model=CompetitorListResponse)
async def list_brand_competitors(
    brand_id: str = Path(..., description="Brand profile id"),
    auth: AuthContext = Depends(require_auth),
) -> CompetitorListResponse:
    """Competitors tracked against a brand, with the overall score difference."""
    try:
        brand, owner_id = _load_brand(brand_id, auth)
        comparisons = []
        for row in competitors_db.list_competitors(owner_id, brand_id):
            competitor = ScoredEntity.from_competitor_row(row)
            difference = None
            if brand.is_scored and competitor.is_scored:
                difference = score_difference(brand, competitor)
            comparisons.append(CompetitorComparison(competitor=competitor, difference=difference))

        return CompetitorListResponse(brand=brand, competitors=comparisons, total=len(comparisons))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing competitors for {brand_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list competitors") from e
