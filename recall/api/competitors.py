"""API endpoints for competitor analysis."""

from fastapi import APIRouter, Depends, HTTPException, Path

from recall.api.brands import provider_error_status
from recall.core.auth_middleware import AuthContext, require_auth
from recall.core.logging import get_logger
from recall.core.score_provider import ScoreProviderError
from recall.core.scoring import ScoredEntity
from recall.services.score_workflow import EntityNotFoundError, rescore_competitor

logger = get_logger(__name__)

router = APIRouter(prefix="/competitors")


@router.post("/{competitor_id}/analyze", response_model=ScoredEntity)
async def analyze_competitor(
    competitor_id: str = Path(..., description="Competitor id"),
    auth: AuthContext = Depends(require_auth),
) -> ScoredEntity:
    """Re-estimate a competitor's sub-scores."""
    try:
        return await rescore_competitor(auth, competitor_id)

    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ScoreProviderError as e:
        raise HTTPException(status_code=provider_error_status(e), detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error analyzing competitor {competitor_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to analyze competitor") from e
