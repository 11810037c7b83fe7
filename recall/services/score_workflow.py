"""Re-scoring workflow for brands and competitors.

Ties the external collaborators (AI gateway, Supabase, email) to the
pure scoring core:

1. Fetch the entity visible to the caller (admins see every owner's)
2. (brands) Load and validate the owner's notification preferences
3. Get fresh sub-scores from the AI gateway
4. Persist sub-scores with a recomputed overall score
5. (brands) Append a history snapshot, evaluate notification triggers
   against the previous score and dispatch the resulting events

Supabase and gateway clients are synchronous, so those calls run in
worker threads via asyncio.to_thread.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from recall.core.auth_middleware import AuthContext
from recall.core.logging import get_logger, log_with_context
from recall.core.notification_dispatch import dispatch_events
from recall.core.schemas_scoring import BrandData
from recall.core.score_provider import analyze_competitor, score_brand
from recall.core.scoring import (
    DispatchResult,
    NotificationEvent,
    NotificationPreferences,
    ScoredEntity,
    ScoreHistoryEntry,
    evaluate_score_transition,
    overall_score,
    validate_preferences,
)
from recall.core.scoring.types import BRAND_SCORE_COLUMNS, COMPETITOR_SCORE_COLUMNS
from recall.db import brand_profiles as brands_db
from recall.db import competitors as competitors_db
from recall.db import notification_preferences as prefs_db
from recall.db import score_history as history_db

logger = get_logger(__name__)


class EntityNotFoundError(LookupError):
    """Raised when the entity does not exist or is not owned by the caller."""


class BrandRescoreResult(BaseModel):
    brand: ScoredEntity
    previous_score: int | None
    overall_score: int
    events: list[NotificationEvent]
    dispatch_results: list[DispatchResult]
    optimization: dict[str, Any]


def resolve_destination(prefs: NotificationPreferences, account_email: str | None) -> str | None:
    """Preferred notification address, falling back to the account email."""
    return prefs.destination_email or account_email


def _previous_overall_score(brand_id: str, user_id: str) -> int | None:
    latest = history_db.get_latest_score_entry(brand_id, user_id)
    if not latest:
        return None
    return ScoreHistoryEntry.from_row(latest).overall_score


def _owner_email(auth: AuthContext, owner_id: str) -> str | None:
    # Admins acting on someone else's brand have no account email for the owner
    return auth.email if owner_id == auth.user_id else None


async def rescore_brand(auth: AuthContext, brand_id: str) -> BrandRescoreResult:
    """
    Re-score a brand, record the snapshot and fire score notifications.

    History, preferences and notifications belong to the brand's owner, which
    is the caller unless an admin re-scores another user's brand.

    Raises:
        EntityNotFoundError: If the brand is not visible to the caller
        ConfigurationError: If the owner's notification preferences are invalid
        ScoreProviderError: If the AI gateway fails
    """
    row = await asyncio.to_thread(brands_db.get_brand_profile, brand_id, auth.owner_scope)
    if not row:
        raise EntityNotFoundError(f"Brand {brand_id} not found")

    owner_id = str(row["user_id"])
    owner_email = _owner_email(auth, owner_id)

    # Nothing is persisted until the preferences are known to be usable
    prefs = NotificationPreferences.from_row(
        await asyncio.to_thread(prefs_db.get_or_create_preferences, owner_id, owner_email)
    )
    validate_preferences(prefs)

    optimization = await asyncio.to_thread(score_brand, BrandData.model_validate(row))
    score_set = optimization.scores.to_score_set()
    new_overall = overall_score(score_set)

    # Read before appending, so the new snapshot is not its own baseline
    previous_score = await asyncio.to_thread(_previous_overall_score, brand_id, owner_id)

    updated = await asyncio.to_thread(
        brands_db.update_brand_profile,
        brand_id,
        {
            **score_set.to_columns(BRAND_SCORE_COLUMNS),
            "recall_score": new_overall,
            "ai_summary": optimization.ai_summary,
            "ai_recommendation_triggers": optimization.recommend_when,
            "ai_example_snippets": [s.model_dump() for s in optimization.example_snippets],
            "is_optimized": True,
        },
    )
    await asyncio.to_thread(history_db.append_score_entry, brand_id, owner_id, score_set, new_overall)

    brand = ScoredEntity.from_brand_row(updated)
    events = evaluate_score_transition(brand, previous_score, prefs)

    dispatch_results = await dispatch_events(
        events,
        user_id=owner_id,
        destination=resolve_destination(prefs, owner_email),
        brand_name=brand.display_name,
        score_set=brand.score_set,
    )

    log_with_context(
        logger,
        logging.INFO,
        f"Re-scored brand: {previous_score} -> {brand.overall_score}",
        entity_id=brand_id,
        user_id=owner_id,
        events=len(events),
        sent=sum(r.success for r in dispatch_results),
    )

    return BrandRescoreResult(
        brand=brand,
        previous_score=previous_score,
        overall_score=brand.overall_score,
        events=events,
        dispatch_results=dispatch_results,
        optimization=optimization.model_dump(by_alias=True),
    )


async def rescore_competitor(auth: AuthContext, competitor_id: str) -> ScoredEntity:
    """
    Re-estimate a competitor's sub-scores. Competitors never notify.

    Raises:
        EntityNotFoundError: If the competitor is not visible to the caller
        ScoreProviderError: If the AI gateway fails
    """
    row = await asyncio.to_thread(competitors_db.get_competitor, competitor_id, auth.owner_scope)
    if not row:
        raise EntityNotFoundError(f"Competitor {competitor_id} not found")

    analysis = await asyncio.to_thread(
        analyze_competitor,
        name=row["competitor_name"],
        website=row.get("competitor_website"),
        description=row.get("competitor_description"),
    )
    score_set = analysis.scores.to_score_set()

    updated = await asyncio.to_thread(
        competitors_db.update_competitor,
        competitor_id,
        {
            **score_set.to_columns(COMPETITOR_SCORE_COLUMNS),
            "estimated_recall_score": overall_score(score_set),
            "analysis_notes": analysis.notes,
            "last_analyzed_at": datetime.now(timezone.utc).isoformat(),
        },
    )

    competitor = ScoredEntity.from_competitor_row(updated)
    log_with_context(
        logger,
        logging.INFO,
        f"Analyzed competitor: {competitor.overall_score}",
        entity_id=competitor_id,
    )
    return competitor
