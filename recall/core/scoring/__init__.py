"""Recall scoring core.

Turns five AI-discoverability sub-scores into an overall Recall Score,
compares scored brands and competitors, and decides which score
notifications a transition should fire:

- aggregate: sub-score normalisation and overall score
- compare: ranking, gap-to-leader and weakest-area analysis
- triggers: threshold / improvement notification decisions
- trends: score history ordering and summaries

Usage:
    from recall.core.scoring import ScoredEntity, evaluate_score_transition

    events = evaluate_score_transition(entity, previous_score, prefs)
"""

from recall.core.scoring.aggregate import normalize_sub_score, overall_score
from recall.core.scoring.compare import (
    compare_entities,
    gap_to_leader,
    priority_improvement,
    rank_by,
    score_difference,
    weakest_area,
)
from recall.core.scoring.errors import ConfigurationError, InsufficientDataError, ScoringError
from recall.core.scoring.trends import order_history, previous_overall_score, summarize_trend
from recall.core.scoring.triggers import evaluate_score_transition, validate_preferences
from recall.core.scoring.types import (
    SUB_SCORE_KEYS,
    ComparisonReport,
    DispatchResult,
    NotificationEvent,
    NotificationKind,
    NotificationPreferences,
    ScoredEntity,
    ScoreHistoryEntry,
    ScoreKey,
    ScoreSet,
)

__all__ = [
    "normalize_sub_score",
    "overall_score",
    "rank_by",
    "weakest_area",
    "gap_to_leader",
    "priority_improvement",
    "compare_entities",
    "score_difference",
    "evaluate_score_transition",
    "validate_preferences",
    "order_history",
    "previous_overall_score",
    "summarize_trend",
    "ScoringError",
    "InsufficientDataError",
    "ConfigurationError",
    "ScoreKey",
    "SUB_SCORE_KEYS",
    "ScoreSet",
    "ScoredEntity",
    "ScoreHistoryEntry",
    "NotificationKind",
    "NotificationPreferences",
    "NotificationEvent",
    "DispatchResult",
    "ComparisonReport",
]
