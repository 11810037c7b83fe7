"""Pydantic models for the Recall scoring core."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from recall.core.scoring.aggregate import normalize_sub_score, overall_score


# =============================================================================
# Score keys
# =============================================================================


class ScoreKey(str, Enum):
    """Score fields an entity can be ranked by."""

    OVERALL = "overall"
    SEMANTIC_CLARITY = "semantic_clarity"
    INTENT_ALIGNMENT = "intent_alignment"
    AUTHORITY_SIGNALS = "authority_signals"
    CONSISTENCY = "consistency"
    EXPLAINABILITY = "explainability"


# Fixed priority order; also the tie-break order for weakest-area lookups
SUB_SCORE_KEYS: tuple[ScoreKey, ...] = (
    ScoreKey.SEMANTIC_CLARITY,
    ScoreKey.INTENT_ALIGNMENT,
    ScoreKey.AUTHORITY_SIGNALS,
    ScoreKey.CONSISTENCY,
    ScoreKey.EXPLAINABILITY,
)

SCORE_LABELS: dict[ScoreKey, str] = {
    ScoreKey.OVERALL: "Recall Score",
    ScoreKey.SEMANTIC_CLARITY: "Semantic Clarity",
    ScoreKey.INTENT_ALIGNMENT: "Intent Alignment",
    ScoreKey.AUTHORITY_SIGNALS: "Authority Signals",
    ScoreKey.CONSISTENCY: "Consistency",
    ScoreKey.EXPLAINABILITY: "Explainability",
}

# Column names per table
BRAND_SCORE_COLUMNS: dict[ScoreKey, str] = {
    ScoreKey.SEMANTIC_CLARITY: "semantic_clarity_score",
    ScoreKey.INTENT_ALIGNMENT: "intent_alignment_score",
    ScoreKey.AUTHORITY_SIGNALS: "authority_score",
    ScoreKey.CONSISTENCY: "consistency_score",
    ScoreKey.EXPLAINABILITY: "explainability_score",
}

COMPETITOR_SCORE_COLUMNS: dict[ScoreKey, str] = {
    ScoreKey.SEMANTIC_CLARITY: "estimated_semantic_clarity",
    ScoreKey.INTENT_ALIGNMENT: "estimated_intent_alignment",
    ScoreKey.AUTHORITY_SIGNALS: "estimated_authority",
    ScoreKey.CONSISTENCY: "estimated_consistency",
    ScoreKey.EXPLAINABILITY: "estimated_explainability",
}


# =============================================================================
# Score sets and entities
# =============================================================================


class ScoreSet(BaseModel):
    """Five AI-discoverability sub-scores for one entity at one point in time."""

    model_config = ConfigDict(frozen=True)

    semantic_clarity: int = Field(default=0, ge=0, le=100)
    intent_alignment: int = Field(default=0, ge=0, le=100)
    authority_signals: int = Field(default=0, ge=0, le=100)
    consistency: int = Field(default=0, ge=0, le=100)
    explainability: int = Field(default=0, ge=0, le=100)

    @field_validator(
        "semantic_clarity",
        "intent_alignment",
        "authority_signals",
        "consistency",
        "explainability",
        mode="before",
    )
    @classmethod
    def normalize(cls, v: Any) -> int:
        return normalize_sub_score(v)

    def as_tuple(self) -> tuple[int, int, int, int, int]:
        """Sub-scores in fixed priority order."""
        return (
            self.semantic_clarity,
            self.intent_alignment,
            self.authority_signals,
            self.consistency,
            self.explainability,
        )

    def get(self, key: ScoreKey) -> int:
        return getattr(self, key.value)

    @classmethod
    def from_columns(cls, row: Mapping[str, Any], columns: Mapping[ScoreKey, str]) -> "ScoreSet":
        """Build from a database row using the given column mapping."""
        return cls(**{key.value: row.get(column) for key, column in columns.items()})

    def to_columns(self, columns: Mapping[ScoreKey, str]) -> dict[str, int]:
        """Inverse of from_columns."""
        return {column: self.get(key) for key, column in columns.items()}


class ScoredEntity(BaseModel):
    """A brand profile or a competitor record with its current scores."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    kind: Literal["brand", "competitor"] = "brand"
    score_set: ScoreSet = Field(default_factory=ScoreSet)
    is_scored: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        return overall_score(self.score_set)

    def score(self, key: ScoreKey) -> int:
        """Value of the given score field."""
        if key == ScoreKey.OVERALL:
            return self.overall_score
        return self.score_set.get(key)

    @classmethod
    def from_brand_row(cls, row: Mapping[str, Any]) -> "ScoredEntity":
        """Build from a brand_profiles row. The stored recall_score is ignored."""
        return cls(
            id=str(row["id"]),
            display_name=row.get("brand_name") or "",
            kind="brand",
            score_set=ScoreSet.from_columns(row, BRAND_SCORE_COLUMNS),
            is_scored=bool(row.get("is_optimized")),
        )

    @classmethod
    def from_competitor_row(cls, row: Mapping[str, Any]) -> "ScoredEntity":
        """Build from a competitors row; scored once it has been analyzed."""
        return cls(
            id=str(row["id"]),
            display_name=row.get("competitor_name") or "",
            kind="competitor",
            score_set=ScoreSet.from_columns(row, COMPETITOR_SCORE_COLUMNS),
            is_scored=row.get("last_analyzed_at") is not None,
        )


class ScoreHistoryEntry(BaseModel):
    """Immutable snapshot appended each time an entity is (re-)scored."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    entity_id: str
    score_set: ScoreSet
    timestamp: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_score(self) -> int:
        return overall_score(self.score_set)

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        if isinstance(v, str):
            return datetime.fromisoformat(v.replace("Z", "+00:00"))
        return v

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ScoreHistoryEntry":
        """Build from a brand_score_history row."""
        return cls(
            id=str(row["id"]) if row.get("id") else None,
            entity_id=str(row["brand_id"]),
            score_set=ScoreSet.from_columns(row, BRAND_SCORE_COLUMNS),
            timestamp=row["created_at"],
        )


# =============================================================================
# Notifications
# =============================================================================


class NotificationKind(str, Enum):
    THRESHOLD_REACHED = "threshold_reached"
    SIGNIFICANT_IMPROVEMENT = "significant_improvement"


class NotificationPreferences(BaseModel):
    """
    Per-user notification config.

    Ranges are checked by the trigger evaluator, not here, so a bad row
    loaded from the store surfaces as a ConfigurationError at evaluation time.
    NULL thresholds are kept as None for the same reason.
    """

    enabled: bool = True
    notify_on_threshold: bool = True
    notify_on_improvement: bool = True
    threshold_value: Optional[int] = 70
    improvement_threshold: Optional[int] = 10
    destination_email: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NotificationPreferences":
        """Build from a notification_preferences row."""
        return cls(
            enabled=bool(row.get("email_notifications_enabled", True)),
            notify_on_threshold=bool(row.get("notify_on_threshold", True)),
            notify_on_improvement=bool(row.get("notify_on_improvement", True)),
            threshold_value=row.get("threshold_value", 70),
            improvement_threshold=row.get("improvement_threshold", 10),
            destination_email=row.get("notification_email"),
        )


class NotificationEvent(BaseModel):
    """A notification the evaluator decided must fire."""

    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    entity_id: str
    previous_score: Optional[int] = None
    current_score: int
    threshold_or_delta: int


class DispatchResult(BaseModel):
    """Outcome of sending one NotificationEvent."""

    event: NotificationEvent
    success: bool
    error: Optional[str] = None
    message_id: Optional[str] = None


# =============================================================================
# Comparison results
# =============================================================================


class LeaderGap(BaseModel):
    """Distance between one entity and the leader for a score key."""

    entity: ScoredEntity
    score_key: ScoreKey
    score: int
    leader_score: int
    gap: int
    weakest_area: ScoreKey
    weakest_area_score: int
    weakest_area_gap: int = Field(..., description="Gap to the best score in the entity's weakest area")
    is_priority: bool = False


class ImprovementPriority(BaseModel):
    """The entity with the largest gap in its own weakest area."""

    entity: ScoredEntity
    weakest_area: ScoreKey
    score: int
    gap: int


class ComponentAverage(BaseModel):
    score_key: ScoreKey
    label: str
    average: float


class ComparisonReport(BaseModel):
    """Ranking and gap data for a set of scored entities."""

    ranking: list[ScoredEntity]
    gaps: list[LeaderGap]
    priority_improvement: ImprovementPriority
    lowest_overall: ScoredEntity
    component_averages: list[ComponentAverage]
    weakest_component: ScoreKey


class ScoreDifference(BaseModel):
    """Brand overall score minus competitor overall score."""

    brand_id: str
    competitor_id: str
    difference: int
    standing: Literal["ahead", "behind", "tied"]


# =============================================================================
# History trends
# =============================================================================


class TrendSummary(BaseModel):
    """First-to-latest movement across a score history."""

    entries: int
    first_score: int
    latest_score: int
    change: int
    best_score: int
    first_recorded_at: datetime
    latest_recorded_at: datetime
    sub_score_changes: dict[ScoreKey, int] = Field(default_factory=dict)
