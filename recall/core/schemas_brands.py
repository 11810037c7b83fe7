"""Pydantic schemas for brand and competitor endpoints."""

from pydantic import BaseModel, Field, field_validator

from recall.core.scoring.types import (
    ScoreDifference,
    ScoredEntity,
    ScoreHistoryEntry,
    ScoreKey,
    TrendSummary,
)


class BrandListResponse(BaseModel):
    brands: list[ScoredEntity]
    total: int


class CompareRequest(BaseModel):
    """Brands to compare; unscored ones are left out of the comparison."""

    brand_ids: list[str] = Field(..., min_length=1, description="Brand profile ids")
    score_key: ScoreKey = ScoreKey.OVERALL

    @field_validator("brand_ids")
    @classmethod
    def dedupe_brand_ids(cls, v: list[str]) -> list[str]:
        # A brand listed twice must not count as two compared entities
        return list(dict.fromkeys(v))


class ScoreHistoryResponse(BaseModel):
    brand_id: str
    entries: list[ScoreHistoryEntry]
    trend: TrendSummary | None = None


class CompetitorComparison(BaseModel):
    competitor: ScoredEntity
    difference: ScoreDifference | None = None


class CompetitorListResponse(BaseModel):
    brand: ScoredEntity
    competitors: list[CompetitorComparison]
    total: int
