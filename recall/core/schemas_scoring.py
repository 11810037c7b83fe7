"""Pydantic schemas for AI gateway scoring output.

The gateway answers in camelCase JSON; models accept either spelling.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from recall.core.scoring.types import ScoreSet


class GatewayModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProviderScores(GatewayModel):
    """The five sub-scores exactly as returned; normalised by to_score_set."""

    semantic_clarity: float | None = None
    intent_alignment: float | None = None
    authority_signals: float | None = None
    consistency: float | None = None
    explainability: float | None = None

    def to_score_set(self) -> ScoreSet:
        return ScoreSet(
            semantic_clarity=self.semantic_clarity,
            intent_alignment=self.intent_alignment,
            authority_signals=self.authority_signals,
            consistency=self.consistency,
            explainability=self.explainability,
        )


class ExampleSnippet(GatewayModel):
    query: str
    answer: str


class ImprovementSuggestion(GatewayModel):
    area: str
    suggestion: str
    impact: Literal["high", "medium", "low"] = "medium"


class BrandOptimization(GatewayModel):
    """AI-readiness optimization package for one brand."""

    ai_readable_definition: str = Field(..., description="One-sentence AI-readable definition")
    ai_summary: str = Field(..., description="Expanded AI-readable summary")
    recommend_when: list[str] = Field(default_factory=list)
    do_not_recommend_when: list[str] = Field(default_factory=list)
    example_snippets: list[ExampleSnippet] = Field(default_factory=list)
    scores: ProviderScores
    improvements: list[ImprovementSuggestion] = Field(default_factory=list)


class CompetitorAnalysis(GatewayModel):
    """Estimated sub-scores for a competitor."""

    scores: ProviderScores
    notes: str | None = None


class BrandData(BaseModel):
    """Descriptive brand fields sent to the gateway."""

    brand_name: str
    description: str | None = None
    website_url: str | None = None
    category: str | None = None
    target_audience: str | None = None
    keywords: str | None = None
    value_proposition: str | None = None
    trust_signals: str | None = None
