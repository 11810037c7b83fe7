"""Ranking and gap analysis across scored brands and competitors.

All functions are pure. Unscored entities are dropped before any
comparison; operations that compare an entity against others need at
least two scored entities and raise InsufficientDataError otherwise.
"""

from typing import Sequence

from recall.core.logging import get_logger
from recall.core.scoring.errors import InsufficientDataError
from recall.core.scoring.types import (
    SCORE_LABELS,
    SUB_SCORE_KEYS,
    ComparisonReport,
    ComponentAverage,
    ImprovementPriority,
    LeaderGap,
    ScoreDifference,
    ScoredEntity,
    ScoreKey,
)

logger = get_logger(__name__)

MIN_COMPARISON_ENTITIES = 2


def _scored(entities: Sequence[ScoredEntity], required: int, operation: str) -> list[ScoredEntity]:
    scored = [e for e in entities if e.is_scored]
    if len(scored) < required:
        raise InsufficientDataError(
            f"{operation} needs at least {required} scored entities, got {len(scored)}",
            required=required,
            available=len(scored),
        )
    return scored


def rank_by(
    entities: Sequence[ScoredEntity],
    score_key: ScoreKey = ScoreKey.OVERALL,
) -> list[ScoredEntity]:
    """
    Sort entities by a score field, highest first.

    The sort is stable, so tied entities keep their input order.
    """
    scored = _scored(entities, MIN_COMPARISON_ENTITIES, "rank_by")
    return sorted(scored, key=lambda e: e.score(score_key), reverse=True)


def weakest_area(entity: ScoredEntity) -> ScoreKey:
    """
    Sub-score with the lowest value for an entity.

    Ties go to the earlier field in SUB_SCORE_KEYS.
    """
    _scored([entity], 1, "weakest_area")

    weakest = SUB_SCORE_KEYS[0]
    lowest = entity.score(weakest)
    for key in SUB_SCORE_KEYS[1:]:
        value = entity.score(key)
        if value < lowest:
            weakest, lowest = key, value
    return weakest


def gap_to_leader(
    entities: Sequence[ScoredEntity],
    score_key: ScoreKey = ScoreKey.OVERALL,
) -> list[LeaderGap]:
    """
    Distance from each entity to the best score for ``score_key``.

    Each record also carries the entity's weakest area and its gap to the
    best score in that area; the record with the largest weakest-area gap
    is flagged ``is_priority`` (first in input order on ties).
    """
    scored = _scored(entities, MIN_COMPARISON_ENTITIES, "gap_to_leader")

    leader_score = max(e.score(score_key) for e in scored)
    best_by_area = {key: max(e.score(key) for e in scored) for key in SUB_SCORE_KEYS}

    gaps: list[LeaderGap] = []
    for entity in scored:
        area = weakest_area(entity)
        area_score = entity.score(area)
        gaps.append(
            LeaderGap(
                entity=entity,
                score_key=score_key,
                score=entity.score(score_key),
                leader_score=leader_score,
                gap=leader_score - entity.score(score_key),
                weakest_area=area,
                weakest_area_score=area_score,
                weakest_area_gap=best_by_area[area] - area_score,
            )
        )

    priority_index = 0
    for index, record in enumerate(gaps):
        if record.weakest_area_gap > gaps[priority_index].weakest_area_gap:
            priority_index = index
    gaps[priority_index] = gaps[priority_index].model_copy(update={"is_priority": True})

    return gaps


def _as_priority(gaps: list[LeaderGap]) -> ImprovementPriority:
    flagged = next(g for g in gaps if g.is_priority)
    return ImprovementPriority(
        entity=flagged.entity,
        weakest_area=flagged.weakest_area,
        score=flagged.weakest_area_score,
        gap=flagged.weakest_area_gap,
    )


def priority_improvement(entities: Sequence[ScoredEntity]) -> ImprovementPriority:
    """The entity with the largest improvement opportunity in its weakest area."""
    return _as_priority(gap_to_leader(entities))


def component_averages(entities: Sequence[ScoredEntity]) -> list[ComponentAverage]:
    """Mean of each sub-score across the scored entities, in priority order."""
    scored = _scored(entities, 1, "component_averages")
    return [
        ComponentAverage(
            score_key=key,
            label=SCORE_LABELS[key],
            average=round(sum(e.score(key) for e in scored) / len(scored), 1),
        )
        for key in SUB_SCORE_KEYS
    ]


def weakest_component(entities: Sequence[ScoredEntity]) -> ScoreKey:
    """Sub-score with the lowest average across entities."""
    averages = component_averages(entities)
    weakest = averages[0]
    for avg in averages[1:]:
        if avg.average < weakest.average:
            weakest = avg
    return weakest.score_key


def lowest_overall(entities: Sequence[ScoredEntity]) -> ScoredEntity:
    """Entity with the lowest overall score (first seen on ties)."""
    scored = _scored(entities, 1, "lowest_overall")
    lowest = scored[0]
    for entity in scored[1:]:
        if entity.overall_score < lowest.overall_score:
            lowest = entity
    return lowest


def compare_entities(
    entities: Sequence[ScoredEntity],
    score_key: ScoreKey = ScoreKey.OVERALL,
) -> ComparisonReport:
    """Bundle ranking, gaps and improvement hints for a comparison view."""
    gaps = gap_to_leader(entities, score_key)
    priority = _as_priority(gaps)

    report = ComparisonReport(
        ranking=rank_by(entities, score_key),
        gaps=gaps,
        priority_improvement=priority,
        lowest_overall=lowest_overall(entities),
        component_averages=component_averages(entities),
        weakest_component=weakest_component(entities),
    )
    logger.debug(
        f"Compared {len(report.ranking)} entities by {score_key.value}, "
        f"priority={priority.entity.id} ({priority.weakest_area.value})"
    )
    return report


def score_difference(brand: ScoredEntity, competitor: ScoredEntity) -> ScoreDifference:
    """How far a brand's overall score is ahead of (or behind) a competitor's."""
    _scored([brand, competitor], 2, "score_difference")
    difference = brand.overall_score - competitor.overall_score
    if difference > 0:
        standing = "ahead"
    elif difference < 0:
        standing = "behind"
    else:
        standing = "tied"
    return ScoreDifference(
        brand_id=brand.id,
        competitor_id=competitor.id,
        difference=difference,
        standing=standing,
    )
