"""Tests for ranking, gap-to-leader and weakest-area analysis."""

import pytest

from recall.core.scoring import (
    InsufficientDataError,
    ScoreKey,
    compare_entities,
    gap_to_leader,
    priority_improvement,
    rank_by,
    score_difference,
    weakest_area,
)
from recall.core.scoring.compare import component_averages, lowest_overall, weakest_component
from tests.factories import entity_with_overall, make_entity


class TestRankBy:
    def test_highest_first(self):
        entities = [entity_with_overall("a", 40), entity_with_overall("b", 90), entity_with_overall("c", 65)]

        ranked = rank_by(entities)

        assert [e.id for e in ranked] == ["b", "c", "a"]

    def test_idempotent(self):
        entities = [entity_with_overall("a", 40), entity_with_overall("b", 90), entity_with_overall("c", 65)]

        once = rank_by(entities)
        twice = rank_by(once)

        assert [e.id for e in twice] == [e.id for e in once]

    def test_ties_keep_input_order(self):
        entities = [
            entity_with_overall("x", 70),
            entity_with_overall("top", 80),
            entity_with_overall("y", 70),
            entity_with_overall("z", 70),
        ]

        assert [e.id for e in rank_by(entities)] == ["top", "x", "y", "z"]
        reordered = [entities[3], entities[0], entities[2], entities[1]]
        assert [e.id for e in rank_by(reordered)] == ["top", "z", "x", "y"]

    def test_by_sub_score(self):
        entities = [
            make_entity("a", (90, 10, 10, 10, 10)),
            make_entity("b", (20, 80, 80, 80, 80)),
        ]

        assert [e.id for e in rank_by(entities, ScoreKey.SEMANTIC_CLARITY)] == ["a", "b"]
        assert [e.id for e in rank_by(entities, ScoreKey.OVERALL)] == ["b", "a"]

    def test_unscored_entities_are_dropped(self):
        entities = [
            entity_with_overall("a", 40),
            entity_with_overall("pending", 0, is_scored=False),
            entity_with_overall("b", 60),
        ]

        assert [e.id for e in rank_by(entities)] == ["b", "a"]

    def test_needs_two_scored(self):
        entities = [entity_with_overall("a", 40), entity_with_overall("b", 60, is_scored=False)]

        with pytest.raises(InsufficientDataError) as exc_info:
            rank_by(entities)

        assert exc_info.value.required == 2
        assert exc_info.value.available == 1

    def test_empty_input(self):
        with pytest.raises(InsufficientDataError):
            rank_by([])


class TestWeakestArea:
    def test_tie_broken_by_priority_order(self):
        entity = make_entity("a", (40, 40, 80, 60, 70))

        assert weakest_area(entity) == ScoreKey.SEMANTIC_CLARITY

    def test_later_tie_goes_to_earlier_field(self):
        entity = make_entity("a", (90, 80, 30, 60, 30))

        assert weakest_area(entity) == ScoreKey.AUTHORITY_SIGNALS

    def test_single_minimum(self):
        entity = make_entity("a", (90, 80, 70, 60, 20))

        assert weakest_area(entity) == ScoreKey.EXPLAINABILITY

    def test_all_equal(self):
        assert weakest_area(entity_with_overall("a", 50)) == ScoreKey.SEMANTIC_CLARITY

    def test_unscored_entity_raises(self):
        with pytest.raises(InsufficientDataError):
            weakest_area(make_entity("a", is_scored=False))


class TestGapToLeader:
    def test_leader_gap_is_zero(self):
        entities = [entity_with_overall("a", 40), entity_with_overall("b", 90), entity_with_overall("c", 65)]

        gaps = {g.entity.id: g for g in gap_to_leader(entities)}

        assert gaps["b"].gap == 0
        assert gaps["a"].gap == 50
        assert gaps["c"].gap == 25
        assert all(g.leader_score == 90 for g in gaps.values())

    def test_leader_gap_is_zero_for_sub_score(self):
        entities = [
            make_entity("a", (90, 10, 10, 10, 10)),
            make_entity("b", (20, 80, 80, 80, 80)),
        ]

        gaps = {g.entity.id: g for g in gap_to_leader(entities, ScoreKey.SEMANTIC_CLARITY)}

        assert gaps["a"].gap == 0
        assert gaps["b"].gap == 70

    def test_weakest_area_gap_and_priority(self):
        entities = [
            make_entity("a", (80, 80, 80, 80, 80)),
            make_entity("b", (70, 75, 30, 70, 70)),
            make_entity("c", (50, 78, 78, 78, 78)),
        ]

        gaps = {g.entity.id: g for g in gap_to_leader(entities)}

        assert gaps["b"].weakest_area == ScoreKey.AUTHORITY_SIGNALS
        assert gaps["b"].weakest_area_gap == 50
        assert gaps["c"].weakest_area == ScoreKey.SEMANTIC_CLARITY
        assert gaps["c"].weakest_area_gap == 30
        assert [g.entity.id for g in gaps.values() if g.is_priority] == ["b"]

    def test_priority_tie_goes_to_first(self):
        entities = [entity_with_overall("a", 50), entity_with_overall("b", 50)]

        gaps = gap_to_leader(entities)

        assert [g.is_priority for g in gaps] == [True, False]

    def test_needs_two_scored(self):
        with pytest.raises(InsufficientDataError):
            gap_to_leader([entity_with_overall("a", 50)])


class TestSummaries:
    def setup_method(self):
        self.entities = [
            make_entity("a", (80, 70, 60, 90, 50)),
            make_entity("b", (60, 50, 40, 70, 90)),
        ]

    def test_priority_improvement(self):
        priority = priority_improvement(self.entities)

        # a trails b by 40 in explainability; b trails a by 20 in authority
        assert priority.entity.id == "a"
        assert priority.weakest_area == ScoreKey.EXPLAINABILITY
        assert priority.score == 50
        assert priority.gap == 40

    def test_component_averages(self):
        averages = {a.score_key: a.average for a in component_averages(self.entities)}

        assert averages[ScoreKey.SEMANTIC_CLARITY] == 70.0
        assert averages[ScoreKey.AUTHORITY_SIGNALS] == 50.0
        assert averages[ScoreKey.EXPLAINABILITY] == 70.0

    def test_weakest_component(self):
        assert weakest_component(self.entities) == ScoreKey.AUTHORITY_SIGNALS

    def test_lowest_overall(self):
        assert lowest_overall(self.entities).id == "b"

    def test_compare_entities(self):
        report = compare_entities(self.entities)

        assert [e.id for e in report.ranking] == ["a", "b"]
        assert report.priority_improvement.entity.id == "a"
        assert report.lowest_overall.id == "b"
        assert report.weakest_component == ScoreKey.AUTHORITY_SIGNALS
        assert len(report.gaps) == 2

    def test_compare_entities_rejects_single_scored(self):
        entities = [self.entities[0], make_entity("c", is_scored=False)]

        with pytest.raises(InsufficientDataError):
            compare_entities(entities)


class TestScoreDifference:
    def test_ahead(self):
        diff = score_difference(entity_with_overall("brand", 72), entity_with_overall("comp", 60, kind="competitor"))

        assert diff.difference == 12
        assert diff.standing == "ahead"

    def test_behind(self):
        diff = score_difference(entity_with_overall("brand", 55), entity_with_overall("comp", 60, kind="competitor"))

        assert diff.difference == -5
        assert diff.standing == "behind"

    def test_tied(self):
        diff = score_difference(entity_with_overall("brand", 60), entity_with_overall("comp", 60, kind="competitor"))

        assert diff.standing == "tied"

    def test_unanalyzed_competitor(self):
        with pytest.raises(InsufficientDataError):
            score_difference(
                entity_with_overall("brand", 60),
                entity_with_overall("comp", 0, kind="competitor", is_scored=False),
            )
