"""Score history ordering and trend summaries."""

from typing import Sequence

from recall.core.scoring.types import SUB_SCORE_KEYS, ScoreHistoryEntry, TrendSummary


def order_history(entries: Sequence[ScoreHistoryEntry]) -> list[ScoreHistoryEntry]:
    """Entries oldest first; equal timestamps keep their input order."""
    return sorted(entries, key=lambda e: e.timestamp)


def previous_overall_score(entries: Sequence[ScoreHistoryEntry]) -> int | None:
    """Overall score of the most recent entry, or None with no history."""
    if not entries:
        return None
    return order_history(entries)[-1].overall_score


def summarize_trend(entries: Sequence[ScoreHistoryEntry]) -> TrendSummary | None:
    """Movement between the first and latest snapshot; None for an empty history."""
    if not entries:
        return None

    ordered = order_history(entries)
    first, latest = ordered[0], ordered[-1]

    return TrendSummary(
        entries=len(ordered),
        first_score=first.overall_score,
        latest_score=latest.overall_score,
        change=latest.overall_score - first.overall_score,
        best_score=max(e.overall_score for e in ordered),
        first_recorded_at=first.timestamp,
        latest_recorded_at=latest.timestamp,
        sub_score_changes={
            key: latest.score_set.get(key) - first.score_set.get(key) for key in SUB_SCORE_KEYS
        },
    )
