"""Decide which score notifications a score transition should fire.

Two independent checks run per evaluation:
- threshold_reached fires once, on the transition that crosses the
  configured floor (or the first score on record when it is already
  at or above it). A score that stays above the floor never re-fires.
- significant_improvement fires when the overall score rose by at least
  the configured delta since the previous measurement.
"""

from typing import Any

from recall.core.logging import get_logger
from recall.core.scoring.errors import ConfigurationError
from recall.core.scoring.types import (
    NotificationEvent,
    NotificationKind,
    NotificationPreferences,
    ScoredEntity,
)

logger = get_logger(__name__)

THRESHOLD_MIN = 0
THRESHOLD_MAX = 100


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_preferences(prefs: NotificationPreferences) -> None:
    """
    Check numeric preference ranges.

    Raises:
        ConfigurationError: thresholdValue outside [0, 100] or
            improvementThreshold not a positive integer
    """
    if not _is_int(prefs.threshold_value) or not (
        THRESHOLD_MIN <= prefs.threshold_value <= THRESHOLD_MAX
    ):
        raise ConfigurationError(
            f"threshold_value must be an integer in [{THRESHOLD_MIN}, {THRESHOLD_MAX}], "
            f"got {prefs.threshold_value!r}",
            field="threshold_value",
            value=prefs.threshold_value,
        )

    if not _is_int(prefs.improvement_threshold) or prefs.improvement_threshold <= 0:
        raise ConfigurationError(
            f"improvement_threshold must be a positive integer, got {prefs.improvement_threshold!r}",
            field="improvement_threshold",
            value=prefs.improvement_threshold,
        )


def evaluate_score_transition(
    current_entity: ScoredEntity,
    previous_overall_score: int | None,
    prefs: NotificationPreferences,
) -> list[NotificationEvent]:
    """
    Evaluate one score transition against a user's preferences.

    Args:
        current_entity: Entity after (re-)scoring
        previous_overall_score: Overall score before this scoring event,
            None when the entity is scored for the first time
        prefs: The owning user's notification preferences

    Returns:
        Zero, one or two events; threshold_reached first when both fire.
        Unscored entities never produce events.

    Raises:
        ConfigurationError: If prefs are outside their valid ranges
    """
    validate_preferences(prefs)

    if not current_entity.is_scored:
        logger.debug(f"Skipping notification evaluation for unscored entity {current_entity.id}")
        return []

    current = current_entity.overall_score
    events: list[NotificationEvent] = []

    if (
        prefs.enabled
        and prefs.notify_on_threshold
        and current >= prefs.threshold_value
        and (previous_overall_score is None or previous_overall_score < prefs.threshold_value)
    ):
        events.append(
            NotificationEvent(
                kind=NotificationKind.THRESHOLD_REACHED,
                entity_id=current_entity.id,
                previous_score=previous_overall_score,
                current_score=current,
                threshold_or_delta=prefs.threshold_value,
            )
        )

    if (
        prefs.enabled
        and prefs.notify_on_improvement
        and previous_overall_score is not None
        and current - previous_overall_score >= prefs.improvement_threshold
    ):
        events.append(
            NotificationEvent(
                kind=NotificationKind.SIGNIFICANT_IMPROVEMENT,
                entity_id=current_entity.id,
                previous_score=previous_overall_score,
                current_score=current,
                threshold_or_delta=current - previous_overall_score,
            )
        )

    logger.debug(
        f"Evaluated transition {previous_overall_score} -> {current} for {current_entity.id}: "
        f"{[e.kind.value for e in events]}"
    )
    return events
