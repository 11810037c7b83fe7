"""Dispatch score notification events to email.

All events from one evaluation are sent concurrently; every event gets its
own DispatchResult and one failed send never cancels or rolls back another.
Retrying a failed send is left to the caller.
"""

import asyncio
import logging
from typing import Any
from uuid import UUID

from recall.core.email_service import render_score_notification, send_email
from recall.core.logging import get_logger, log_with_context
from recall.core.scoring.types import (
    DispatchResult,
    NotificationEvent,
    NotificationKind,
    ScoreSet,
)
from recall.db.notification_history import record_notification

logger = get_logger(__name__)

NO_DESTINATION_ERROR = "No destination email configured"


def _score_data(event: NotificationEvent) -> dict[str, Any]:
    data: dict[str, Any] = {"currentScore": event.current_score}
    if event.previous_score is not None:
        data["previousScore"] = event.previous_score
    if event.kind == NotificationKind.THRESHOLD_REACHED:
        data["threshold"] = event.threshold_or_delta
    else:
        data["improvement"] = event.threshold_or_delta
    return data


def _record(
    user_id: str | UUID,
    event: NotificationEvent,
    destination: str,
    subject: str,
    result: DispatchResult,
) -> None:
    """Write the history row; a failed write never changes the dispatch outcome."""
    try:
        record_notification(
            user_id=user_id,
            notification_type=event.kind.value,
            email_sent_to=destination,
            subject=subject,
            status="sent" if result.success else "failed",
            brand_id=event.entity_id,
            error_message=result.error,
            score_data=_score_data(event),
        )
    except Exception as e:
        logger.warning(f"Failed to record notification history for {event.entity_id}: {e}")


async def dispatch_events(
    events: list[NotificationEvent],
    *,
    user_id: str | UUID,
    destination: str | None,
    brand_name: str,
    score_set: ScoreSet | None = None,
) -> list[DispatchResult]:
    """
    Send every event and report each outcome.

    Args:
        events: Events returned by the trigger evaluator (0-2)
        user_id: Owner of the brand, for the history log
        destination: Resolved destination address
        brand_name: Display name used in the email
        score_set: Current sub-scores for the breakdown table

    Returns:
        One DispatchResult per event, in event order
    """
    if not events:
        return []

    if not destination:
        logger.warning(f"Skipping {len(events)} notification(s) for user {user_id}: no destination")
        return [DispatchResult(event=e, success=False, error=NO_DESTINATION_ERROR) for e in events]

    rendered = [render_score_notification(e, brand_name, score_set) for e in events]

    outcomes = await asyncio.gather(
        *(
            send_email(destination, subject, html_body, text_body)
            for subject, html_body, text_body in rendered
        ),
        return_exceptions=True,
    )

    results: list[DispatchResult] = []
    for event, (subject, _, _), outcome in zip(events, rendered, outcomes):
        if isinstance(outcome, BaseException):
            result = DispatchResult(event=event, success=False, error=str(outcome) or type(outcome).__name__)
            log_with_context(
                logger,
                logging.WARNING,
                "Score notification failed",
                user_id=user_id,
                entity_id=event.entity_id,
                kind=event.kind.value,
                error=result.error,
            )
        else:
            result = DispatchResult(event=event, success=True, message_id=outcome.get("message_id"))
            log_with_context(
                logger,
                logging.INFO,
                "Score notification sent",
                user_id=user_id,
                entity_id=event.entity_id,
                kind=event.kind.value,
                message_id=result.message_id,
            )

        _record(user_id, event, destination, subject, result)
        results.append(result)

    return results
