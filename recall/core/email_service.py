"""Outbound email service.

Renders and sends score notification emails through the Resend API.
"""

import html
import logging
from typing import Any

import httpx

from recall.core.config import get_settings
from recall.core.scoring.types import (
    SCORE_LABELS,
    SUB_SCORE_KEYS,
    NotificationEvent,
    NotificationKind,
    ScoreSet,
)

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects or fails a send."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


async def _send_via_resend(
    to_emails: list[str],
    subject: str,
    html_body: str,
    text_body: str | None = None,
) -> dict[str, Any]:
    """Send email via Resend API."""
    settings = get_settings()

    if not settings.RESEND_API_KEY:
        raise EmailDeliveryError("RESEND_API_KEY is not configured")

    payload: dict[str, Any] = {
        "from": f"{settings.RESEND_FROM_NAME} <{settings.RESEND_FROM_EMAIL}>",
        "to": to_emails,
        "subject": subject,
        "html": html_body,
    }
    if text_body:
        payload["text"] = text_body

    async with httpx.AsyncClient(timeout=15) as client:
        response = await client.post(
            RESEND_API_URL,
            headers={
                "Authorization": f"Bearer {settings.RESEND_API_KEY}",
                "Content-Type": "application/json",
            },
            json=payload,
        )
        if response.is_error:
            logger.error(f"Resend API error {response.status_code}: {response.text}")
            raise EmailDeliveryError(
                f"Failed to send email: {response.status_code}",
                status_code=response.status_code,
            )

        data = response.json()
        message_id = data.get("id", "")
        logger.info(
            f"Resend email sent to {len(to_emails)} recipients, "
            f"subject='{subject}', message_id={message_id}"
        )

        return {"message_id": message_id, "status": "sent"}


async def send_email(
    to: str | list[str],
    subject: str,
    html_body: str,
    text_body: str | None = None,
) -> dict[str, Any]:
    """
    Send a transactional email.

    Args:
        to: Single email or list of emails
        subject: Email subject
        html_body: HTML content
        text_body: Optional plain text fallback

    Returns:
        Dict with message_id and status

    Raises:
        EmailDeliveryError: If the provider is not configured or the send fails
    """
    to_list = [to] if isinstance(to, str) else to
    return await _send_via_resend(to_list, subject, html_body, text_body)


def _score_breakdown_html(score_set: ScoreSet | None, heading: str) -> str:
    if score_set is None:
        return ""
    rows = "".join(
        f"""
            <tr>
                <td style="color: #64748b; padding: 8px 0;">{SCORE_LABELS[key]}</td>
                <td style="text-align: right; padding: 8px 0;"><strong>{score_set.get(key)}</strong></td>
            </tr>"""
        for key in SUB_SCORE_KEYS
    )
    return f"""
        <div style="background: white; border-radius: 8px; padding: 20px; margin: 20px 0;
                    border: 1px solid #e2e8f0;">
            <h3 style="margin: 0 0 15px 0; color: #1e293b; font-size: 16px;">{heading}</h3>
            <table style="width: 100%; border-collapse: collapse;">{rows}
            </table>
        </div>"""


def render_score_notification(
    event: NotificationEvent,
    brand_name: str,
    score_set: ScoreSet | None = None,
    base_url: str | None = None,
) -> tuple[str, str, str]:
    """
    Build subject, HTML body and plain-text body for a score notification.

    Args:
        event: Event decided by the trigger evaluator
        brand_name: Display name of the scored brand
        score_set: Current sub-scores, rendered as a breakdown when given
        base_url: Dashboard URL for the report link (defaults to APP_BASE_URL)

    Returns:
        (subject, html_body, text_body)
    """
    report_url = f"{(base_url or get_settings().APP_BASE_URL).rstrip('/')}/recall-score"
    name = html.escape(brand_name)

    if event.kind == NotificationKind.THRESHOLD_REACHED:
        subject = f"🎉 {brand_name} has reached a Recall Score of {event.current_score}!"
        headline = "🎉 Milestone Achieved!"
        accent = "#6366f1"
        intro = (
            f"Great news! <strong>{name}</strong> has reached a Recall Score of "
            f"<strong style=\"color: {accent}; font-size: 24px;\">{event.current_score}</strong>, "
            f"crossing your threshold of {event.threshold_or_delta}!"
        )
        outro = (
            "Your brand is now better optimized for AI discovery and recommendations. "
            "Keep iterating to improve your AI-readiness even further!"
        )
        breakdown = _score_breakdown_html(score_set, "Score Breakdown")
        text_body = (
            f"{brand_name} has reached a Recall Score of {event.current_score}, "
            f"crossing your threshold of {event.threshold_or_delta}.\n\n"
            f"View the full report: {report_url}"
        )
    else:
        previous = event.previous_score if event.previous_score is not None else "N/A"
        subject = f"📈 {brand_name} improved by {event.threshold_or_delta} points!"
        headline = "📈 Significant Improvement!"
        accent = "#22c55e"
        intro = (
            f"<strong>{name}</strong> has improved significantly: "
            f"<strong>{previous}</strong> → "
            f"<strong style=\"color: {accent}; font-size: 24px;\">{event.current_score}</strong> "
            f"(+{event.threshold_or_delta} points)."
        )
        outro = (
            "Your optimization efforts are paying off. "
            "Keep refining your brand to maximize AI discoverability!"
        )
        breakdown = _score_breakdown_html(score_set, "Current Score Breakdown")
        text_body = (
            f"{brand_name} improved from {previous} to {event.current_score} "
            f"(+{event.threshold_or_delta} points).\n\n"
            f"View the full report: {report_url}"
        )

    html_body = f"""
    <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <div style="background: {accent}; padding: 30px; border-radius: 12px 12px 0 0; text-align: center;">
            <h1 style="color: white; margin: 0; font-size: 28px;">{headline}</h1>
        </div>
        <div style="background: #f8fafc; padding: 30px; border-radius: 0 0 12px 12px;
                    border: 1px solid #e2e8f0; border-top: none;">
            <p style="font-size: 16px; color: #334155;">{intro}</p>
            {breakdown}
            <p style="font-size: 14px; color: #64748b;">{outro}</p>
            <div style="text-align: center; margin-top: 30px;">
                <a href="{report_url}"
                   style="background: {accent}; color: white; padding: 12px 30px;
                          border-radius: 8px; text-decoration: none; font-weight: 600;">
                    View Full Report
                </a>
            </div>
        </div>
        <p style="text-align: center; color: #94a3b8; font-size: 12px; margin-top: 20px;">
            Recall AI - AI Visibility Optimization Platform
        </p>
    </div>
    """

    return subject, html_body, text_body

