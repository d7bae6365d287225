# agenda/services/mailer.py
"""
Client for the external transactional email endpoint.

The endpoint receives ``{"invitation_id": <id>}``, renders the invitation
(accept link ``<origin>/accept-invite?token=<token>``) and delivers it.
On failure it answers with ``{"error": "<message>"}``; that message is
surfaced to the user verbatim.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

import httpx

from agenda.core import config
from agenda.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

# (invitation_id) -> confirmation message
InvitationSender = Callable[[int], str]


def accept_url(token: str, origin: Optional[str] = None) -> str:
    return f"{(origin or config.APP_ORIGIN).rstrip('/')}/accept-invite?token={token}"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text or f"Email endpoint returned HTTP {response.status_code}"


def send_invitation_email(invitation_id: int) -> str:
    """POST the invitation id to the mail endpoint; raises ExternalServiceError on failure."""
    if not config.MAIL_ENDPOINT_URL:
        raise ExternalServiceError("Email sending is not configured")

    headers = {"Content-Type": "application/json"}
    if config.MAIL_ENDPOINT_KEY:
        headers["Authorization"] = f"Bearer {config.MAIL_ENDPOINT_KEY}"

    try:
        response = httpx.post(
            config.MAIL_ENDPOINT_URL,
            json={"invitation_id": invitation_id},
            headers=headers,
            timeout=config.MAIL_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as e:
        logger.error("mail endpoint unreachable for invitation_id=%s: %s", invitation_id, e)
        raise ExternalServiceError("Could not reach the email service") from e

    if response.is_success:
        logger.info("invitation email sent invitation_id=%s", invitation_id)
        try:
            body = response.json()
        except ValueError:
            return "Email sent"
        return str(body.get("message") or "Email sent") if isinstance(body, dict) else "Email sent"

    message = _error_message(response)
    logger.warning(
        "mail endpoint rejected invitation_id=%s status=%s error=%r",
        invitation_id,
        response.status_code,
        message,
    )
    raise ExternalServiceError(message)


def get_mailer() -> InvitationSender:
    """FastAPI dependency; tests override it with a fake sender."""
    return send_invitation_email
