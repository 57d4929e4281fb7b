"""
Submission notifier: formats a reviewer's ratings as plain text and sends one
email to the fixed recipient through Resend.
"""
from __future__ import annotations

from typing import Sequence

import httpx

from app.config import Settings
from app.core.errors import ConfigurationMissing, DeliverySendError, InvalidPayload
from app.schemas.ratings import SubmissionEntry
from app.services.request_logging import upstream_call

PROVIDER = "resend"


def _label(value: str | None) -> str:
    return value if value else "N/A"


def format_rating_line(entry: SubmissionEntry) -> str:
    return (
        f"{entry.symbol}: {_label(entry.selected_rating)} "
        f"(Consensus: {_label(entry.consensus_rating)}, Credora: {_label(entry.credora_rating)})"
    )


def validate_submission(name: str | None, email: str | None, ratings: Sequence[SubmissionEntry] | None) -> None:
    if not name or not email or not ratings:
        raise InvalidPayload("Missing required fields")


def format_submission_message(name: str, email: str, ratings: Sequence[SubmissionEntry]) -> str:
    """Header naming the reviewer, then one line per rating in payload order."""
    validate_submission(name, email, ratings)
    ratings_table = "\n".join(format_rating_line(r) for r in ratings)
    return f"Reviewer: {name} ({email})\n\nRatings:\n{ratings_table}"


async def send_submission(
    settings: Settings,
    name: str,
    email: str,
    ratings: Sequence[SubmissionEntry],
    client: httpx.AsyncClient | None = None,
) -> None:
    """
    Send exactly one notification email. Returns once Resend accepts the message.

    Raises:
        InvalidPayload: name, email or ratings missing/empty
        ConfigurationMissing: RESEND_API_KEY not set (no call is made)
        DeliverySendError: provider call failed or was rejected
    """
    message = format_submission_message(name, email, ratings)
    if not settings.resend_api_key:
        raise ConfigurationMissing("Missing Resend API key")

    body = {
        "from": settings.ratings_from_email,
        "to": [settings.ratings_to_email],
        "subject": settings.ratings_email_subject,
        "text": message,
    }
    headers = {"Authorization": f"Bearer {settings.resend_api_key}"}
    with upstream_call(
        PROVIDER,
        "emails.send",
        secret=settings.resend_api_key,
        recipient=settings.ratings_to_email,
    ) as call:
        own_client = client is None
        if own_client:
            client = httpx.AsyncClient()
        try:
            response = await client.post(f"{settings.resend_api_url}/emails", json=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            call.status = e.response.status_code
            raise DeliverySendError(_provider_error_message(e.response)) from e
        except httpx.HTTPError as e:
            raise DeliverySendError(str(e) or type(e).__name__) from e
        finally:
            if own_client:
                await client.aclose()
        call.counts["ratings"] = len(ratings)


def _provider_error_message(response: httpx.Response) -> str:
    """Resend error bodies look like {"name": ..., "message": ...}."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"Resend API returned HTTP {response.status_code}"
