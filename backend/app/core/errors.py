"""
Error taxonomy for the ratings form. None of these are retried; every failure
is terminal for the current attempt and the user may try the action again.
"""
from __future__ import annotations


class RatingsFormError(Exception):
    """Base error. status_code is the HTTP status the API renders it with."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationMissing(RatingsFormError):
    """A required credential is absent. Checked before any outbound call."""

    status_code = 500


class SourceUnavailable(RatingsFormError):
    """Upstream rating query failed or returned an unexpected shape."""

    status_code = 500


class MissingSourceCredentials(ConfigurationMissing, SourceUnavailable):
    """Rating provider credentials absent: a configuration error that also fails the asset load."""


class ValidationFailed(RatingsFormError):
    """Local precondition not met; no network call was made."""

    status_code = 400


class InvalidPayload(ValidationFailed):
    """Submission missing name, email or ratings."""


class DeliverySendError(RatingsFormError):
    """Notification dispatch failed."""

    status_code = 500
