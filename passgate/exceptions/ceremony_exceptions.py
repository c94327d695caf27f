"""Ceremony protocol exceptions.

These signal that a ceremony finish arrived without a matching start, which
usually means the session expired or the challenge was already consumed.
They are kept apart from verification failures so clients can restart the
ceremony instead of reporting a bad passkey.
"""
from passgate.exceptions.base import BaseAPIException


class CeremonyNotStartedError(BaseAPIException):
    """Raised when no ceremony state is pending in the session."""

    status_code = 404
    error_type = "CEREMONY_NOT_STARTED"
    message = "No ceremony in progress"


class RegistrationNotStartedError(CeremonyNotStartedError):
    """Raised when registration finish has no pending registration state."""

    message = "No registration in progress"


class AuthenticationNotStartedError(CeremonyNotStartedError):
    """Raised when authentication finish has no pending authentication state."""

    status_code = 204
    message = "No authentication in progress"
