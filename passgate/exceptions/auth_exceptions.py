"""Authentication and authorization exceptions."""
from passgate.exceptions.base import BaseAPIException


class UnauthorizedError(BaseAPIException):
    """Raised when authentication is required but not provided."""

    status_code = 401
    error_type = "AUTHENTICATION_ERROR"
    message = "Authentication required"


class ForbiddenError(BaseAPIException):
    """Raised when user lacks permissions for the requested action."""

    status_code = 403
    error_type = "AUTHORIZATION_ERROR"
    message = "You don't have permission to perform this action"


class ForbiddenRedirectError(ForbiddenError):
    """Raised when a redirect target is not one of the allowed origins."""

    error_type = "FORBIDDEN_REDIRECT"
    message = "Redirect target is not allowed"


class PasskeyVerificationError(BaseAPIException):
    """Raised when the authenticator response fails verification."""

    status_code = 401
    error_type = "AUTHENTICATION_ERROR"
    message = "Passkey verification failed"
