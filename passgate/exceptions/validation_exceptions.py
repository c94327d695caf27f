"""Validation and resource exceptions."""
from passgate.exceptions.base import BaseAPIException


class ValidationError(BaseAPIException):
    """Raised when request data validation fails."""

    status_code = 400
    error_type = "VALIDATION_ERROR"
    message = "Validation failed"


class NotFoundError(BaseAPIException):
    """Raised when a requested resource is not found."""

    status_code = 404
    error_type = "NOT_FOUND"
    message = "Resource not found"


class ConflictError(BaseAPIException):
    """Raised when a resource conflict occurs."""

    status_code = 409
    error_type = "CONFLICT"
    message = "Resource conflict"


class BadRequestError(BaseAPIException):
    """Raised when the request is malformed or invalid."""

    status_code = 400
    error_type = "BAD_REQUEST"
    message = "Bad request"


class CredentialAlreadyRegisteredError(ConflictError):
    """Raised when a passkey with the same credential id already exists."""

    message = "This passkey is already registered"


class CredentialNotFoundError(NotFoundError):
    """Raised when a credential is not found."""

    message = "Credential not found"


class UserNotFoundError(NotFoundError):
    """Raised when user is not found."""

    message = "User not found"
