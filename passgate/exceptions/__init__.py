"""Exceptions package."""
from passgate.exceptions.base import BaseAPIException, StorageError
from passgate.exceptions.auth_exceptions import (
    UnauthorizedError,
    ForbiddenError,
    ForbiddenRedirectError,
    PasskeyVerificationError,
)
from passgate.exceptions.ceremony_exceptions import (
    CeremonyNotStartedError,
    RegistrationNotStartedError,
    AuthenticationNotStartedError,
)
from passgate.exceptions.validation_exceptions import (
    ValidationError,
    NotFoundError,
    ConflictError,
    BadRequestError,
    CredentialAlreadyRegisteredError,
    CredentialNotFoundError,
    UserNotFoundError,
)

__all__ = [
    "BaseAPIException",
    "StorageError",
    "UnauthorizedError",
    "ForbiddenError",
    "ForbiddenRedirectError",
    "PasskeyVerificationError",
    "CeremonyNotStartedError",
    "RegistrationNotStartedError",
    "AuthenticationNotStartedError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "BadRequestError",
    "CredentialAlreadyRegisteredError",
    "CredentialNotFoundError",
    "UserNotFoundError",
]
