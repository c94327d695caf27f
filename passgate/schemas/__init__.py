"""Schemas package."""
from passgate.schemas.passkey_schema import (
    AuthenticationCredentialSchema,
    CredentialRenameSchema,
    RegisterFinishSchema,
    RegistrationCredentialSchema,
)

__all__ = [
    "AuthenticationCredentialSchema",
    "CredentialRenameSchema",
    "RegisterFinishSchema",
    "RegistrationCredentialSchema",
]
