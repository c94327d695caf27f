"""Services package."""
from passgate.services.audit_service import AuditService
from passgate.services.ceremony_service import AuthenticationCeremony, RegistrationCeremony, logout
from passgate.services.credential_service import CredentialRepository
from passgate.services.passkey_provider import (
    AuthResult,
    PasskeyProvider,
    RegisteredPasskey,
    get_passkey_provider,
)
from passgate.services.session_store import ServerSession, SessionStore, get_session_store

__all__ = [
    "AuditService",
    "AuthenticationCeremony",
    "RegistrationCeremony",
    "logout",
    "CredentialRepository",
    "AuthResult",
    "PasskeyProvider",
    "RegisteredPasskey",
    "get_passkey_provider",
    "ServerSession",
    "SessionStore",
    "get_session_store",
]
