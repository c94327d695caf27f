"""Application constants and enums."""
from enum import Enum


class SessionKey:
    """Keys recognized in the server-side session payload."""

    LOGGED_IN = "logged_in"
    REGISTRATION_STATE = "registration_state"
    AUTHENTICATION_STATE = "authentication_state"
    REDIRECT_URL = "redirect_url"


class SessionBackend(str, Enum):
    """Session store backends."""

    SQLALCHEMY = "sqlalchemy"
    REDIS = "redis"


class AuditAction(str, Enum):
    """Audit log action types."""

    # Session actions
    USER_LOGOUT = "user.logout"
    SESSION_BOOTSTRAP = "session.bootstrap"

    # WebAuthn actions
    WEBAUTHN_REGISTER_INITIATED = "webauthn.register.initiated"
    WEBAUTHN_REGISTER_COMPLETED = "webauthn.register.completed"
    WEBAUTHN_REGISTER_FAILED = "webauthn.register.failed"
    WEBAUTHN_LOGIN_INITIATED = "webauthn.login.initiated"
    WEBAUTHN_LOGIN_SUCCESS = "webauthn.login.success"
    WEBAUTHN_LOGIN_FAILED = "webauthn.login.failed"
    WEBAUTHN_CREDENTIAL_DELETED = "webauthn.credential.deleted"
    WEBAUTHN_CREDENTIAL_RENAMED = "webauthn.credential.renamed"


# Error type constants
class ErrorType:
    """Error type constants for API responses."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"


# Post-login landing page, relative to the relying party origin
DEFAULT_LANDING_PATH = "/credentials"
