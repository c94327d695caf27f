"""Base configuration for all environments."""
import os
from datetime import timedelta


def _env_bool(name, default):
    """Read a boolean flag from the environment."""
    return os.getenv(name, str(default)).lower() == "true"


def _env_list(name, default=""):
    """Read a comma separated list from the environment."""
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class BaseConfig:
    """Base configuration class with common settings."""

    # Application
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    DEBUG = False
    TESTING = False

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL", "sqlite:///passgate.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = os.getenv("SQLALCHEMY_ECHO", "False").lower() == "true"
    SQLALCHEMY_LOG_LEVEL = os.getenv("SQLALCHEMY_LOG_LEVEL", "WARNING")
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    # Relying Party
    WEBAUTHN_RP_ID = os.getenv("WEBAUTHN_RP_ID", "localhost")
    WEBAUTHN_RP_NAME = os.getenv("WEBAUTHN_RP_NAME", "passgate")
    WEBAUTHN_RP_ORIGIN = os.getenv("WEBAUTHN_RP_ORIGIN", "https://localhost")
    WEBAUTHN_EXTRA_ALLOWED_ORIGINS = _env_list("WEBAUTHN_EXTRA_ALLOWED_ORIGINS")
    WEBAUTHN_ALLOW_SUBDOMAINS = _env_bool("WEBAUTHN_ALLOW_SUBDOMAINS", True)

    # Users without any enrolled passkey are logged in on the strength of the
    # upstream identity header alone
    PASSWORDLESS_BOOTSTRAP = _env_bool("PASSWORDLESS_BOOTSTRAP", True)

    # Header injected by the reverse proxy after it authenticated the transport
    REMOTE_USER_HEADER = os.getenv("REMOTE_USER_HEADER", "X-Remote-User")

    # Server-side sessions (Flask-Session)
    SESSION_TYPE = os.getenv("SESSION_TYPE", "sqlalchemy")
    SESSION_SQLALCHEMY_TABLE = "sessions"
    SESSION_KEY_PREFIX = os.getenv("SESSION_KEY_PREFIX", "passgate:session:")
    SESSION_SERIALIZATION_FORMAT = "json"
    SESSION_USE_SIGNER = True
    SESSION_PERMANENT = True
    SESSION_LIFETIME_SECONDS = int(os.getenv("SESSION_LIFETIME_SECONDS", "86400"))
    PERMANENT_SESSION_LIFETIME = timedelta(seconds=SESSION_LIFETIME_SECONDS)
    # The expiry only slides forward when a request changes the session
    SESSION_REFRESH_EACH_REQUEST = False
    SESSION_REDIS = None  # Will be set at app initialization
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "passgate_session")
    SESSION_COOKIE_DOMAIN = os.getenv("SESSION_COOKIE_DOMAIN") or None
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", True)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

    # Redis
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Rate Limiting
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_CEREMONY = os.getenv("RATELIMIT_CEREMONY", "30/minute")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_TO_STDOUT = os.getenv("LOG_TO_STDOUT", "False").lower() == "true"

    # API Versioning
    API_VERSION = "1.0.0"
    ENVELOPE_VERSION = "1.0"
