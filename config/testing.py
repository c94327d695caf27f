"""Testing environment configuration."""
from config.base import BaseConfig
import os


class TestingConfig(BaseConfig):
    """Testing configuration."""

    TESTING = True
    DEBUG = True

    # Explicitly set SECRET_KEY for testing
    SECRET_KEY = os.getenv("SECRET_KEY", "test-secret-key-for-testing")

    # Use in-memory SQLite for testing
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ECHO = False
    SQLALCHEMY_ENGINE_OPTIONS = {}

    # Relying party used by the test suite
    WEBAUTHN_RP_ID = "example.com"
    WEBAUTHN_RP_NAME = "passgate-test"
    WEBAUTHN_RP_ORIGIN = "https://auth.example.com"
    WEBAUTHN_EXTRA_ALLOWED_ORIGINS = ["https://app.example.com"]
    WEBAUTHN_ALLOW_SUBDOMAINS = True
    PASSWORDLESS_BOOTSTRAP = True

    # Test client talks plain http to localhost
    SESSION_TYPE = "sqlalchemy"
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_DOMAIN = None

    # Disable rate limiting in tests
    RATELIMIT_ENABLED = False

    # Use different Redis DB for testing
    REDIS_URL = "redis://localhost:6379/15"
