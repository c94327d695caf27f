"""Production environment configuration."""
import os
from config.base import BaseConfig


class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG = False
    TESTING = False

    # Enforce environment variables in production
    SECRET_KEY = os.environ["SECRET_KEY"]
    SQLALCHEMY_DATABASE_URI = os.environ["DATABASE_URL"]
    WEBAUTHN_RP_ID = os.environ["WEBAUTHN_RP_ID"]
    WEBAUTHN_RP_ORIGIN = os.environ["WEBAUTHN_RP_ORIGIN"]

    # Strict security settings; the cookie is shared with every protected
    # virtual host under the relying party domain
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_DOMAIN = os.getenv("SESSION_COOKIE_DOMAIN", WEBAUTHN_RP_ID)

    # Production logging
    LOG_LEVEL = "WARNING"
    LOG_TO_STDOUT = True

    # Disable SQL echo in production
    SQLALCHEMY_ECHO = False
