"""Application factory."""
import os
import logging

import click
import redis
from flask import Flask
from marshmallow import ValidationError as SchemaValidationError

from config import get_config
from passgate import extensions
from passgate.extensions import db, migrate, limiter
from passgate.extensions import session as flask_session
from passgate.middleware import RequestIDMiddleware, SecurityHeadersMiddleware
from passgate.exceptions.base import BaseAPIException
from passgate.services.passkey_provider import PasskeyProvider
from passgate.services.session_store import ServerSession, SessionStore
from passgate.utils.constants import SessionBackend
from passgate.utils.origins import AllowedOrigins
from passgate.utils.response import api_response

# Configure SQLAlchemy logging BEFORE any database operations
_log_level_env = os.getenv("SQLALCHEMY_LOG_LEVEL", "WARNING").upper()
_sqlalchemy_log_level = getattr(logging, _log_level_env, logging.WARNING)
logging.getLogger("sqlalchemy").setLevel(_sqlalchemy_log_level)
logging.getLogger("sqlalchemy.engine").setLevel(_sqlalchemy_log_level)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)

    Returns:
        Flask application instance
    """
    flask_app = Flask(__name__)

    # Load configuration
    config = get_config(config_name)
    flask_app.config.from_object(config)

    # Initialize extensions
    initialize_extensions(flask_app)

    # Setup middleware
    setup_middleware(flask_app)

    # Register blueprints
    register_blueprints(flask_app)

    # Register error handlers
    register_error_handlers(flask_app)

    # Register CLI commands
    register_commands(flask_app)

    # Setup logging
    setup_logging(flask_app)

    return flask_app


def initialize_extensions(app):
    """Initialize Flask extensions and the gateway's shared components."""
    # Database
    db.init_app(app)
    migrate.init_app(app, db)

    # Rate limiting; RATELIMIT_ENABLED switches enforcement off
    limiter.init_app(app)

    # Server-side session backend
    if app.config.get("SESSION_TYPE") == SessionBackend.REDIS:
        extensions.redis_client = redis.from_url(app.config["REDIS_URL"])
        app.config["SESSION_REDIS"] = extensions.redis_client
    else:
        app.config["SESSION_SQLALCHEMY"] = db

    # Flask-Session, carrying the gateway's typed session payload
    flask_session.init_app(app)
    app.session_interface.session_class = ServerSession
    app.extensions["passgate.session_store"] = SessionStore.from_app(app)

    # Relying party
    allowed_origins = AllowedOrigins.from_config(app.config)
    app.extensions["passgate.allowed_origins"] = allowed_origins
    app.extensions["passgate.passkey_provider"] = PasskeyProvider.from_config(app.config, allowed_origins)


def setup_middleware(app):
    """Setup application middleware."""
    RequestIDMiddleware(app)
    SecurityHeadersMiddleware(app)


def register_blueprints(app):
    """Register application blueprints."""
    from passgate.api import register_api_blueprints

    register_api_blueprints(app)


def register_error_handlers(app):
    """Register error handlers."""

    @app.errorhandler(BaseAPIException)
    def handle_api_exception(error):
        """Handle custom API exceptions."""
        return api_response(
            success=False,
            message=error.message,
            status=error.status_code,
            error_type=error.error_type,
            error_details=error.error_details,
        )

    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(error):
        """Handle request body validation errors."""
        return api_response(
            success=False,
            message="Validation failed",
            status=400,
            error_type="VALIDATION_ERROR",
            error_details=error.messages,
        )

    @app.errorhandler(404)
    def handle_not_found(error):
        """Handle 404 errors."""
        return api_response(
            success=False,
            message="Resource not found",
            status=404,
            error_type="NOT_FOUND",
        )

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        """Handle 405 errors."""
        return api_response(
            success=False,
            message="Method not allowed",
            status=405,
            error_type="METHOD_NOT_ALLOWED",
        )

    @app.errorhandler(429)
    def handle_rate_limited(error):
        """Handle rate limit errors."""
        return api_response(
            success=False,
            message="Too many requests",
            status=429,
            error_type="RATE_LIMIT_EXCEEDED",
        )

    @app.errorhandler(500)
    def handle_internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f"Internal server error: {error}")
        return api_response(
            success=False,
            message="Internal server error",
            status=500,
            error_type="INTERNAL_ERROR",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle unexpected errors."""
        app.logger.error(f"Unexpected error: {error}", exc_info=True)
        db.session.rollback()
        return api_response(
            success=False,
            message="An unexpected error occurred",
            status=500,
            error_type="INTERNAL_ERROR",
        )


def register_commands(app):
    """Register CLI commands."""

    @app.cli.command("init-db")
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo("Database tables created")

    @app.cli.command("purge-sessions")
    def purge_sessions():
        """Remove expired sessions from the session store."""
        from passgate.jobs.session_cleanup_job import purge_expired_sessions

        result = purge_expired_sessions()
        click.echo(f"Purged {result['purged_count']} expired sessions")
        for error in result["errors"]:
            click.echo(f"  - {error}", err=True)


def setup_logging(app):
    """Setup application logging."""
    log_level = getattr(logging, app.config.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
    )

    # Configure root logger so module loggers under passgate.* share the handler
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if app.config.get("LOG_TO_STDOUT") and not any(
        getattr(handler, "_passgate", False) for handler in root_logger.handlers
    ):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(log_level)
        stream_handler._passgate = True
        root_logger.addHandler(stream_handler)

    logging.getLogger("werkzeug").setLevel(logging.INFO)
    logging.getLogger("passgate").setLevel(log_level)

    # Configure Flask app logger
    app.logger.setLevel(log_level)

    # Configure SQLAlchemy logging level (also set at module level before DB init)
    sqlalchemy_log_level = getattr(logging, app.config.get("SQLALCHEMY_LOG_LEVEL", "WARNING"), logging.WARNING)
    logging.getLogger("sqlalchemy").setLevel(sqlalchemy_log_level)
    logging.getLogger("sqlalchemy.engine").setLevel(sqlalchemy_log_level)

    app.logger.info("Application startup")
