"""Audit service."""
import logging

from flask import g, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from passgate.extensions import db
from passgate.models.audit_log import AuditLog
from passgate.utils.constants import AuditAction

logger = logging.getLogger(__name__)


class AuditService:
    """Service for audit logging."""

    @staticmethod
    def log_action(
        action,
        username=None,
        user_id=None,
        resource_type=None,
        resource_id=None,
        metadata=None,
        description=None,
        success=True,
        error_message=None,
    ):
        """
        Create an audit log entry.

        The entry is written in its own transaction after the audited change
        has been committed or rolled back. A failure to write it is logged and
        does not affect the outcome reported to the client.

        Args:
            action: AuditAction enum value
            username: Username asserted for the request
            user_id: ID of the user, if provisioned
            resource_type: Type of resource being acted upon
            resource_id: ID of resource being acted upon
            metadata: Additional metadata dictionary
            description: Human-readable description
            success: Whether the action succeeded
            error_message: Error message if action failed

        Returns:
            AuditLog instance, or None if it could not be written
        """
        ip_address = None
        user_agent = None
        request_id = None

        if has_request_context():
            ip_address = request.remote_addr
            user_agent = request.headers.get("User-Agent")
            request_id = g.get("request_id")

        log_entry = AuditLog(
            action=action,
            username=username,
            user_id=user_id,
            resource_type=resource_type,
            resource_id=resource_id,
            ip_address=ip_address,
            user_agent=user_agent,
            request_id=request_id,
            extra_data=metadata,
            description=description,
            success=success,
            error_message=error_message,
        )
        try:
            log_entry.save()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to write audit entry {action.value} for {username}: {e}")
            return None

        return log_entry

    @staticmethod
    def get_user_activity(username, limit=50):
        """
        Get recent activity for a username.

        Args:
            username: Username
            limit: Maximum number of records to return

        Returns:
            List of AuditLog instances
        """
        return (
            AuditLog.query.filter_by(username=username)
            .order_by(AuditLog.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def log_registration_failed(username, error_message, user_id=None):
        """Log a rejected passkey registration."""
        return AuditService.log_action(
            action=AuditAction.WEBAUTHN_REGISTER_FAILED,
            username=username,
            user_id=user_id,
            resource_type="credential",
            description=f"Passkey registration failed for {username}",
            success=False,
            error_message=error_message,
        )

    @staticmethod
    def log_login_failed(error_message, username=None, user_id=None):
        """Log a rejected passkey authentication."""
        return AuditService.log_action(
            action=AuditAction.WEBAUTHN_LOGIN_FAILED,
            username=username,
            user_id=user_id,
            resource_type="session",
            description="Passkey authentication failed",
            success=False,
            error_message=error_message,
        )
