"""Audit log model."""
from passgate.extensions import db
from passgate.models.base import BaseModel
from passgate.utils.constants import AuditAction


class AuditLog(BaseModel):
    """Audit log model for tracking ceremony outcomes."""

    __tablename__ = "audit_logs"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=True, index=True)
    username = db.Column(db.String(255), nullable=True, index=True)
    action = db.Column(db.Enum(AuditAction), nullable=False, index=True)

    # Context
    resource_type = db.Column(db.String(50), nullable=True)
    resource_id = db.Column(db.String(255), nullable=True)

    # Request details
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.Text, nullable=True)
    request_id = db.Column(db.String(64), nullable=True, index=True)

    # Additional data
    extra_data = db.Column(db.JSON, nullable=True)
    description = db.Column(db.Text, nullable=True)

    # Success/failure
    success = db.Column(db.Boolean, default=True, nullable=False)
    error_message = db.Column(db.Text, nullable=True)

    # Relationships
    user = db.relationship("User", back_populates="audit_logs")

    # Indexes for common queries
    __table_args__ = (
        db.Index("idx_audit_user_action", "user_id", "action"),
    )

    def __repr__(self):
        """String representation of AuditLog."""
        return f"<AuditLog action={self.action} username={self.username}>"
