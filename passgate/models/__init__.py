"""Models package."""
from passgate.models.base import BaseModel
from passgate.models.user import User
from passgate.models.credential import Credential
from passgate.models.audit_log import AuditLog

__all__ = [
    "BaseModel",
    "User",
    "Credential",
    "AuditLog",
]
