"""User model."""
import uuid
from passgate.extensions import db
from passgate.models.base import BaseModel


class User(BaseModel):
    """User known to the gateway.

    Rows are provisioned on first sight of a username asserted by the
    reverse proxy; the gateway never accepts usernames from request bodies.
    """

    __tablename__ = "users"

    username = db.Column(db.String(255), unique=True, nullable=False, index=True)

    # Relationships
    credentials = db.relationship(
        "Credential",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Credential.created_at",
    )
    audit_logs = db.relationship("AuditLog", back_populates="user")

    def __repr__(self):
        """String representation of User."""
        return f"<User {self.username}>"

    @property
    def user_handle(self) -> bytes:
        """WebAuthn user handle: the 16 raw bytes of the user id."""
        return uuid.UUID(self.id).bytes

    def credential_ids(self):
        """Get the raw credential ids of all enrolled passkeys."""
        return [credential.credential_id for credential in self.credentials]

    def has_credentials(self) -> bool:
        """Check if the user has at least one enrolled passkey."""
        return len(self.credentials) > 0
