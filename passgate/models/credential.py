"""Passkey credential model."""
from fido2.utils import websafe_encode

from passgate.extensions import db
from passgate.models.base import BaseModel


class Credential(BaseModel):
    """A registered passkey."""

    __tablename__ = "credentials"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    # Authenticator assigned id, unique across all users
    credential_id = db.Column(db.LargeBinary(1023), nullable=False)

    # Serialized attested credential data; opaque to everything but the passkey provider
    credential_data = db.Column(db.LargeBinary, nullable=False)

    sign_count = db.Column(db.Integer, nullable=False, default=0)
    backed_up = db.Column(db.Boolean, nullable=False, default=False)
    name = db.Column(db.String(100), nullable=False)
    last_used_at = db.Column(db.DateTime(timezone=True), nullable=True)

    # Relationships
    user = db.relationship("User", back_populates="credentials")

    __table_args__ = (
        db.UniqueConstraint("credential_id", name="uix_credential_id"),
    )

    def __repr__(self):
        """String representation of Credential."""
        return f"<Credential user_id={self.user_id} name={self.name!r}>"

    @property
    def encoded_id(self) -> str:
        """Base64url encoded credential id, as used in URLs and JSON."""
        return websafe_encode(self.credential_id)

    def to_public_dict(self):
        """Convert to the id/name pair exposed to browsers."""
        return {
            "id": self.encoded_id,
            "name": self.name,
        }
