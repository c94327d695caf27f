"""Base model with common fields and functionality."""
import uuid
from datetime import datetime, timezone
from passgate.extensions import db


def utcnow():
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class BaseModel(db.Model):
    """Base model class with common fields."""

    __abstract__ = True

    id = db.Column(
        db.String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        unique=True,
        nullable=False,
    )
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    def save(self):
        """Save the model instance to database."""
        db.session.add(self)
        db.session.commit()
        return self

    def delete(self):
        """Delete the model instance."""
        db.session.delete(self)
        db.session.commit()

    def update(self, **kwargs):
        """Update model fields."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
        self.updated_at = utcnow()
        db.session.commit()
        return self

    def to_dict(self, exclude=None):
        """
        Convert model to dictionary.

        Args:
            exclude: List of fields to exclude from output

        Returns:
            Dictionary representation of the model
        """
        exclude = exclude or []
        result = {}
        for column in self.__table__.columns:
            if column.name not in exclude:
                value = getattr(self, column.name)
                if isinstance(value, datetime):
                    result[column.name] = value.isoformat()
                else:
                    result[column.name] = value
        return result
