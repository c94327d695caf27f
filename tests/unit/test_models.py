"""Unit tests for models."""
import uuid
from datetime import timedelta

import pytest

from passgate.models import AuditLog, Credential, User
from passgate.models.base import utcnow
from passgate.utils.constants import AuditAction


@pytest.mark.unit
class TestUserModel:
    """Tests for User model."""

    def test_create_user(self, db):
        """Test creating a user."""
        user = User(username="alice")
        user.save()

        assert user.id is not None
        assert user.created_at is not None
        assert user.has_credentials() is False
        assert user.user_handle == uuid.UUID(user.id).bytes

    def test_user_to_dict(self, test_user):
        """Test user to_dict method."""
        user_dict = test_user.to_dict()

        assert user_dict["username"] == "alice"
        assert "created_at" in user_dict

    def test_deleting_user_removes_credentials(self, test_credential, db):
        """Test that passkeys are owned by their user."""
        test_credential.user.delete()

        assert Credential.query.count() == 0


@pytest.mark.unit
class TestCredentialModel:
    """Tests for Credential model."""

    def test_public_dict(self, test_credential):
        """Test the id/name pair exposed to browsers."""
        assert test_credential.to_public_dict() == {"id": "YWxpY2Uta2V5LTE", "name": "YubiKey"}

    def test_credentials_ordered_by_creation(self, test_credential):
        """Test that a user's passkeys keep their enrolment order."""
        later = Credential(
            user_id=test_credential.user_id,
            credential_id=b"alice-key-2",
            credential_data=b"attested:alice-key-2",
            name="Phone",
            created_at=utcnow() + timedelta(seconds=1),
        )
        later.save()

        assert [c.name for c in test_credential.user.credentials] == ["YubiKey", "Phone"]


@pytest.mark.unit
class TestAuditLogModel:
    """Tests for AuditLog model."""

    def test_create_audit_log(self, test_user):
        """Test storing an audit entry."""
        entry = AuditLog(
            action=AuditAction.WEBAUTHN_LOGIN_SUCCESS,
            username="alice",
            user_id=test_user.id,
            extra_data={"counter": 3},
        )
        entry.save()

        assert AuditLog.query.one().action == AuditAction.WEBAUTHN_LOGIN_SUCCESS
        assert test_user.audit_logs == [entry]
