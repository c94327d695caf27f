"""Unit tests for the credential repository."""
import pytest

from passgate.exceptions.validation_exceptions import (
    CredentialAlreadyRegisteredError,
    CredentialNotFoundError,
    UserNotFoundError,
)
from passgate.models import Credential, User
from passgate.services.credential_service import CredentialRepository
from passgate.services.passkey_provider import AuthResult, RegisteredPasskey


def passkey(raw_id, sign_count=0):
    return RegisteredPasskey(
        credential_id=raw_id,
        credential_data=b"attested:" + raw_id,
        sign_count=sign_count,
        backed_up=False,
    )


@pytest.mark.unit
class TestCredentialRepository:
    """Tests for CredentialRepository."""

    def test_get_user_with_credentials_provisions_user(self, db):
        """Test that an unknown username is created on first sight."""
        user = CredentialRepository.get_user_with_credentials("dave")

        assert user.id is not None
        assert user.username == "dave"
        assert user.credentials == []
        assert User.query.filter_by(username="dave").count() == 1

    def test_get_user_with_credentials_is_idempotent(self, test_credential):
        """Test that an existing user is returned with their passkeys."""
        user = CredentialRepository.get_user_with_credentials("alice")

        assert user.id == test_credential.user_id
        assert user.credential_ids() == [b"alice-key-1"]
        assert User.query.count() == 1

    def test_user_handle_is_stable(self, test_user):
        """Test that the WebAuthn user handle derives from the user id."""
        assert len(test_user.user_handle) == 16
        assert test_user.user_handle == CredentialRepository.get_user_with_credentials("alice").user_handle

    def test_add_credential(self, test_user):
        """Test persisting a registered passkey."""
        credential = CredentialRepository.add_credential("alice", "Laptop", passkey(b"new-key"))

        assert credential.name == "Laptop"
        assert credential.user_id == test_user.id
        assert credential.credential_data == b"attested:new-key"
        assert test_user.has_credentials()

    def test_add_credential_duplicate_id_conflicts(self, test_credential, db):
        """Test that a credential id can belong to only one user."""
        User(username="bob").save()

        with pytest.raises(CredentialAlreadyRegisteredError) as exc_info:
            CredentialRepository.add_credential("bob", "Stolen", passkey(b"alice-key-1"))

        assert exc_info.value.status_code == 409
        assert Credential.query.count() == 1

    def test_add_credential_unknown_user(self, db):
        """Test that credentials cannot be added for a missing user."""
        with pytest.raises(UserNotFoundError):
            CredentialRepository.add_credential("nobody", "Key", passkey(b"k"))

    def test_update_credential_advances_counter(self, test_credential):
        """Test recording a newer counter and backup state."""
        result = AuthResult(credential_id=b"alice-key-1", counter=9, backed_up=True, needs_update=True)

        credential = CredentialRepository.update_credential(result)

        assert credential.sign_count == 9
        assert credential.backed_up is True
        assert credential.last_used_at is not None

    def test_update_credential_never_lowers_counter(self, test_credential):
        """Test that a stale result cannot roll the counter back."""
        result = AuthResult(credential_id=b"alice-key-1", counter=2, backed_up=True, needs_update=True)

        credential = CredentialRepository.update_credential(result)

        assert credential.sign_count == 5

    def test_update_credential_missing(self, db):
        """Test updating a credential that no longer exists."""
        result = AuthResult(credential_id=b"gone", counter=1, backed_up=False, needs_update=True)

        with pytest.raises(CredentialNotFoundError):
            CredentialRepository.update_credential(result)

    def test_delete_credential(self, test_credential):
        """Test revoking a passkey."""
        removed = CredentialRepository.delete_credential(b"alice-key-1", username="alice")

        assert removed["name"] == "YubiKey"
        assert Credential.query.count() == 0

    def test_delete_credential_missing(self, db):
        """Test revoking an unknown passkey."""
        with pytest.raises(CredentialNotFoundError):
            CredentialRepository.delete_credential(b"unknown")

    def test_delete_credential_of_another_user(self, test_credential):
        """Test that a user cannot revoke someone else's passkey."""
        User(username="bob").save()

        with pytest.raises(CredentialNotFoundError):
            CredentialRepository.delete_credential(b"alice-key-1", username="bob")

        assert Credential.query.count() == 1

    def test_rename_credential(self, test_credential):
        """Test relabelling a passkey."""
        credential = CredentialRepository.rename_credential(b"alice-key-1", "alice", "Backup key")

        assert credential.name == "Backup key"

    def test_list_credentials(self, test_credential):
        """Test the id/name listing used by the management page."""
        CredentialRepository.add_credential("alice", "Phone", passkey(b"alice-key-2"))

        listing = CredentialRepository.list_credentials("alice")

        assert listing == [
            {"id": test_credential.encoded_id, "name": "YubiKey"},
            {"id": "YWxpY2Uta2V5LTI", "name": "Phone"},
        ]

    def test_list_credentials_unknown_user(self, db):
        """Test listing for a username that was never seen."""
        assert CredentialRepository.list_credentials("nobody") == []
