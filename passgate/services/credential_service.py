"""Credential repository."""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from passgate.exceptions.base import StorageError
from passgate.exceptions.validation_exceptions import (
    CredentialAlreadyRegisteredError,
    CredentialNotFoundError,
    UserNotFoundError,
)
from passgate.extensions import db
from passgate.models.base import utcnow
from passgate.models.credential import Credential
from passgate.models.user import User

logger = logging.getLogger(__name__)


class CredentialRepository:
    """Durable mapping from usernames to their registered passkeys."""

    @staticmethod
    def get_user(username):
        """Get a user by username, or None."""
        try:
            return User.query.filter_by(username=username).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to load user {username}: {e}")
            raise StorageError()

    @classmethod
    def get_user_with_credentials(cls, username):
        """
        Get a user and their passkeys, provisioning the user on first sight.

        Args:
            username: Username asserted by the reverse proxy

        Returns:
            User instance; ``user.credentials`` is ordered by creation time

        Raises:
            StorageError: If the database is unavailable
        """
        user = cls.get_user(username)
        if user is not None:
            return user

        try:
            user = User(username=username)
            user.save()
            logger.info(f"Provisioned user {username}")
            return user
        except IntegrityError:
            # Another request provisioned the same username first
            db.session.rollback()
            user = cls.get_user(username)
            if user is None:
                raise StorageError()
            return user
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to provision user {username}: {e}")
            raise StorageError()

    @classmethod
    def add_credential(cls, username, display_name, passkey):
        """
        Persist a newly registered passkey.

        Args:
            username: Owner's username
            display_name: User chosen label
            passkey: RegisteredPasskey returned by the passkey provider

        Returns:
            Credential instance

        Raises:
            UserNotFoundError: If the user does not exist
            CredentialAlreadyRegisteredError: If the credential id is already stored
        """
        user = cls.get_user(username)
        if user is None:
            raise UserNotFoundError()

        credential = Credential(
            user_id=user.id,
            credential_id=passkey.credential_id,
            credential_data=passkey.credential_data,
            sign_count=passkey.sign_count,
            backed_up=passkey.backed_up,
            name=display_name,
        )
        try:
            credential.save()
        except IntegrityError:
            db.session.rollback()
            logger.warning(f"Rejected duplicate passkey registration for {username}")
            raise CredentialAlreadyRegisteredError()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to add credential for {username}: {e}")
            raise StorageError()

        logger.info(f"Registered passkey {credential.id} for {username}")
        return credential

    @staticmethod
    def update_credential(auth_result):
        """
        Record the counter and backup state reported by an authentication.

        The stored counter is never lowered.

        Args:
            auth_result: AuthResult returned by the passkey provider

        Returns:
            Updated Credential instance

        Raises:
            CredentialNotFoundError: If the credential no longer exists
        """
        try:
            credential = Credential.query.filter_by(credential_id=auth_result.credential_id).first()
            if credential is None:
                raise CredentialNotFoundError()

            credential.sign_count = max(credential.sign_count or 0, auth_result.counter)
            credential.backed_up = auth_result.backed_up
            credential.last_used_at = utcnow()
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to update credential after authentication: {e}")
            raise StorageError()

        return credential

    @staticmethod
    def _find_owned(credential_id, username=None):
        query = Credential.query.filter_by(credential_id=credential_id)
        if username is not None:
            query = query.join(User).filter(User.username == username)
        return query.first()

    @classmethod
    def delete_credential(cls, credential_id, username=None):
        """
        Remove a passkey.

        Args:
            credential_id: Raw credential id
            username: When given, only a credential owned by this user is removed

        Returns:
            Dictionary with the id, user_id and name of the removed credential

        Raises:
            CredentialNotFoundError: If no matching credential exists
        """
        try:
            credential = cls._find_owned(credential_id, username)
            if credential is None:
                raise CredentialNotFoundError()
            removed = {
                "id": credential.id,
                "user_id": credential.user_id,
                "name": credential.name,
            }
            credential.delete()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to delete credential for {username}: {e}")
            raise StorageError()

        logger.info(f"Deleted passkey {removed['id']} for {username or removed['user_id']}")
        return removed

    @classmethod
    def rename_credential(cls, credential_id, username, name):
        """
        Change the label of a passkey owned by ``username``.

        Raises:
            CredentialNotFoundError: If no matching credential exists
        """
        try:
            credential = cls._find_owned(credential_id, username)
            if credential is None:
                raise CredentialNotFoundError()
            credential.update(name=name)
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to rename credential for {username}: {e}")
            raise StorageError()

        return credential

    @classmethod
    def list_credentials(cls, username):
        """List the passkeys of a user as id/name pairs."""
        user = cls.get_user(username)
        if user is None:
            return []
        return [credential.to_public_dict() for credential in user.credentials]
