"""Registration and authentication ceremonies.

Each ceremony is split into a start call, which stores opaque provider state
in the server-side session and returns challenge options, and a finish call,
which consumes that state exactly once. State is removed from the session
before verification, so it is cleared on every terminal outcome.
"""
import logging

from flask import current_app

from passgate.exceptions.auth_exceptions import ForbiddenError, PasskeyVerificationError
from passgate.exceptions.ceremony_exceptions import (
    AuthenticationNotStartedError,
    RegistrationNotStartedError,
)
from passgate.exceptions.validation_exceptions import (
    CredentialAlreadyRegisteredError,
    CredentialNotFoundError,
)
from passgate.services.audit_service import AuditService
from passgate.services.credential_service import CredentialRepository
from passgate.services.passkey_provider import get_passkey_provider
from passgate.utils.constants import DEFAULT_LANDING_PATH, AuditAction

logger = logging.getLogger(__name__)


def default_redirect_url():
    """Landing page used when no redirect was requested before login."""
    origin = current_app.config["WEBAUTHN_RP_ORIGIN"].rstrip("/")
    return f"{origin}{DEFAULT_LANDING_PATH}"


class RegistrationCeremony:
    """Enrolment of a new passkey for an already logged in user."""

    @staticmethod
    def start(session, username):
        """
        Begin registering a passkey.

        Args:
            session: ServerSession of the request
            username: Username asserted by the reverse proxy

        Returns:
            Credential creation options for the browser
        """
        user = CredentialRepository.get_user_with_credentials(username)

        options, state = get_passkey_provider().start_registration(
            user.user_handle,
            username,
            username,
            user.credential_ids(),
        )
        session.registration_state = state

        logger.info(f"Passkey registration started for {username}")
        AuditService.log_action(
            action=AuditAction.WEBAUTHN_REGISTER_INITIATED,
            username=username,
            user_id=user.id,
            resource_type="credential",
            description=f"Passkey registration started for {username}",
        )
        return options

    @staticmethod
    def finish(session, username, display_name, client_response):
        """
        Verify an attestation and store the new passkey.

        Args:
            session: ServerSession of the request
            username: Username asserted by the reverse proxy
            display_name: Label chosen for the passkey
            client_response: RegistrationResponse JSON from the browser

        Returns:
            The stored Credential

        Raises:
            RegistrationNotStartedError: If no registration is pending
            PasskeyVerificationError: If the attestation does not verify
            CredentialAlreadyRegisteredError: If the passkey is already stored
        """
        state = session.pop_registration_state()
        if state is None:
            logger.info(f"Registration finish without pending state for {username}")
            AuditService.log_registration_failed(username, "No registration in progress")
            raise RegistrationNotStartedError()

        try:
            passkey = get_passkey_provider().finish_registration(client_response, state)
        except PasskeyVerificationError as e:
            logger.warning(f"Passkey registration failed for {username}: {e}")
            AuditService.log_registration_failed(username, str(e))
            raise

        user = CredentialRepository.get_user_with_credentials(username)
        try:
            if passkey.credential_id in user.credential_ids():
                raise CredentialAlreadyRegisteredError()
            credential = CredentialRepository.add_credential(username, display_name, passkey)
        except CredentialAlreadyRegisteredError as e:
            AuditService.log_registration_failed(username, str(e), user_id=user.id)
            raise

        AuditService.log_action(
            action=AuditAction.WEBAUTHN_REGISTER_COMPLETED,
            username=username,
            user_id=user.id,
            resource_type="credential",
            resource_id=credential.id,
            metadata={"name": display_name, "backed_up": passkey.backed_up},
            description=f"Passkey '{display_name}' registered for {username}",
        )
        return credential


class AuthenticationCeremony:
    """Login with a registered passkey."""

    @staticmethod
    def start(session, username):
        """
        Begin authenticating a user.

        Args:
            session: ServerSession of the request
            username: Username asserted by the reverse proxy

        Returns:
            Credential request options, or None when no challenge is needed
            because the session is already logged in or was bootstrapped

        Raises:
            ForbiddenError: If the user has no passkey and bootstrap is disabled
        """
        if session.logged_in:
            return None

        user = CredentialRepository.get_user_with_credentials(username)

        if not user.has_credentials():
            if not current_app.config.get("PASSWORDLESS_BOOTSTRAP", True):
                logger.info(f"Refused bootstrap login for {username}")
                AuditService.log_login_failed("No passkey registered", username, user.id)
                raise ForbiddenError("No passkey registered")

            session.mark_logged_in()
            logger.info(f"Bootstrapped session for {username} without a passkey")
            AuditService.log_action(
                action=AuditAction.SESSION_BOOTSTRAP,
                username=username,
                user_id=user.id,
                resource_type="session",
                description=f"Session granted to {username} with no registered passkey",
            )
            return None

        options, state = get_passkey_provider().start_authentication(user.credentials)
        session.authentication_state = state

        AuditService.log_action(
            action=AuditAction.WEBAUTHN_LOGIN_INITIATED,
            username=username,
            user_id=user.id,
            resource_type="session",
            description=f"Passkey authentication started for {username}",
        )
        return options

    @staticmethod
    def landing_url(session):
        """Consume the stored post-login redirect, defaulting to the landing page."""
        return session.pop_redirect_url() or default_redirect_url()

    @staticmethod
    def finish(session, client_response, username=None):
        """
        Verify an assertion and log the session in.

        Args:
            session: ServerSession of the request
            client_response: AuthenticationResponse JSON from the browser
            username: Username asserted by the reverse proxy, if any, for auditing

        Returns:
            URL the browser should continue to

        Raises:
            AuthenticationNotStartedError: If no authentication is pending
            PasskeyVerificationError: If the assertion does not verify
        """
        state = session.pop_authentication_state()
        if state is None:
            logger.info("Authentication finish without pending state")
            raise AuthenticationNotStartedError()

        try:
            result = get_passkey_provider().finish_authentication(client_response, state)
            if result.needs_update:
                CredentialRepository.update_credential(result)
        except CredentialNotFoundError:
            logger.warning(f"Passkey used by {username} was removed during authentication")
            AuditService.log_login_failed("Credential no longer registered", username)
            raise PasskeyVerificationError()
        except PasskeyVerificationError as e:
            logger.warning(f"Passkey authentication failed for {username}: {e}")
            AuditService.log_login_failed(str(e), username)
            raise

        session.mark_logged_in()
        redirect_url = AuthenticationCeremony.landing_url(session)

        AuditService.log_action(
            action=AuditAction.WEBAUTHN_LOGIN_SUCCESS,
            username=username,
            resource_type="session",
            metadata={"counter": result.counter, "backed_up": result.backed_up},
            description="Passkey authentication succeeded",
        )
        return redirect_url


def logout(session, username=None):
    """Destroy the session; the store row and cookie are removed on save."""
    was_logged_in = session.logged_in
    session.clear()

    if was_logged_in:
        AuditService.log_action(
            action=AuditAction.USER_LOGOUT,
            username=username,
            resource_type="session",
            description="Session logged out",
        )
