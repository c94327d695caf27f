"""Passkey cryptography, delegated to python-fido2.

The ceremony code only ever sees JSON-friendly option payloads and opaque
state dictionaries; everything that touches attestation or assertion data
lives here.
"""
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Sequence, Tuple

from flask import current_app
from fido2.features import webauthn_json_mapping
from fido2.server import Fido2Server
from fido2.utils import websafe_decode, websafe_encode
from fido2.webauthn import (
    AttestationConveyancePreference,
    AttestedCredentialData,
    AuthenticationResponse,
    PublicKeyCredentialDescriptor,
    PublicKeyCredentialRpEntity,
    PublicKeyCredentialType,
    PublicKeyCredentialUserEntity,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)

from passgate.exceptions.auth_exceptions import PasskeyVerificationError

logger = logging.getLogger(__name__)

# Browsers send PublicKeyCredential.toJSON(), with base64url encoded binary fields
webauthn_json_mapping.enabled = True

# Authenticator data flag: credential is currently backed up (synced passkey)
FLAG_BACKUP_STATE = 0x10

# Errors python-fido2 raises for responses that fail verification or parsing
VERIFICATION_ERRORS = (ValueError, KeyError, TypeError)


@dataclass(frozen=True)
class RegisteredPasskey:
    """Outcome of a successful registration."""

    credential_id: bytes
    credential_data: bytes
    sign_count: int
    backed_up: bool


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a successful authentication."""

    credential_id: bytes
    counter: int
    backed_up: bool
    needs_update: bool


def to_json_friendly(value):
    """Convert fido2 option objects into plain JSON data."""
    if isinstance(value, Mapping):
        return {key: to_json_friendly(item) for key, item in value.items()}
    if isinstance(value, (bytes, bytearray)):
        return websafe_encode(bytes(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_json_friendly(item) for item in value]
    return value


def _portable(state) -> Dict[str, Any]:
    # Ceremony state is stored as JSON in the session
    return json.loads(json.dumps(state))


class PasskeyProvider:
    """Relying party operations backed by ``fido2.server.Fido2Server``."""

    def __init__(self, server: Fido2Server):
        self.server = server

    @classmethod
    def from_config(cls, config, allowed_origins):
        """
        Build a provider for the configured relying party.

        Args:
            config: Flask config mapping
            allowed_origins: AllowedOrigins used to verify the client data origin

        Returns:
            PasskeyProvider instance
        """
        rp = PublicKeyCredentialRpEntity(
            name=config["WEBAUTHN_RP_NAME"],
            id=config["WEBAUTHN_RP_ID"],
        )
        server = Fido2Server(
            rp,
            attestation=AttestationConveyancePreference.NONE,
            verify_origin=allowed_origins.allows,
        )
        return cls(server)

    def start_registration(
        self,
        user_id: bytes,
        username: str,
        display_name: str,
        excluded_credential_ids: Iterable[bytes],
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Begin a registration ceremony.

        Args:
            user_id: WebAuthn user handle
            username: Account name shown by the authenticator
            display_name: Human readable account name
            excluded_credential_ids: Credential ids the authenticator must not re-register

        Returns:
            Tuple of (creation options, opaque registration state)
        """
        user = PublicKeyCredentialUserEntity(
            name=username,
            id=user_id,
            display_name=display_name,
        )
        exclude = [
            PublicKeyCredentialDescriptor(type=PublicKeyCredentialType.PUBLIC_KEY, id=credential_id)
            for credential_id in excluded_credential_ids
        ]
        options, state = self.server.register_begin(
            user,
            exclude,
            resident_key_requirement=ResidentKeyRequirement.PREFERRED,
            user_verification=UserVerificationRequirement.PREFERRED,
        )
        return to_json_friendly(options), {"fido2": _portable(state)}

    def finish_registration(self, response, state) -> RegisteredPasskey:
        """
        Verify an attestation response.

        Args:
            response: RegistrationResponse JSON sent by the browser
            state: State returned by start_registration

        Returns:
            RegisteredPasskey

        Raises:
            PasskeyVerificationError: If the response does not verify
        """
        if not isinstance(response, Mapping):
            raise PasskeyVerificationError("Malformed registration response")

        try:
            auth_data = self.server.register_complete(state["fido2"], response)
        except VERIFICATION_ERRORS as e:
            logger.warning(f"Passkey registration rejected: {e}")
            raise PasskeyVerificationError()

        credential_data = auth_data.credential_data
        if credential_data is None:
            logger.warning("Passkey registration rejected: no attested credential data")
            raise PasskeyVerificationError()

        return RegisteredPasskey(
            credential_id=bytes(credential_data.credential_id),
            credential_data=bytes(credential_data),
            sign_count=auth_data.counter,
            backed_up=bool(auth_data.flags & FLAG_BACKUP_STATE),
        )

    def start_authentication(self, credentials: Sequence[Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Begin an authentication ceremony.

        Args:
            credentials: Stored credentials exposing credential_data, sign_count and backed_up

        Returns:
            Tuple of (request options, opaque authentication state). The state
            carries the allowed credentials so that finishing needs no lookup.
        """
        attested = [AttestedCredentialData(credential.credential_data) for credential in credentials]
        options, state = self.server.authenticate_begin(
            attested,
            user_verification=UserVerificationRequirement.PREFERRED,
        )
        allowed = [
            {
                "data": websafe_encode(credential.credential_data),
                "sign_count": credential.sign_count,
                "backed_up": bool(credential.backed_up),
            }
            for credential in credentials
        ]
        return to_json_friendly(options), {"fido2": _portable(state), "credentials": allowed}

    def finish_authentication(self, response, state) -> AuthResult:
        """
        Verify an assertion response.

        Args:
            response: AuthenticationResponse JSON sent by the browser
            state: State returned by start_authentication

        Returns:
            AuthResult

        Raises:
            PasskeyVerificationError: If the response does not verify, or the
                signature counter went backwards
        """
        if not isinstance(response, Mapping):
            raise PasskeyVerificationError("Malformed authentication response")

        try:
            stored = {}
            attested = []
            for entry in state["credentials"]:
                credential = AttestedCredentialData(websafe_decode(entry["data"]))
                attested.append(credential)
                stored[bytes(credential.credential_id)] = entry

            matched = self.server.authenticate_complete(state["fido2"], attested, response)
            auth_data = AuthenticationResponse.from_dict(response).response.authenticator_data
        except VERIFICATION_ERRORS as e:
            logger.warning(f"Passkey authentication rejected: {e}")
            raise PasskeyVerificationError()

        credential_id = bytes(matched.credential_id)
        entry = stored[credential_id]
        stored_counter = int(entry.get("sign_count", 0))
        counter = auth_data.counter

        # Counters stuck at zero mean the authenticator does not implement them
        if (counter or stored_counter) and counter <= stored_counter:
            logger.warning(
                f"Passkey authentication rejected: counter {counter} did not advance past {stored_counter}"
            )
            raise PasskeyVerificationError("Possible cloned authenticator")

        backed_up = bool(auth_data.flags & FLAG_BACKUP_STATE)
        return AuthResult(
            credential_id=credential_id,
            counter=counter,
            backed_up=backed_up,
            needs_update=counter > stored_counter or backed_up != bool(entry.get("backed_up")),
        )


def get_passkey_provider() -> PasskeyProvider:
    """Get the passkey provider configured on the current application."""
    return current_app.extensions["passgate.passkey_provider"]
