"""Pytest configuration and fixtures."""
import json

import pytest
from fido2.utils import websafe_decode, websafe_encode

from passgate import create_app
from passgate.exceptions.auth_exceptions import PasskeyVerificationError
from passgate.extensions import db as _db
from passgate.models import Credential, User
from passgate.services.passkey_provider import AuthResult, RegisteredPasskey


class FakePasskeyProvider:
    """Deterministic stand-in for the fido2 backed passkey provider.

    A credential's raw id is taken from the ``rawId`` of the client response;
    authentication responses carry the authenticator counter in ``counter``.
    """

    def __init__(self):
        self.reject = False
        self.fail_start = False
        self.excluded = None

    def start_registration(self, user_id, username, display_name, excluded_credential_ids):
        if self.fail_start:
            raise RuntimeError("provider unavailable")
        self.excluded = list(excluded_credential_ids)
        options = {
            "publicKey": {
                "challenge": "registration-challenge",
                "user": {"id": websafe_encode(user_id), "name": username, "displayName": display_name},
                "excludeCredentials": [{"type": "public-key", "id": websafe_encode(cid)} for cid in self.excluded],
            }
        }
        return options, {"fido2": {"challenge": "registration-challenge"}}

    def finish_registration(self, response, state):
        if self.reject or state.get("fido2", {}).get("challenge") != "registration-challenge":
            raise PasskeyVerificationError()
        raw_id = websafe_decode(response["rawId"])
        return RegisteredPasskey(
            credential_id=raw_id,
            credential_data=b"attested:" + raw_id,
            sign_count=0,
            backed_up=False,
        )

    def start_authentication(self, credentials):
        if self.fail_start:
            raise RuntimeError("provider unavailable")
        allowed = {websafe_encode(c.credential_id): c.sign_count for c in credentials}
        options = {
            "publicKey": {
                "challenge": "authentication-challenge",
                "allowCredentials": [{"type": "public-key", "id": cid} for cid in allowed],
            }
        }
        return options, {"fido2": {"challenge": "authentication-challenge"}, "credentials": allowed}

    def finish_authentication(self, response, state):
        stored = state["credentials"].get(response["rawId"])
        if self.reject or stored is None:
            raise PasskeyVerificationError()
        counter = response.get("counter", 0)
        if (counter or stored) and counter <= stored:
            raise PasskeyVerificationError("Possible cloned authenticator")
        return AuthResult(
            credential_id=websafe_decode(response["rawId"]),
            counter=counter,
            backed_up=False,
            needs_update=counter > stored,
        )


def attestation(raw_id):
    """Build a registration response body for the fake provider."""
    encoded = websafe_encode(raw_id)
    return {
        "id": encoded,
        "rawId": encoded,
        "type": "public-key",
        "response": {"attestationObject": "o2NmbXRkbm9uZQ", "clientDataJSON": "e30"},
        "clientExtensionResults": {},
    }


def assertion(raw_id, counter=0):
    """Build an authentication response body for the fake provider."""
    encoded = websafe_encode(raw_id)
    return {
        "id": encoded,
        "rawId": encoded,
        "type": "public-key",
        "response": {"authenticatorData": "AAAA", "clientDataJSON": "e30", "signature": "AAAA"},
        "counter": counter,
    }


@pytest.fixture(scope="session")
def app():
    """Create application for testing."""
    app = create_app("testing")
    return app


@pytest.fixture(scope="function")
def db(app):
    """Create database for testing."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="function")
def passkey_provider(app, monkeypatch):
    """Replace the passkey provider with a deterministic fake."""
    provider = FakePasskeyProvider()
    monkeypatch.setitem(app.extensions, "passgate.passkey_provider", provider)
    return provider


@pytest.fixture(scope="function")
def session_store(app):
    """The application's session store."""
    return app.extensions["passgate.session_store"]


@pytest.fixture(scope="function")
def session_model(app):
    """Model of the rows written by the SQLAlchemy session backend."""
    return app.session_interface.sql_session_model


@pytest.fixture(scope="function")
def stored_sessions(db, session_model):
    """Read back the payload of every stored session."""
    def read():
        return [json.loads(row.data) for row in session_model.query.all()]

    return read


@pytest.fixture(scope="function")
def client(app, db, passkey_provider):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope="function")
def test_user(db):
    """Create a user with no passkeys."""
    user = User(username="alice")
    user.save()
    return user


@pytest.fixture(scope="function")
def test_credential(test_user):
    """Register a passkey for the test user."""
    credential = Credential(
        user_id=test_user.id,
        credential_id=b"alice-key-1",
        credential_data=b"attested:alice-key-1",
        sign_count=5,
        backed_up=False,
        name="YubiKey",
    )
    credential.save()
    return credential


@pytest.fixture(scope="function")
def logged_in_client(client):
    """Test client whose session was bootstrapped for a user without passkeys."""
    response = client.get("/api/authenticate", headers={"X-Remote-User": "carol"})
    assert response.status_code == 200
    assert response.get_json()["challenge"] is None
    return client


@pytest.fixture(scope="function")
def make_attestation():
    """Factory for registration response bodies."""
    return attestation


@pytest.fixture(scope="function")
def make_assertion():
    """Factory for authentication response bodies."""
    return assertion
