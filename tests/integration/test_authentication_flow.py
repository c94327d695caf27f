"""Integration tests for passkey authentication."""
from datetime import datetime

import pytest

from passgate.models import AuditLog, Credential
from passgate.utils.constants import AuditAction

ALICE = {"X-Remote-User": "alice"}


@pytest.mark.integration
class TestAuthenticationFlow:
    """Integration tests for /api/authenticate."""

    def test_login_with_passkey(self, client, test_credential, make_assertion):
        """Test a complete login ending on the default landing page."""
        response = client.get("/api/authenticate", headers=ALICE)
        assert response.status_code == 200

        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))

        assert response.status_code == 200
        assert response.get_json() == {"redirect_url": "https://auth.example.com/credentials"}
        assert client.get("/api/validate").status_code == 200
        assert Credential.query.one().sign_count == 6
        assert AuditLog.query.filter_by(action=AuditAction.WEBAUTHN_LOGIN_SUCCESS).count() == 1

    def test_login_redirects_to_stored_url_once(self, client, test_credential, make_assertion, stored_sessions):
        """Test that the requested redirect is honoured and then forgotten."""
        response = client.get("/authenticate?redirect_url=https://app.example.com/dashboard", headers=ALICE)
        assert response.status_code == 200

        client.get("/api/authenticate", headers=ALICE)
        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))
        assert response.get_json() == {"redirect_url": "https://app.example.com/dashboard"}

        assert "redirect_url" not in stored_sessions()[0]

        client.post("/api/logout")
        client.get("/api/authenticate", headers=ALICE)
        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=7))
        assert response.get_json() == {"redirect_url": "https://auth.example.com/credentials"}

    def test_already_logged_in_gets_no_challenge(self, logged_in_client):
        """Test that a logged in session is not challenged again."""
        response = logged_in_client.get("/api/authenticate", headers={"X-Remote-User": "carol"})

        assert response.get_json() == {"challenge": None, "redirect_url": "https://auth.example.com/credentials"}

    def test_bootstrap_consumes_stored_redirect(self, client, stored_sessions):
        """Test that a bootstrapped login lands on the validated redirect exactly once."""
        client.get("/authenticate?redirect_url=https://app.example.com/x", headers={"X-Remote-User": "carol"})

        response = client.get("/api/authenticate", headers={"X-Remote-User": "carol"})
        assert response.get_json() == {"challenge": None, "redirect_url": "https://app.example.com/x"}
        assert "redirect_url" not in stored_sessions()[0]

        response = client.get("/api/authenticate", headers={"X-Remote-User": "carol"})
        assert response.get_json()["redirect_url"] == "https://auth.example.com/credentials"

    def test_bootstrap_ignores_query_redirect(self, client):
        """Test that the landing page comes from the session, not from the request."""
        response = client.get(
            "/api/authenticate?redirect_url=https://evil.com/",
            headers={"X-Remote-User": "carol"},
        )

        assert response.get_json()["redirect_url"] == "https://auth.example.com/credentials"

    def test_finish_without_start(self, client, make_assertion):
        """Test that a finish with nothing pending answers 204."""
        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))

        assert response.status_code == 204
        assert response.data == b""
        assert client.get("/api/validate").status_code == 401

    def test_finish_with_expired_session(self, client, test_credential, make_assertion, db, session_model):
        """Test that an expired session is treated like one that never started."""
        client.get("/api/authenticate", headers=ALICE)
        session_model.query.one().expiry = datetime(2000, 1, 1)
        db.session.commit()

        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))

        assert response.status_code == 204

    def test_finish_twice(self, client, test_credential, make_assertion):
        """Test that a challenge can only be answered once."""
        client.get("/api/authenticate", headers=ALICE)
        client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))
        client.post("/api/logout")

        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=7))

        assert response.status_code == 204

    def test_rejected_assertion(self, client, test_credential, passkey_provider, make_assertion):
        """Test that a failing assertion answers 401 and mutates nothing."""
        client.get("/api/authenticate", headers=ALICE)
        passkey_provider.reject = True

        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))

        assert response.status_code == 401
        assert response.get_json()["error"]["type"] == "AUTHENTICATION_ERROR"
        assert Credential.query.one().sign_count == 5
        assert client.get("/api/validate").status_code == 401

        # The challenge was consumed by the failed attempt
        passkey_provider.reject = False
        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=6))
        assert response.status_code == 204

    def test_cloned_authenticator_rejected(self, client, test_credential, make_assertion):
        """Test that a counter that went backwards cannot log in."""
        client.get("/api/authenticate", headers=ALICE)

        response = client.post("/api/authenticate", json=make_assertion(b"alice-key-1", counter=2))

        assert response.status_code == 401
        assert client.get("/api/validate").status_code == 401

    @pytest.mark.parametrize(
        "body",
        [
            None,
            {"id": "x"},
            {"id": "x", "rawId": "x", "type": "password", "response": {}},
            {"id": "x", "rawId": "x", "type": "public-key", "response": {"clientDataJSON": "e30"}},
        ],
    )
    def test_malformed_body(self, client, test_credential, body):
        """Test that malformed responses are refused before verification."""
        client.get("/api/authenticate", headers=ALICE)

        response = client.post("/api/authenticate", json=body)

        assert response.status_code == 400
        assert response.get_json()["error"]["type"] == "VALIDATION_ERROR"

    def test_provider_failure_is_opaque(self, client, test_credential, passkey_provider):
        """Test that provider crashes surface as a bare 500."""
        passkey_provider.fail_start = True

        response = client.get("/api/authenticate", headers=ALICE)

        assert response.status_code == 500
        data = response.get_json()
        assert data["message"] == "An unexpected error occurred"
        assert "provider unavailable" not in response.get_data(as_text=True)
