"""Passkey registration and authentication endpoints."""
from flask import current_app, g, jsonify, request, session

from passgate.api import api_bp
from passgate.extensions import limiter
from passgate.schemas.passkey_schema import AuthenticationCredentialSchema, RegisterFinishSchema
from passgate.services.ceremony_service import AuthenticationCeremony, RegistrationCeremony
from passgate.utils.decorators import get_remote_user, login_required, remote_user_required
from passgate.utils.response import api_response


def ceremony_rate_limit():
    """Rate limit applied to every ceremony endpoint."""
    return current_app.config.get("RATELIMIT_CEREMONY", "30/minute")


@api_bp.route("/register", methods=["GET"])
@limiter.limit(ceremony_rate_limit)
@remote_user_required
@login_required
def register_begin():
    """
    Begin registering a passkey for the asserted user.

    Returns:
        200: Credential creation options
        401: Missing identity header or session not logged in
    """
    options = RegistrationCeremony.start(session, g.remote_user)
    return jsonify(options), 200


@api_bp.route("/register", methods=["POST"])
@limiter.limit(ceremony_rate_limit)
@remote_user_required
@login_required
def register_complete():
    """
    Complete passkey registration.

    Request body:
        name: Label for the passkey
        credential: PublicKeyCredential from navigator.credentials.create()

    Returns:
        201: Passkey registered
        400: Validation error
        401: Verification failed
        404: No registration in progress
        409: Passkey already registered
    """
    schema = RegisterFinishSchema()
    data = schema.load(request.get_json(silent=True))

    credential = RegistrationCeremony.finish(
        session,
        g.remote_user,
        data["name"],
        data["credential"],
    )

    return api_response(
        data={"credential": credential.to_public_dict()},
        message="Passkey registered successfully",
        status=201,
    )


@api_bp.route("/authenticate", methods=["GET"])
@limiter.limit(ceremony_rate_limit)
@remote_user_required
def authenticate_begin():
    """
    Begin authenticating the asserted user.

    Returns:
        200: {"challenge": options}, or {"challenge": null, "redirect_url": url}
            when the session is already logged in or no passkey is registered
            yet; the stored redirect is consumed in that case
        401: Missing identity header
        403: No passkey registered and bootstrap login is disabled
    """
    options = AuthenticationCeremony.start(session, g.remote_user)
    if options is None:
        redirect_url = AuthenticationCeremony.landing_url(session)
        return jsonify({"challenge": None, "redirect_url": redirect_url}), 200
    return jsonify({"challenge": options}), 200


@api_bp.route("/authenticate", methods=["POST"])
@limiter.limit(ceremony_rate_limit)
def authenticate_complete():
    """
    Complete passkey authentication.

    Request body:
        PublicKeyCredential from navigator.credentials.get()

    Returns:
        200: {"redirect_url": url}
        204: No authentication in progress
        400: Validation error
        401: Verification failed
    """
    schema = AuthenticationCredentialSchema()
    data = schema.load(request.get_json(silent=True))

    redirect_url = AuthenticationCeremony.finish(session, data, username=get_remote_user())
    return jsonify({"redirect_url": redirect_url}), 200
