"""HTML pages for the login and passkey management flows."""
from flask import Blueprint, g, redirect, render_template, request, session

from passgate.services.credential_service import CredentialRepository
from passgate.utils.constants import DEFAULT_LANDING_PATH
from passgate.utils.decorators import page_login_required, remote_user_required
from passgate.utils.origins import validate_redirect

pages_bp = Blueprint("pages", __name__)


@pages_bp.route("/", methods=["GET"])
def index():
    """Send browsers to the passkey management page."""
    return redirect(DEFAULT_LANDING_PATH)


@pages_bp.route("/authenticate", methods=["GET"])
@remote_user_required
def authenticate_page():
    """
    Render the login page.

    Query parameters:
        redirect_url: Where to send the browser after login; must belong to
            an allowed origin

    Returns:
        200: Login page
        403: Redirect target not allowed
    """
    redirect_url = request.args.get("redirect_url")
    if redirect_url is not None:
        session.redirect_url = validate_redirect(redirect_url)

    return render_template("authenticate.html", username=g.remote_user)


@pages_bp.route("/credentials", methods=["GET"])
@page_login_required
@remote_user_required
def credentials_page():
    """Render the passkey management page."""
    return render_template(
        "credentials.html",
        username=g.remote_user,
        credentials=CredentialRepository.list_credentials(g.remote_user),
    )
