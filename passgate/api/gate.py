"""Session gate endpoints used by the reverse proxy and the browser."""
from flask import session

from passgate.api import api_bp
from passgate.services.ceremony_service import logout
from passgate.utils.decorators import get_remote_user, is_logged_in
from passgate.utils.response import api_response


@api_bp.route("/validate", methods=["GET"])
def validate():
    """
    Check whether the request carries a logged in session.

    Intended as the target of a reverse proxy auth subrequest.

    Returns:
        200: Session is logged in
        401: Session is not logged in
    """
    if is_logged_in(session):
        return "", 200
    return "", 401


@api_bp.route("/logout", methods=["POST"])
def logout_session():
    """
    Destroy the current session.

    Returns:
        204: Session destroyed
    """
    logout(session, username=get_remote_user())
    return api_response(status=204)
