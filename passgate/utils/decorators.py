"""Access gate decorators."""
from functools import wraps
from urllib.parse import urlencode

from flask import current_app, g, redirect, request, session

from passgate.exceptions.auth_exceptions import UnauthorizedError
from passgate.utils.constants import DEFAULT_LANDING_PATH, SessionKey


def is_logged_in(sess=None) -> bool:
    """Check whether a session has completed authentication.

    Args:
        sess: Session mapping, defaults to the current request session

    Returns:
        True only if the session's logged_in flag is exactly True
    """
    if sess is None:
        sess = session
    return sess.get(SessionKey.LOGGED_IN) is True


def get_remote_user():
    """Read the username asserted by the reverse proxy.

    Returns:
        The header value, or None if absent or empty
    """
    header = current_app.config.get("REMOTE_USER_HEADER", "X-Remote-User")
    value = request.headers.get(header, "").strip()
    return value or None


def remote_user_required(f):
    """Decorator to require the trusted identity header.

    Sets g.remote_user to the asserted username.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        username = get_remote_user()
        if username is None:
            current_app.logger.info("No remote user header present")
            raise UnauthorizedError("Missing identity assertion")

        g.remote_user = username
        return f(*args, **kwargs)

    return decorated_function


def login_required(f):
    """Decorator to require a logged in session for API endpoints."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_logged_in():
            raise UnauthorizedError("Login required")
        return f(*args, **kwargs)

    return decorated_function


def login_page_redirect():
    """Build the redirect sending an unauthenticated browser to the login page."""
    origin = current_app.config["WEBAUTHN_RP_ORIGIN"].rstrip("/")
    query = urlencode({"redirect_url": f"{origin}{DEFAULT_LANDING_PATH}"})
    return redirect(f"/authenticate?{query}", code=307)


def page_login_required(f):
    """Decorator to require a logged in session for HTML pages.

    Unauthenticated browsers are redirected to the login page.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_logged_in():
            return login_page_redirect()
        return f(*args, **kwargs)

    return decorated_function
