"""API package."""
from flask import Blueprint
from passgate.utils.response import api_response

# Create main API blueprint
api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return api_response(
        data={"status": "healthy", "service": "passgate"},
        message="Service is running",
    )


def register_api_blueprints(app):
    """Register all API blueprints."""
    # Route modules attach their views to api_bp on import
    from passgate.api import ceremonies, credentials, gate  # noqa: F401
    from passgate.api.pages import pages_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(pages_bp)
